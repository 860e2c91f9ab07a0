"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - EntityAccessor is async because implementations do IO; the query builder
      and pager that feed it stay synchronous and pure
    - LoginAttemptStore is sync: the in-memory store does no IO and is called
      under the throttle's lock
"""

from typing import TYPE_CHECKING, Any, Mapping, Protocol, Sequence
from uuid import UUID

from app.core.query_builder import FieldFilter, SortOrder

if TYPE_CHECKING:
    from app.core.login_throttle import LoginAttemptRecord


class EntityAccessor(Protocol):
    """Contract for reading/writing one entity type — implemented by shell."""
    async def count(self, filters: Sequence[FieldFilter]) -> int: ...
    async def find(
        self,
        filters: Sequence[FieldFilter],
        order: SortOrder | None,
        limit: int,
        offset: int,
    ) -> list[Any]: ...
    async def find_by_id(self, record_id: UUID) -> Any | None: ...
    async def find_one(self, filters: Sequence[FieldFilter]) -> Any | None: ...
    async def insert(self, fields: Mapping[str, Any]) -> UUID: ...
    async def update_by_id(
        self, record_id: UUID, fields: Mapping[str, Any],
    ) -> bool: ...
    async def decrement_if_available(
        self, record_id: UUID, field: str, amount: int,
    ) -> bool: ...
    async def delete_by_id(self, record_id: UUID) -> bool: ...


class LoginAttemptStore(Protocol):
    """Contract for failed-login bookkeeping — keyed by normalized identity."""
    def get(self, identity: str) -> "LoginAttemptRecord | None": ...
    def save(self, identity: str, record: "LoginAttemptRecord") -> None: ...
    def delete(self, identity: str) -> None: ...
