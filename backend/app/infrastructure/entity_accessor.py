"""SQL Entity Accessor — SQLAlchemy implementation of the EntityAccessor protocol.

Invariants:
    - FieldFilters on unknown or hidden fields compile to FALSE (match nothing)
    - SortOrder on unknown or hidden fields is ignored (natural order)
    - Writes flush but never commit: the calling service owns the transaction
    - IntegrityError -> ConflictError, any other SQLAlchemyError -> DatabaseError

Design Decisions:
    - One generic class per model instead of per-entity repositories: the
      query builder already expresses every listing need as FieldFilters
    - CONTAINS uses icontains(autoescape=True): user input is a literal
      substring, `%` and `_` carry no wildcard meaning
    - Non-string columns are cast to text for CONTAINS so searching a number
      as text still works on every backend
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Iterable, Mapping, Sequence
from uuid import UUID

from sqlalchemy import String, cast, false, func, inspect, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import MatchOperator
from app.core.errors import ConflictError, DatabaseError, ErrorContext
from app.core.query_builder import FieldFilter, SortOrder
from app.db.base import Base

logger = logging.getLogger(__name__)


class SqlEntityAccessor:
    """Count/find/insert/update/delete for one ORM model."""

    def __init__(
        self,
        db: AsyncSession,
        model: type[Base],
        hidden_fields: Iterable[str] = (),
    ):
        self.db = db
        self.model = model
        self.hidden_fields = frozenset(hidden_fields)
        self._columns = inspect(model).columns

    @property
    def entity(self) -> str:
        return self.model.__name__

    # ─── Reads ───────────────────────────────────────────────────

    async def count(self, filters: Sequence[FieldFilter]) -> int:
        query = select(func.count()).select_from(self.model)
        query = query.where(*self._where(filters))
        async with self._translate_errors("count"):
            result = await self.db.execute(query)
            return result.scalar_one()

    async def find(
        self,
        filters: Sequence[FieldFilter],
        order: SortOrder | None,
        limit: int,
        offset: int,
    ) -> list[Any]:
        query = select(self.model).where(*self._where(filters))
        order_by = self._order_by(order)
        if order_by is not None:
            query = query.order_by(order_by)
        query = query.limit(limit).offset(offset)
        async with self._translate_errors("find"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def find_by_id(self, record_id: UUID) -> Any | None:
        async with self._translate_errors("find_by_id"):
            return await self.db.get(self.model, record_id)

    async def find_one(self, filters: Sequence[FieldFilter]) -> Any | None:
        query = select(self.model).where(*self._where(filters)).limit(1)
        async with self._translate_errors("find_one"):
            result = await self.db.execute(query)
            return result.scalars().first()

    # ─── Writes ──────────────────────────────────────────────────

    async def insert(self, fields: Mapping[str, Any]) -> UUID:
        record = self.model(**fields)
        async with self._translate_errors("insert"):
            self.db.add(record)
            await self.db.flush()
        return record.id

    async def update_by_id(
        self, record_id: UUID, fields: Mapping[str, Any],
    ) -> bool:
        async with self._translate_errors("update"):
            record = await self.db.get(self.model, record_id)
            if record is None:
                return False
            for name, value in fields.items():
                setattr(record, name, value)
            await self.db.flush()
        return True

    async def decrement_if_available(
        self, record_id: UUID, field: str, amount: int,
    ) -> bool:
        """Atomically subtract `amount` from `field` unless it would go below zero.

        A single conditional UPDATE, so concurrent callers can never drive the
        value negative. False when the row is missing or holds less than `amount`.
        """
        column = self._column(field)
        if column is None:
            return False
        query = (
            update(self.model.__table__)
            .where(self._columns["id"] == record_id, column >= amount)
            .values({column.key: column - amount})
        )
        async with self._translate_errors("decrement"):
            result = await self.db.execute(query)
        return result.rowcount == 1

    async def delete_by_id(self, record_id: UUID) -> bool:
        async with self._translate_errors("delete"):
            record = await self.db.get(self.model, record_id)
            if record is None:
                return False
            await self.db.delete(record)
            await self.db.flush()
        return True

    # ─── Filter translation ──────────────────────────────────────

    def _column(self, name: str):
        if name in self.hidden_fields:
            return None
        return self._columns.get(name)

    def _where(self, filters: Sequence[FieldFilter]) -> list:
        return [self._clause(f) for f in filters]

    def _clause(self, condition: FieldFilter):
        column = self._column(condition.field)
        if column is None:
            return false()
        if condition.operator is MatchOperator.EQUALS:
            return column == condition.value
        if condition.operator is MatchOperator.CONTAINS:
            target = column if isinstance(column.type, String) else cast(column, String)
            return target.icontains(str(condition.value), autoescape=True)
        if condition.operator is MatchOperator.BETWEEN:
            low, high = condition.value
            return column.between(low, high)
        return false()

    def _order_by(self, order: SortOrder | None):
        if order is None:
            return None
        column = self._column(order.field)
        if column is None:
            return None
        return column.desc() if order.descending else column.asc()

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncGenerator[None, None]:
        try:
            yield
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"{self.entity} {operation} violated a constraint: {e.orig}",
                extra={"entity": self.entity},
            )
            raise ConflictError(
                f"{self.entity} conflicts with an existing record",
                field_name="unique",
                context=ErrorContext(entity=self.entity),
            ) from e
        except SQLAlchemyError as e:
            logger.error(
                f"{self.entity} {operation} failed: {e}",
                extra={"entity": self.entity},
            )
            raise DatabaseError(
                "Data access failed", operation,
                context=ErrorContext(entity=self.entity),
            ) from e
