"""User Service — account CRUD and password changes.

Invariants:
    - Emails are stored trimmed and lower-cased, and are unique
    - Only bcrypt hashes are persisted; projections never include them
    - change_password requires the current password
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import MatchOperator, UserId
from app.core.errors import (
    ConflictError, InvalidCredentialsError, ResourceNotFoundError,
)
from app.core.pager import ListingQuery
from app.core.projection import USER, project
from app.core.query_builder import FieldFilter
from app.infrastructure.entity_accessor import SqlEntityAccessor
from app.infrastructure.security import hash_password, verify_password
from app.models.user import User
from app.services.listing import PageResult, list_page

logger = logging.getLogger(__name__)

HIDDEN_USER_FIELDS = ("password_hash",)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Users CRUD over a SqlEntityAccessor that hides password hashes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = SqlEntityAccessor(db, User, hidden_fields=HIDDEN_USER_FIELDS)

    async def list_users(self, query: ListingQuery) -> PageResult:
        return await list_page(self.users, query, USER)

    async def get_user(self, user_id: UUID) -> dict:
        return project(await self.get_user_or_404(user_id), USER)

    async def get_user_or_404(self, user_id: UUID) -> User:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        return await self.users.find_one(
            (FieldFilter("email", MatchOperator.EQUALS, normalize_email(email)),),
        )

    async def create_user(self, name: str, email: str, password: str) -> dict:
        email = normalize_email(email)
        await self._ensure_email_available(email)
        user_id = await self.users.insert({
            "name": name,
            "email": email,
            "password_hash": hash_password(password),
        })
        await self.db.commit()
        logger.info(
            f"User {user_id} created",
            extra={"entity": "User", "entity_id": str(user_id)},
        )
        return await self.get_user(user_id)

    async def update_user(self, user_id: UUID, name: str, email: str) -> UserId:
        email = normalize_email(email)
        await self.get_user_or_404(user_id)
        await self._ensure_email_available(email, exclude_id=user_id)
        await self.users.update_by_id(user_id, {"name": name, "email": email})
        await self.db.commit()
        return UserId(user_id)

    async def delete_user(self, user_id: UUID) -> UserId:
        if not await self.users.delete_by_id(user_id):
            raise ResourceNotFoundError("User", str(user_id))
        await self.db.commit()
        logger.info(
            f"User {user_id} deleted",
            extra={"entity": "User", "entity_id": str(user_id)},
        )
        return UserId(user_id)

    async def change_password(
        self, user_id: UUID, password_old: str, password_new: str,
    ) -> UserId:
        user = await self.get_user_or_404(user_id)
        if not verify_password(password_old, user.password_hash):
            raise InvalidCredentialsError("Wrong password")
        await self.users.update_by_id(
            user_id, {"password_hash": hash_password(password_new)},
        )
        await self.db.commit()
        return UserId(user_id)

    async def _ensure_email_available(
        self, email: str, exclude_id: UUID | None = None,
    ) -> None:
        existing = await self.get_user_by_email(email)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("Email already exists", field_name="email")
