"""Authentication Service — login flow over the LoginThrottle, token resolution.

Invariants:
    - Lockout is checked before any credential lookup: a locked identity never
      reaches password verification
    - Every failed verification is recorded; every success clears the record
    - Unknown email and wrong password produce the same InvalidCredentialsError
    - resolve_token_user raises AuthenticationRequiredError for any unusable token

Design Decisions:
    - Throttle injected (created once in the app lifespan), not imported as a global
    - Lockout is per identity (email) only, not per source IP
"""

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.errors import (
    AuthenticationRequiredError, InvalidCredentialsError, RateLimitedError,
)
from app.core.login_throttle import LoginThrottle, normalize_identity
from app.infrastructure.security import (
    create_access_token, decode_access_token, verify_password,
)
from app.models.user import User
from app.services.users import UserService

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Login + bearer-token resolution."""

    def __init__(
        self, db: AsyncSession, throttle: LoginThrottle, settings: Settings,
    ):
        self.users = UserService(db)
        self.throttle = throttle
        self.settings = settings

    async def login(self, email: str, password: str) -> dict:
        """Verify credentials under the lockout policy and issue a token."""
        identity = normalize_identity(email)
        decision = self.throttle.check(identity)
        if not decision.allowed:
            logger.warning(
                "Login rejected: lockout active",
                extra={"identity": identity, "failure_count": decision.failure_count},
            )
            raise RateLimitedError(
                self.throttle.lockout_minutes, decision.retry_after_seconds,
            )

        user = await self.users.get_user_by_email(identity)
        if user is None or not verify_password(password, user.password_hash):
            record = self.throttle.record_failure(identity)
            logger.warning(
                "Login failed: invalid credentials",
                extra={"identity": identity, "failure_count": record.failure_count},
            )
            raise InvalidCredentialsError()

        self.throttle.record_success(identity)
        logger.info("Login succeeded", extra={"identity": identity})
        return {
            "email": user.email,
            "name": user.name,
            "user_id": str(user.id),
            "token": self.issue_token(user),
        }

    def issue_token(self, user: User) -> str:
        return create_access_token(
            str(user.id),
            self.settings.secret_key,
            algorithm=self.settings.jwt_algorithm,
            expires_delta=timedelta(minutes=self.settings.access_token_expire_minutes),
        )


async def resolve_token_user(
    db: AsyncSession, token: str, settings: Settings,
) -> User:
    """Map a bearer token to an existing user."""
    subject = decode_access_token(
        token, settings.secret_key, algorithm=settings.jwt_algorithm,
    )
    if subject is None:
        raise AuthenticationRequiredError("Invalid or expired token")
    try:
        user_id = UUID(subject)
    except ValueError:
        raise AuthenticationRequiredError("Invalid or expired token")
    user = await UserService(db).users.find_by_id(user_id)
    if user is None:
        raise AuthenticationRequiredError("Unknown user")
    return user
