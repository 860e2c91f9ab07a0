"""Request Dependencies — settings, throttle, listing params and the current user.

Invariants:
    - Listing params are accepted as raw strings and normalized, never rejected
    - The LoginThrottle comes from app.state (created in the lifespan)
    - get_current_user raises AuthenticationRequiredError, never returns None
"""

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.errors import AuthenticationRequiredError
from app.core.login_throttle import LoginThrottle
from app.core.pager import ListingQuery, normalize_query
from app.infrastructure.database import get_db
from app.models.user import User
from app.services.authentication import resolve_token_user

bearer_scheme = HTTPBearer(auto_error=False)


def get_login_throttle(request: Request) -> LoginThrottle:
    throttle = getattr(request.app.state, "login_throttle", None)
    if throttle is None:
        raise RuntimeError("Login throttle not initialized")
    return throttle


def listing_query(
    page_number: str | None = Query(None),
    page_size: str | None = Query(None),
    sort: str | None = Query(None, description="<field>:<asc|desc>"),
    search: str | None = Query(None, description="<field>:<value>"),
    settings: Settings = Depends(get_settings),
) -> ListingQuery:
    return normalize_query(
        page_number, page_size, sort, search,
        default_page_size=settings.default_page_size,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationRequiredError()
    return await resolve_token_user(db, credentials.credentials, settings)
