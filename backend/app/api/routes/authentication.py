"""Authentication Route — login under the failed-attempt lockout policy.

Invariants:
    - 429 when the identity is locked out (credentials not checked)
    - 401 for unknown email or wrong password (same response for both)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_login_throttle
from app.config import Settings, get_settings
from app.core.login_throttle import LoginThrottle
from app.infrastructure.database import get_db
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.authentication import AuthenticationService

router = APIRouter(prefix="/api/v1/authentication", tags=["authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    throttle: LoginThrottle = Depends(get_login_throttle),
    settings: Settings = Depends(get_settings),
):
    service = AuthenticationService(db, throttle, settings)
    return await service.login(body.email, body.password)
