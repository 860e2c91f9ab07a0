"""Security Primitives — bcrypt password hashing and JWT access tokens.

Invariants:
    - Plain passwords are never stored or logged, only bcrypt hashes
    - Tokens carry `sub` (user id as str) and `exp`; anything else is ignored
    - decode_access_token returns None for any invalid/expired token (never raises)

Design Decisions:
    - passlib CryptContext: hash scheme can be rotated via `deprecated="auto"`
    - python-jose HS256 with the settings secret: single-service deployment,
      no key distribution needed
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a plain password against a stored hash. Malformed hashes never match."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        return False


def create_access_token(
    subject: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(minutes=60),
) -> str:
    """Create a signed JWT for `subject`."""
    expire = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(
        {"sub": subject, "exp": expire}, secret_key, algorithm=algorithm,
    )


def decode_access_token(
    token: str, secret_key: str, algorithm: str = "HS256",
) -> str | None:
    """Return the token subject, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
