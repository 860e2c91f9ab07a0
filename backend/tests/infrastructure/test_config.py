"""Settings — URL normalization and timezone validation."""

import pytest
from pydantic import ValidationError

from app.config import Settings


def test_plain_postgres_url_gets_async_driver():
    settings = Settings(database_url="postgresql://u:p@host:5432/db")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_lockout_policy_defaults():
    settings = Settings()
    assert settings.login_max_attempts == 5
    assert settings.login_lockout_minutes == 30
    assert settings.default_page_size == 10


def test_local_timezone_resolves():
    assert str(Settings(local_timezone="Europe/Berlin").tz) == "Europe/Berlin"


def test_unknown_timezone_is_rejected():
    with pytest.raises(ValidationError):
        Settings(local_timezone="Mars/Olympus")
