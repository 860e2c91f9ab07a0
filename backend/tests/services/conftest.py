"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check hits the test engine
    - SQLite foreign keys enforced, as in the app's own SQLite engines
    - app.state.login_throttle is a fresh throttle per test (lifespan does not
      run under ASGITransport)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Tokens minted directly with create_access_token: route tests do not
      depend on the login flow unless they test it
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.core.login_throttle import InMemoryLoginAttemptStore, LoginThrottle
from app.db.base import Base
from app.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from app.infrastructure.security import create_access_token, hash_password
from app.models import Product, User
import app.infrastructure.database as db_module
from app.main import app

USER_PASSWORD = "secret123"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def login_throttle():
    return LoginThrottle(InMemoryLoginAttemptStore())


@pytest.fixture
async def client(test_engine, test_session_factory, login_throttle):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.login_throttle = login_throttle

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_user(test_db):
    """The account tests log in as."""
    user = User(
        name="Alice Admin",
        email="alice@example.com",
        password_hash=hash_password(USER_PASSWORD),
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest.fixture
def auth_headers(seed_user):
    settings = get_settings()
    token = create_access_token(
        str(seed_user.id), settings.secret_key, algorithm=settings.jwt_algorithm,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def seed_product(test_db):
    product = Product(
        name="Running Shoes", price=99.0, description="Lightweight",
        category="Footwear", stock=10,
    )
    test_db.add(product)
    await test_db.commit()
    await test_db.refresh(product)
    return product


@pytest.fixture
async def many_products(test_db):
    """25 products, Item 01 .. Item 25, priced 1..25."""
    products = [
        Product(
            name=f"Item {i:02d}", price=float(i), description=f"Description {i}",
            category="Even" if i % 2 == 0 else "Odd", stock=i,
        )
        for i in range(1, 26)
    ]
    test_db.add_all(products)
    await test_db.commit()
    return products
