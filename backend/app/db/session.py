"""Standalone Session Factory — async DB sessions for scripts outside FastAPI.

Invariants:
    - Same session options as DatabaseSessionManager (expire_on_commit=False)
    - The caller disposes the engine (`factory.kw["bind"]`) when done

Design Decisions:
    - Separate from infrastructure/database.py: seed scripts need a factory
      without touching the process-wide db_manager singleton
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker


def create_session_factory(
    database_url: str, echo: bool = False,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to a fresh engine for `database_url`."""
    engine = create_async_engine(database_url, echo=echo)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
