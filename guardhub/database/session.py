"""
database/session.py

Initializes the SQLAlchemy asynchronous engine and session factory.
Provides an AsyncGenerator for database session dependency injection.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from guardhub.core.config import settings

# -----------------------------------------------------
# SQLAlchemy Async Engine Initialization
# -----------------------------------------------------
engine = create_async_engine(
    settings.db_url,
    echo=False,
    pool_pre_ping=True,
)

# -----------------------------------------------------
# Session Factory for Async Database Access
# -----------------------------------------------------
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


# -----------------------------------------------------
# Dependency: Get Async DB Session
# -----------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yields a single session per request, rolls back on exceptions, and closes cleanly.
    """
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception:
            await db.rollback()
            raise
