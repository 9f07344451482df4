"""
Database connection and session management for SQLAlchemy 2.0.
Configured for async operations with PostgreSQL (asyncpg) in production.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy import MetaData, text
from urllib.parse import urlparse
import logging

from school_cms.config import settings

logger = logging.getLogger(__name__)

# Constraint naming convention so migrations and create_all agree
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Create declarative base for models
Base = declarative_base(metadata=MetaData(naming_convention=convention))


def build_engine(url: str) -> AsyncEngine:
    """
    Create an async engine for the given URL.
    Pool settings only apply to PostgreSQL (not SQLite).
    """
    engine_args = {
        "echo": False,  # Set to True for SQL query logging in development
    }

    if url.startswith("postgresql"):
        engine_args.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,  # Verify connections before using
            "pool_recycle": 3600,
            "connect_args": {
                "server_settings": {
                    "application_name": "school-cms-backend"
                }
            }
        })

    return create_async_engine(url, **engine_args)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    """Session factory with the settings every caller in this project expects."""
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(
    settings.DATABASE_URL if settings.DATABASE_URL else "sqlite+aiosqlite:///:memory:"
)

# Create async session factory
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncSession:
    """
    FastAPI dependency for database sessions.
    Provides async database session with automatic commit/rollback.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database session error: {str(e)}", exc_info=True)
            raise


def _validate_database_url(url: str) -> tuple[bool, str]:
    """
    Validate database URL and provide diagnostic information.
    Returns (is_valid, diagnostic_message)
    """
    if not url:
        return False, "DATABASE_URL is empty"

    parsed = urlparse(url)
    supported = ("postgresql", "postgresql+asyncpg", "sqlite+aiosqlite", "mysql+aiomysql")
    if parsed.scheme not in supported:
        return False, f"Unsupported database URL scheme: {parsed.scheme}. Expected one of {', '.join(supported)}"

    if parsed.scheme.startswith("sqlite"):
        return True, f"SQLite database: {parsed.path or ':memory:'}"

    if not parsed.hostname:
        return False, "No hostname found in DATABASE_URL"

    return True, f"URL format valid. Hostname: {parsed.hostname}, Port: {parsed.port}, Database: {parsed.path}"


async def init_db():
    """
    Initialize database connection.
    Used on application startup to verify connectivity.
    """
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set, skipping database initialization")
        return

    is_valid, diagnostic = _validate_database_url(settings.DATABASE_URL)
    if not is_valid:
        logger.error(f"Invalid DATABASE_URL: {diagnostic}")
        raise ValueError(f"Invalid DATABASE_URL: {diagnostic}")

    logger.info(f"Database URL validation: {diagnostic}")

    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection initialized successfully")


async def close_db():
    """
    Close database connections.
    Used for shutdown events.
    """
    await engine.dispose()
    logger.info("Database connections closed")
