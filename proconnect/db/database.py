"""
Database configuration with async support
"""

import logging
from contextlib import asynccontextmanager
from fastapi import status
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as AsyncSessionSQLModel
from typing import AsyncGenerator

from proconnect.core.config import settings
from proconnect.core.error_codes import DATABASE_ERROR
from proconnect.core.exceptions import CustomHTTPException

# Configure logging based on environment
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

logger.info(f"Environment: {settings.ENVIRONMENT}")
logger.info(f"Database URL configured: {bool(settings.DATABASE_URL)}")


def build_engine_options(database_url: str) -> dict:
    """Engine keyword arguments; pool sizing only applies to the postgres pool."""
    options = {
        "echo": settings.SQL_ECHO,
        "future": True,  # Required for SQLModel async support
        "pool_pre_ping": True,  # Verify connections before use
    }
    if database_url.startswith("postgresql+asyncpg://"):
        options.update(
            pool_size=20,  # Number of connections to maintain
            max_overflow=30,  # Additional connections that can be created
            pool_recycle=3600,  # Recycle connections after 1 hour
            connect_args={
                "server_settings": {
                    "application_name": "proconnect_api",
                }
            },
        )
    return options


async_engine = create_async_engine(
    settings.ASYNC_DATABASE_URL,
    **build_engine_options(settings.ASYNC_DATABASE_URL)
)

# Async session factory
AsyncSessionLocal = sessionmaker(
    bind=async_engine,
    class_=AsyncSessionSQLModel,
    expire_on_commit=False,
    autoflush=False
)


async def init_db():
    """Initialize database tables"""
    # Table classes must be registered on the metadata before create_all
    import proconnect.models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async database session dependency
    Usage:
    async def some_endpoint(db: AsyncSession = Depends(get_db)):
        ...
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def transaction(session: AsyncSession, failure_detail: str):
    """
    Commit everything staged inside the block once, or roll all of it back.

    Usage:
    async with transaction(db, "Failed to accept connection request"):
        ...

    Domain errors and IntegrityError are re-raised unchanged after the
    rollback; other store errors become a 500 carrying `failure_detail`.
    """
    try:
        yield session
        await session.commit()
    except (CustomHTTPException, IntegrityError):
        await session.rollback()
        raise
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"{failure_detail}: {e}", exc_info=True)
        raise CustomHTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            failure_detail,
            error_code=DATABASE_ERROR
        )
    except Exception:
        await session.rollback()
        raise
