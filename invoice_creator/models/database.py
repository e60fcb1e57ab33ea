"""Async database setup for the key/value store"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import Optional
from invoice_creator.config import settings

# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    future=True
)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Base class for models
Base = declarative_base()


async def init_db(db_engine: Optional[AsyncEngine] = None) -> None:
    """Create tables if they do not exist"""
    # Register models with Base
    from invoice_creator.models.db_models import StoredBlob  # noqa: F401

    async with (db_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
