"""Async key/value store backed by a single SQLAlchemy table"""

from typing import Any, Optional
from datetime import datetime
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy import select, delete
import logging

from invoice_creator.models.db_models import StoredBlob
from invoice_creator.utils.errors import StorageDecodeError
from .codec import encode_value, decode_value

logger = logging.getLogger(__name__)


class StoreKeys:
    """Persisted key names"""
    CONTACTS = "contacts"
    INVOICES = "invoices"
    INVOICE_LOGS = "invoiceLogs"
    LAST_INVOICE_NUMBER = "lastInvoiceNumber"
    PART_LOOKUP_SITES = "partLookupSites"
    PARTS_DATABASE = "partsDatabase"
    PRICE_REFRESH_ENABLED = "priceRefreshEnabled"
    # Stored plain, not obfuscated
    HAS_SEEN_TUTORIAL = "hasSeenTutorial"


class KeyValueStore:
    """
    Durable key/value storage with reversible encoding.
    
    Each call runs in its own session and commits on its own; there is no
    atomicity across keys.
    """
    
    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        """
        Args:
            session_factory: Async session factory (defaults to the app database)
        """
        if session_factory is None:
            from invoice_creator.models.database import AsyncSessionLocal
            session_factory = AsyncSessionLocal
        self.session_factory = session_factory
    
    async def put(self, key: str, value: Any) -> None:
        """Encode and write a JSON-compatible value"""
        await self._write(key, encode_value(value), plain=False)
    
    async def get(self, key: str, default: Any = None) -> Any:
        """
        Read and decode a value.
        
        Missing keys and undecodable blobs both return default.
        """
        row = await self._read(key)
        if row is None:
            return default
        if row.plain:
            logger.warning(f"Key '{key}' holds a plain flag, not an encoded value")
            return default
        try:
            return decode_value(row.value, key=key)
        except StorageDecodeError as e:
            logger.warning(f"{e}; falling back to default")
            return default
    
    async def delete(self, key: str) -> None:
        async with self.session_factory() as session:
            try:
                await session.execute(delete(StoredBlob).where(StoredBlob.key == key))
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Error deleting key {key}: {e}", exc_info=True)
                raise
    
    async def put_flag(self, key: str, flag: bool) -> None:
        """Write a plain (non-obfuscated) boolean flag"""
        await self._write(key, "true" if flag else "false", plain=True)
    
    async def get_flag(self, key: str, default: bool = False) -> bool:
        row = await self._read(key)
        if row is None:
            return default
        return row.value.strip().lower() == "true"
    
    async def _read(self, key: str) -> Optional[StoredBlob]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(StoredBlob).where(StoredBlob.key == key)
            )
            return result.scalar_one_or_none()
    
    async def _write(self, key: str, value: str, plain: bool) -> None:
        async with self.session_factory() as session:
            try:
                result = await session.execute(
                    select(StoredBlob).where(StoredBlob.key == key)
                )
                existing = result.scalar_one_or_none()
                
                if existing:
                    existing.value = value
                    existing.plain = plain
                    existing.updated_at = datetime.utcnow()
                else:
                    session.add(StoredBlob(key=key, value=value, plain=plain))
                
                await session.commit()
                logger.debug(f"Stored key '{key}' ({len(value)} chars)")
            except Exception as e:
                await session.rollback()
                logger.error(f"Error storing key {key}: {e}", exc_info=True)
                raise
