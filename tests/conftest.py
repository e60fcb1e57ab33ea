"""Pytest configuration and shared fixtures"""

import pytest
import os
import sys
from typing import AsyncGenerator
from datetime import date
from decimal import Decimal
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from invoice_creator.models.database import Base
from invoice_creator.models.db_models import StoredBlob  # noqa: F401
from invoice_creator.models.document import Customer, Document, DocumentKind, LineItem
from invoice_creator.services.document_editor import DocumentEditor
from invoice_creator.storage.store import KeyValueStore


# Test database setup (SQLite in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False
)

TestingSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope="function")
async def kv_store() -> AsyncGenerator[KeyValueStore, None]:
    """
    Key/value store over a fresh in-memory database for each test
    
    Yields:
        KeyValueStore bound to the test session factory
    """
    # Create tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield KeyValueStore(TestingSessionLocal)
    
    # Drop tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def sample_document() -> Document:
    """Single oil change for Jane Doe"""
    return Document(
        kind=DocumentKind.INVOICE,
        number="INV-001",
        date=date(2024, 1, 15),
        customer=Customer(name="Jane Doe", phone="555-123-4567", email="jane@example.com"),
        line_items=[
            LineItem(id=1, description="Oil Change", quantity=Decimal("1"), unit_price=Decimal("50.00")),
        ],
    )


@pytest.fixture
def editor(sample_document) -> DocumentEditor:
    """Editor over the sample document, closed after the test"""
    with DocumentEditor(sample_document, tax_rate=Decimal("0.08")) as doc_editor:
        yield doc_editor
