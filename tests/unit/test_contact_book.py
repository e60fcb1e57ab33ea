"""Unit tests for the contact book"""

import pytest

from invoice_creator.services.contact_book import ContactBook
from invoice_creator.storage.store import StoreKeys
from invoice_creator.utils.errors import ValidationError


@pytest.fixture
async def contact_book(kv_store):
    book = ContactBook(kv_store)
    await book.load()
    return book


@pytest.mark.unit
class TestContactBook:
    """Test ContactBook"""
    
    @pytest.mark.asyncio
    async def test_seeds_sample_contacts(self, contact_book, kv_store):
        assert [c.name for c in contact_book.contacts] == ["John Smith", "Sarah Johnson"]
        stored = await kv_store.get(StoreKeys.CONTACTS)
        assert isinstance(stored, dict)
        assert len(stored) == 2
    
    @pytest.mark.asyncio
    async def test_search_by_name(self, contact_book):
        assert [c.name for c in contact_book.search("SARAH")] == ["Sarah Johnson"]
        assert len(contact_book.search("")) == 2
        assert contact_book.search("phone") == []
    
    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, contact_book):
        with pytest.raises(ValidationError) as exc_info:
            await contact_book.add("Jane Doe", "555-123-4567", "not-an-email")
        
        assert exc_info.value.field == "email"
        assert len(contact_book.contacts) == 2
    
    @pytest.mark.asyncio
    async def test_invalid_email_rejected_without_phone(self, contact_book):
        with pytest.raises(ValidationError) as exc_info:
            await contact_book.add("Jane Doe", "", "not-an-email")
        
        assert exc_info.value.field == "email"
        assert len(contact_book.contacts) == 2
    
    @pytest.mark.asyncio
    async def test_invalid_phone_rejected(self, contact_book):
        with pytest.raises(ValidationError) as exc_info:
            await contact_book.add("Jane Doe", "12", "jane@example.com")
        assert exc_info.value.field == "phone"
    
    @pytest.mark.asyncio
    async def test_requires_name_and_one_channel(self, contact_book):
        with pytest.raises(ValidationError):
            await contact_book.add("", "555-123-4567", "")
        with pytest.raises(ValidationError):
            await contact_book.add("Jane Doe", "", "")
    
    @pytest.mark.asyncio
    async def test_add_persists(self, contact_book, kv_store):
        contact = await contact_book.add("  Jane <Doe>  ", "", "jane@example.com")
        
        assert contact.name == "Jane Doe"
        assert contact.phone == ""
        
        reloaded = ContactBook(kv_store)
        await reloaded.load()
        assert [c.name for c in reloaded.search("jane")] == ["Jane Doe"]
        assert reloaded.get(contact.id) == contact
    
    @pytest.mark.asyncio
    async def test_corrupt_store_reseeds(self, kv_store):
        await kv_store._write(StoreKeys.CONTACTS, "corrupted!", plain=False)
        book = ContactBook(kv_store)
        assert len(await book.load()) == 2
