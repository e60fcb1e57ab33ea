"""Unit tests for the encoded key/value store"""

import base64
import pytest

from invoice_creator.storage.codec import encode_value, decode_value
from invoice_creator.storage.store import StoreKeys
from invoice_creator.utils.errors import StorageDecodeError


@pytest.mark.unit
class TestCodec:
    """Test encode_value/decode_value"""
    
    def test_encoded_value_is_not_plain_json(self):
        blob = encode_value({"name": "Jane Doe"})
        assert "Jane Doe" not in blob
        assert base64.b64decode(blob) == b'{"name":"Jane Doe"}'
    
    def test_round_trip_preserves_unicode(self):
        value = [{"description": "Qty × 2 – café"}]
        assert decode_value(encode_value(value)) == value
    
    @pytest.mark.parametrize("blob", ["", "not base64!!", base64.b64encode(b"{broken").decode(), base64.b64encode(b"\xff\xfe").decode()])
    def test_corrupt_blobs_raise(self, blob):
        with pytest.raises(StorageDecodeError):
            decode_value(blob, key="contacts")


@pytest.mark.unit
class TestKeyValueStore:
    """Test KeyValueStore against an in-memory database"""
    
    @pytest.mark.asyncio
    async def test_put_then_get(self, kv_store):
        await kv_store.put(StoreKeys.CONTACTS, {"1": {"name": "Jane"}})
        assert await kv_store.get(StoreKeys.CONTACTS) == {"1": {"name": "Jane"}}
    
    @pytest.mark.asyncio
    async def test_put_overwrites(self, kv_store):
        await kv_store.put(StoreKeys.LAST_INVOICE_NUMBER, "INV-002")
        await kv_store.put(StoreKeys.LAST_INVOICE_NUMBER, "INV-003")
        assert await kv_store.get(StoreKeys.LAST_INVOICE_NUMBER) == "INV-003"
    
    @pytest.mark.asyncio
    async def test_missing_key_returns_default(self, kv_store):
        assert await kv_store.get(StoreKeys.INVOICES) is None
        assert await kv_store.get(StoreKeys.INVOICES, []) == []
    
    @pytest.mark.asyncio
    async def test_corrupt_value_treated_as_absent(self, kv_store):
        await kv_store._write(StoreKeys.PARTS_DATABASE, "%%% not base64 %%%", plain=False)
        assert await kv_store.get(StoreKeys.PARTS_DATABASE, "fallback") == "fallback"
    
    @pytest.mark.asyncio
    async def test_deeply_nested_value_treated_as_absent(self, kv_store):
        blob = base64.b64encode(b"[" * 200000).decode("ascii")
        await kv_store._write(StoreKeys.INVOICES, blob, plain=False)
        
        assert await kv_store.get(StoreKeys.INVOICES, "fallback") == "fallback"
    
    @pytest.mark.asyncio
    async def test_delete(self, kv_store):
        await kv_store.put(StoreKeys.INVOICE_LOGS, [1, 2])
        await kv_store.delete(StoreKeys.INVOICE_LOGS)
        assert await kv_store.get(StoreKeys.INVOICE_LOGS) is None
    
    @pytest.mark.asyncio
    async def test_plain_flag(self, kv_store):
        assert await kv_store.get_flag(StoreKeys.HAS_SEEN_TUTORIAL) is False
        await kv_store.put_flag(StoreKeys.HAS_SEEN_TUTORIAL, True)
        assert await kv_store.get_flag(StoreKeys.HAS_SEEN_TUTORIAL) is True
        row = await kv_store._read(StoreKeys.HAS_SEEN_TUTORIAL)
        assert row.value == "true"
        assert row.plain is True
