"""Unit tests for the parts catalog"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from invoice_creator.models.part import Part
from invoice_creator.services.parts_catalog import PartsCatalog, DEFAULT_PARTS
from invoice_creator.storage.store import StoreKeys
from invoice_creator.utils.errors import ValidationError


@pytest.fixture
async def catalog(kv_store):
    parts_catalog = PartsCatalog(kv_store, stale_after_days=42)
    await parts_catalog.load()
    return parts_catalog


@pytest.mark.unit
class TestCatalogLoad:
    """Test seeding and persistence"""
    
    @pytest.mark.asyncio
    async def test_seeds_defaults(self, catalog, kv_store):
        assert len(catalog.parts) == len(DEFAULT_PARTS) == 20
        assert len(await kv_store.get(StoreKeys.PARTS_DATABASE)) == 20
    
    @pytest.mark.asyncio
    async def test_malformed_store_reseeds(self, kv_store):
        await kv_store.put(StoreKeys.PARTS_DATABASE, {"not": "a list"})
        catalog = PartsCatalog(kv_store)
        assert len(await catalog.load()) == 20


@pytest.mark.unit
class TestCatalogSearch:
    """Test search"""
    
    @pytest.mark.asyncio
    async def test_query_matches_description_and_category(self, catalog):
        numbers = {p.part_number for p in catalog.search("filter")}
        assert numbers == {"PH3614", "CA9482"}
    
    @pytest.mark.asyncio
    async def test_query_matches_part_number(self, catalog):
        assert [p.part_number for p in catalog.search("ph36")] == ["PH3614"]
    
    @pytest.mark.asyncio
    async def test_manufacturer_filter_combines_with_query(self, catalog):
        assert len(catalog.search(manufacturer="GATES")) == 2
        assert [p.part_number for p in catalog.search("belt", "gates")] == ["43330"]
        assert catalog.search("battery", "gates") == []
    
    @pytest.mark.asyncio
    async def test_empty_search_returns_all(self, catalog):
        assert len(catalog.search()) == 20


@pytest.mark.unit
class TestStaleness:
    """Test price staleness"""
    
    def test_staleness_boundary(self):
        now = datetime(2024, 6, 1, 12, 0, 0)
        fresh = Part(part_number="A", manufacturer="M", description="D", price=Decimal("1"),
                     last_updated=now - timedelta(days=41))
        old = Part(part_number="B", manufacturer="M", description="D", price=Decimal("1"),
                   last_updated=now - timedelta(days=43))
        never = Part(part_number="C", manufacturer="M", description="D", price=Decimal("1"))
        
        assert not fresh.is_stale(now)
        assert old.is_stale(now)
        assert never.is_stale(now)
    
    def test_staleness_is_monotonic_in_time(self):
        updated = datetime(2024, 1, 1)
        part = Part(part_number="A", manufacturer="M", description="D", price=Decimal("1"),
                    last_updated=updated)
        checks = [part.is_stale(updated + timedelta(days=d)) for d in range(0, 90)]
        first_stale = checks.index(True)
        assert all(checks[first_stale:])
        assert not any(checks[:first_stale])
    
    @pytest.mark.asyncio
    async def test_offset_timestamps_from_storage(self, kv_store):
        now = datetime.utcnow()
        record = dict(DEFAULT_PARTS[0], last_updated=(now - timedelta(days=1)).isoformat() + "Z")
        await kv_store.put(StoreKeys.PARTS_DATABASE, [record])
        
        catalog = PartsCatalog(kv_store, stale_after_days=42)
        await catalog.load()
        
        assert catalog.parts[0].last_updated.tzinfo is None
        assert catalog.stale_count() == 0
        assert catalog.check_price_refresh() is None
    
    def test_aware_now_compares_with_naive_timestamp(self):
        part = Part(part_number="A", manufacturer="M", description="D", price=Decimal("1"),
                    last_updated=datetime(2024, 6, 1, 12, 0, 0))
        
        assert not part.is_stale(datetime(2024, 6, 2, tzinfo=timezone.utc))
        assert part.is_stale(datetime(2024, 8, 1, tzinfo=timezone.utc))
    
    @pytest.mark.asyncio
    async def test_price_update_clears_staleness(self, catalog):
        assert catalog.stale_count() == 20
        
        part = await catalog.record_price_update("PH3614", "9.49")
        
        assert part.price == Decimal("9.49")
        assert not catalog.is_stale(part)
        assert catalog.stale_count() == 19
    
    @pytest.mark.asyncio
    async def test_advisory_runs_once_per_session(self, catalog):
        message = catalog.check_price_refresh()
        assert message.startswith("20 parts have pricing older than 6 weeks")
        assert catalog.check_price_refresh() is None
    
    @pytest.mark.asyncio
    async def test_advisory_skipped_when_disabled(self, catalog, kv_store):
        await catalog.set_price_refresh_enabled(False)
        assert catalog.check_price_refresh() is None
        
        reloaded = PartsCatalog(kv_store)
        await reloaded.load()
        assert reloaded.price_refresh_enabled is False


@pytest.mark.unit
class TestCatalogEdits:
    """Test price updates and custom parts"""
    
    @pytest.mark.asyncio
    async def test_price_update_persists(self, catalog, kv_store):
        await catalog.record_price_update("H11", "13.49")
        
        reloaded = PartsCatalog(kv_store)
        await reloaded.load()
        part = next(p for p in reloaded.parts if p.part_number == "H11")
        assert part.price == Decimal("13.49")
        assert part.last_updated is not None
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["-1", "1000000", "abc", ""])
    async def test_bad_price_rejected(self, catalog, price):
        with pytest.raises(ValidationError):
            await catalog.record_price_update("H11", price)
    
    @pytest.mark.asyncio
    async def test_unknown_part_rejected(self, catalog):
        with pytest.raises(ValidationError):
            await catalog.record_price_update("NOPE-1", "10")
    
    @pytest.mark.asyncio
    async def test_add_part(self, catalog):
        part = await catalog.add_part("WB-22", "Rain-X", "<Wiper> Blade 22in", "14.99")
        
        assert part.description == "Wiper Blade 22in"
        assert part.category == "Other"
        assert not catalog.is_stale(part)
        assert catalog.search("wiper") == [part]
    
    @pytest.mark.asyncio
    async def test_add_part_requires_fields(self, catalog):
        with pytest.raises(ValidationError):
            await catalog.add_part("WB-22", "", "Wiper Blade", "14.99")
        with pytest.raises(ValidationError):
            await catalog.add_part("WB-22", "Rain-X", "Wiper Blade", "free")
        assert len(catalog.parts) == 20
