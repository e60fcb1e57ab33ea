"""Searchable parts catalog with price-staleness tracking"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from pydantic import ValidationError as PydanticValidationError

from invoice_creator.config import settings
from invoice_creator.models.part import Part
from invoice_creator.storage.store import KeyValueStore, StoreKeys
from invoice_creator.utils.errors import ValidationError
from invoice_creator.validation.input_rules import (
    sanitize_input,
    parse_numeric,
    validate_numeric,
    PRICE_MIN,
    PRICE_MAX,
)

logger = logging.getLogger(__name__)

# Seeded on first load; no last_updated so they start out stale
DEFAULT_PARTS: List[Dict[str, Any]] = [
    {"part_number": "5W-30", "manufacturer": "Mobil", "description": "Engine Oil 5W-30 Synthetic", "price": "24.99", "category": "Oil"},
    {"part_number": "10W-40", "manufacturer": "Castrol", "description": "Engine Oil 10W-40", "price": "19.99", "category": "Oil"},
    {"part_number": "PH3614", "manufacturer": "Fram", "description": "Oil Filter", "price": "8.99", "category": "Filter"},
    {"part_number": "CA9482", "manufacturer": "Fram", "description": "Air Filter", "price": "15.99", "category": "Filter"},
    {"part_number": "DG508", "manufacturer": "Motorcraft", "description": "Ignition Coil", "price": "45.99", "category": "Ignition"},
    {"part_number": "SP493", "manufacturer": "Motorcraft", "description": "Spark Plug", "price": "7.99", "category": "Ignition"},
    {"part_number": "MKD465", "manufacturer": "Wagner", "description": "Brake Pads Front", "price": "49.99", "category": "Brakes"},
    {"part_number": "BD125", "manufacturer": "Wagner", "description": "Brake Rotor", "price": "65.99", "category": "Brakes"},
    {"part_number": "51R-600", "manufacturer": "Interstate", "description": "Car Battery 51R", "price": "129.99", "category": "Battery"},
    {"part_number": "H11", "manufacturer": "Sylvania", "description": "Headlight Bulb H11", "price": "12.99", "category": "Lights"},
    {"part_number": "3157", "manufacturer": "Sylvania", "description": "Brake Light Bulb", "price": "4.99", "category": "Lights"},
    {"part_number": "24F-600", "manufacturer": "DieHard", "description": "Car Battery 24F", "price": "139.99", "category": "Battery"},
    {"part_number": "ATF+4", "manufacturer": "Valvoline", "description": "Transmission Fluid ATF+4", "price": "8.99", "category": "Fluids"},
    {"part_number": "DOT3", "manufacturer": "Prestone", "description": "Brake Fluid DOT 3", "price": "6.99", "category": "Fluids"},
    {"part_number": "50/50", "manufacturer": "Prestone", "description": "Antifreeze/Coolant 50/50", "price": "12.99", "category": "Fluids"},
    {"part_number": "7440", "manufacturer": "Bosch", "description": "Turn Signal Bulb", "price": "3.99", "category": "Lights"},
    {"part_number": "MS-6335", "manufacturer": "Moog", "description": "Tie Rod End", "price": "42.99", "category": "Suspension"},
    {"part_number": "K6117", "manufacturer": "Moog", "description": "Ball Joint", "price": "56.99", "category": "Suspension"},
    {"part_number": "43330", "manufacturer": "Gates", "description": "Serpentine Belt", "price": "23.99", "category": "Belts"},
    {"part_number": "25060", "manufacturer": "Gates", "description": "Radiator Hose Upper", "price": "18.99", "category": "Cooling"},
]


class PartsCatalog:
    """Parts catalog persisted under the partsDatabase key"""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        stale_after_days: Optional[int] = None
    ):
        """
        Args:
            store: Key/value store (defaults to the app database)
            stale_after_days: Age after which a price is stale (defaults to settings)
        """
        self.store = store or KeyValueStore()
        self.stale_after_days = stale_after_days or settings.PRICE_STALE_DAYS
        self.parts: List[Part] = []
        self.price_refresh_enabled = True
        self._stale_check_done = False

    async def load(self) -> List[Part]:
        """Load the catalog, seeding defaults when nothing usable is stored"""
        stored = await self.store.get(StoreKeys.PARTS_DATABASE)
        parts = self._parse_parts(stored)
        if parts is None:
            logger.info("No saved parts catalog; seeding defaults")
            self.parts = [Part(**record) for record in DEFAULT_PARTS]
            await self._persist()
        else:
            self.parts = parts

        self.price_refresh_enabled = bool(
            await self.store.get(StoreKeys.PRICE_REFRESH_ENABLED, True)
        )
        return self.parts

    def search(self, query: str = "", manufacturer: str = "") -> List[Part]:
        """
        Case-insensitive substring search.

        query matches part number, description or category; manufacturer
        filters on manufacturer. Both are optional and combine with AND.
        """
        results = self.parts

        if query:
            q = query.lower()
            results = [
                part for part in results
                if q in part.part_number.lower()
                or q in part.description.lower()
                or q in part.category.lower()
            ]

        if manufacturer:
            m = manufacturer.lower()
            results = [part for part in results if m in part.manufacturer.lower()]

        return list(results)

    def is_stale(self, part: Part, now: Optional[datetime] = None) -> bool:
        return part.is_stale(now or datetime.utcnow(), self.stale_after_days)

    def stale_parts(self, now: Optional[datetime] = None) -> List[Part]:
        now = now or datetime.utcnow()
        return [part for part in self.parts if self.is_stale(part, now)]

    def stale_count(self, now: Optional[datetime] = None) -> int:
        return len(self.stale_parts(now))

    def check_price_refresh(self, now: Optional[datetime] = None) -> Optional[str]:
        """
        Once-per-session advisory about stale prices.

        Returns:
            Advisory message, or None when nothing needs attention, the check
            already ran, or price refresh alerts are disabled
        """
        if self._stale_check_done or not self.price_refresh_enabled:
            return None
        self._stale_check_done = True

        count = self.stale_count(now)
        if count == 0:
            return None
        logger.info(f"{count} catalog parts have stale pricing")
        return (
            f"{count} parts have pricing older than 6 weeks. "
            "Consider updating prices for accuracy."
        )

    async def set_price_refresh_enabled(self, enabled: bool) -> None:
        self.price_refresh_enabled = enabled
        await self.store.put(StoreKeys.PRICE_REFRESH_ENABLED, enabled)

    async def record_price_update(self, part_number: str, new_price: Any) -> Part:
        """
        Set a part's price and refresh its timestamp.

        Raises:
            ValidationError: unknown part, or price not a number in range
        """
        if not validate_numeric(new_price, PRICE_MIN, PRICE_MAX):
            raise ValidationError(
                f"Please enter a valid price ({PRICE_MIN}-{PRICE_MAX})", field="price"
            )

        part = next((p for p in self.parts if p.part_number == part_number), None)
        if part is None:
            raise ValidationError(f"Unknown part number: {part_number}", field="part_number")

        part.price = parse_numeric(new_price)
        part.last_updated = datetime.utcnow()
        await self._persist()
        logger.info(f"Updated price for {part_number}: {part.price}")
        return part

    async def add_part(
        self,
        part_number: str,
        manufacturer: str,
        description: str,
        price: Any,
        category: str = ""
    ) -> Part:
        """
        Append a custom part; duplicates by part number are allowed.

        Raises:
            ValidationError: missing required text or invalid price
        """
        part_number = sanitize_input(part_number or "")
        manufacturer = sanitize_input(manufacturer or "")
        description = sanitize_input(description or "")
        category = sanitize_input(category or "") or "Other"

        if not part_number:
            raise ValidationError("Please enter a part number", field="part_number")
        if not manufacturer:
            raise ValidationError("Please enter a manufacturer", field="manufacturer")
        if not description:
            raise ValidationError("Please enter a part description", field="description")
        if not validate_numeric(price, PRICE_MIN, PRICE_MAX):
            raise ValidationError(
                f"Please enter a valid price ({PRICE_MIN}-{PRICE_MAX})", field="price"
            )

        part = Part(
            part_number=part_number,
            manufacturer=manufacturer,
            description=description,
            price=parse_numeric(price),
            category=category,
            last_updated=datetime.utcnow(),
        )
        self.parts.append(part)
        await self._persist()
        logger.info(f"Added part {part_number} to catalog")
        return part

    async def _persist(self) -> None:
        await self.store.put(
            StoreKeys.PARTS_DATABASE,
            [part.model_dump(mode="json") for part in self.parts],
        )

    @staticmethod
    def _parse_parts(stored: Any) -> Optional[List[Part]]:
        """Stored records as Parts, or None if missing or malformed"""
        if not isinstance(stored, list):
            return None
        try:
            return [Part(**record) for record in stored]
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Stored parts catalog is malformed, ignoring: {e}")
            return None
