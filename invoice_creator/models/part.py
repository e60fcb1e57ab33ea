"""Parts catalog and external lookup site models"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, field_validator


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Part(BaseModel):
    """Catalog entry for a common auto part"""
    part_number: str
    manufacturer: str
    description: str
    price: Decimal
    category: str = "Other"
    last_updated: Optional[datetime] = None

    @field_validator("last_updated")
    @classmethod
    def normalize_last_updated(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Stored timestamps may carry an offset ("...Z"); compare as naive UTC
        return _naive_utc(v) if v is not None else None

    def is_stale(self, now: datetime, stale_after_days: int = 42) -> bool:
        """Never-updated prices are always stale; recomputed on every call"""
        if self.last_updated is None:
            return True
        cutoff = _naive_utc(now) - timedelta(days=stale_after_days)
        return _naive_utc(self.last_updated) < cutoff

    @property
    def line_description(self) -> str:
        """Text used when the part is placed on a line item"""
        return f"{self.part_number} - {self.description} ({self.manufacturer})"


class LookupSite(BaseModel):
    """External vendor site used for part lookups"""
    name: str
    url: str
    enabled: bool = True
