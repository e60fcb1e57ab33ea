"""External part-lookup links restricted to an allow-list of vendor domains"""

from typing import Any, List, Optional
from urllib.parse import quote, urlsplit
import logging

from pydantic import ValidationError as PydanticValidationError

from invoice_creator.models.part import LookupSite
from invoice_creator.storage.store import KeyValueStore, StoreKeys
from invoice_creator.utils.errors import ValidationError
from invoice_creator.validation.input_rules import sanitize_input

logger = logging.getLogger(__name__)

ALLOWED_LOOKUP_DOMAINS = frozenset({
    "rockauto.com",
    "autozone.com",
    "advanceautoparts.com",
    "oreillyauto.com",
    "napaonline.com",
})

DEFAULT_LOOKUP_SITES = [
    LookupSite(name="RockAuto", url="https://www.rockauto.com/en/catalog/", enabled=True),
    LookupSite(name="AutoZone", url="https://www.autozone.com/parts/", enabled=True),
    LookupSite(name="Advance Auto", url="https://shop.advanceautoparts.com/find/", enabled=True),
    LookupSite(name="O'Reilly", url="https://www.oreillyauto.com/shop/b/", enabled=True),
    LookupSite(name="NAPA", url="https://www.napaonline.com/en/search?text=", enabled=False),
]


def _site_domain(url: str) -> str:
    host = urlsplit(url).hostname or ""
    if host.startswith("www."):
        host = host[len("www."):]
    return host


def is_allowed_domain(domain: str) -> bool:
    """Exact match, or a subdomain of an allowed vendor (shop.advanceautoparts.com)"""
    return any(
        domain == allowed or domain.endswith("." + allowed)
        for allowed in ALLOWED_LOOKUP_DOMAINS
    )


def build_lookup_url(base_url: str, term: str = "") -> str:
    """
    Append a sanitized, URL-encoded search term to an allow-listed base URL.

    Raises:
        ValidationError: malformed URL or domain not on the allow-list
    """
    try:
        parts = urlsplit(base_url)
    except ValueError as e:
        raise ValidationError("Invalid website URL.", field="url") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValidationError("Invalid website URL.", field="url")

    domain = _site_domain(base_url)
    if not is_allowed_domain(domain):
        logger.warning(f"Rejected lookup to non-approved domain: {domain}")
        raise ValidationError(
            "This website is not in the approved list for security reasons.", field="url"
        )

    return f"{base_url}{quote(sanitize_input(term or ''), safe='')}"


class LookupSiteRegistry:
    """Configured lookup sites persisted under partLookupSites"""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store or KeyValueStore()
        self.sites: List[LookupSite] = []

    async def load(self) -> List[LookupSite]:
        stored = await self.store.get(StoreKeys.PART_LOOKUP_SITES)
        sites = self._parse_sites(stored)
        if sites is None:
            self.sites = [site.model_copy() for site in DEFAULT_LOOKUP_SITES]
            await self._persist()
        else:
            self.sites = sites
        return self.sites

    def enabled_sites(self) -> List[LookupSite]:
        return [site for site in self.sites if site.enabled]

    def get(self, name: str) -> Optional[LookupSite]:
        return next((site for site in self.sites if site.name == name), None)

    async def set_enabled(self, name: str, enabled: bool) -> LookupSite:
        site = self.get(name)
        if site is None:
            raise ValidationError(f"Unknown lookup site: {name}", field="name")
        site.enabled = enabled
        await self._persist()
        return site

    def lookup_url(self, name: str, term: str = "") -> str:
        """Outbound URL for a configured site"""
        site = self.get(name)
        if site is None:
            raise ValidationError(f"Unknown lookup site: {name}", field="name")
        return build_lookup_url(site.url, term)

    async def _persist(self) -> None:
        await self.store.put(
            StoreKeys.PART_LOOKUP_SITES,
            [site.model_dump(mode="json") for site in self.sites],
        )

    @staticmethod
    def _parse_sites(stored: Any) -> Optional[List[LookupSite]]:
        if not isinstance(stored, list):
            return None
        try:
            return [LookupSite(**record) for record in stored]
        except (PydanticValidationError, TypeError) as e:
            logger.warning(f"Stored lookup sites are malformed, ignoring: {e}")
            return None
