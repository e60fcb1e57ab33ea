"""Stateful services over the store"""

from .document_editor import DocumentEditor, ALLOWED_ATTACHMENT_TYPES
from .parts_catalog import PartsCatalog, DEFAULT_PARTS
from .contact_book import ContactBook, SAMPLE_CONTACTS
from .lookup_sites import (
    LookupSiteRegistry,
    build_lookup_url,
    is_allowed_domain,
    ALLOWED_LOOKUP_DOMAINS,
    DEFAULT_LOOKUP_SITES,
)
from .history_service import HistoryService, SaveResult

__all__ = [
    "DocumentEditor",
    "ALLOWED_ATTACHMENT_TYPES",
    "PartsCatalog",
    "DEFAULT_PARTS",
    "ContactBook",
    "SAMPLE_CONTACTS",
    "LookupSiteRegistry",
    "build_lookup_url",
    "is_allowed_domain",
    "ALLOWED_LOOKUP_DOMAINS",
    "DEFAULT_LOOKUP_SITES",
    "HistoryService",
    "SaveResult",
]
