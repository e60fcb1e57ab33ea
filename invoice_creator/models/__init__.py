"""Data models"""

from .document import (
    Attachment,
    AttachmentHandle,
    AttachmentMeta,
    Customer,
    Document,
    DocumentKind,
    DocumentTotals,
    LineItem,
    MediaKind,
    SavedDocument,
    compute_totals,
)
from .contact import Contact
from .part import Part, LookupSite
from .history import HistoryLogEntry, SendChannel

__all__ = [
    "Attachment",
    "AttachmentHandle",
    "AttachmentMeta",
    "Customer",
    "Document",
    "DocumentKind",
    "DocumentTotals",
    "LineItem",
    "MediaKind",
    "SavedDocument",
    "compute_totals",
    "Contact",
    "Part",
    "LookupSite",
    "HistoryLogEntry",
    "SendChannel",
]
