"""Document (invoice/quote) data models"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from io import BytesIO
from typing import List, Optional
from pydantic import BaseModel, Field
import re

from .money import quantize_money


class DocumentKind(str, Enum):
    """Document kinds"""
    INVOICE = "invoice"
    QUOTE = "quote"

    @property
    def prefix(self) -> str:
        return "QUO" if self is DocumentKind.QUOTE else "INV"


class MediaKind(str, Enum):
    """Attachment media kinds"""
    IMAGE = "image"
    VIDEO = "video"


class Customer(BaseModel):
    """Bill-to customer block"""
    name: str = ""
    phone: str = ""
    email: str = ""


class LineItem(BaseModel):
    """One billable row"""
    id: int
    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def is_billable(self) -> bool:
        """Empty-description rows stay editable but are never billed"""
        return bool(self.description)


class AttachmentHandle:
    """
    Transient in-memory media buffer owned by the editing session.
    
    Must be released when the attachment is removed or the form is cleared.
    """

    def __init__(self, content: bytes):
        self._buffer: Optional[BytesIO] = BytesIO(content)
        self.size = len(content)

    @property
    def released(self) -> bool:
        return self._buffer is None

    def read(self) -> bytes:
        if self._buffer is None:
            raise ValueError("Attachment handle has been released")
        return self._buffer.getvalue()

    def release(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None


class Attachment(BaseModel):
    """Photo or video attached to the working document"""
    id: str
    name: str
    media_kind: MediaKind
    content_type: str
    size_mb: Decimal
    handle: Optional[AttachmentHandle] = Field(default=None, exclude=True)

    class Config:
        arbitrary_types_allowed = True


class AttachmentMeta(BaseModel):
    """Attachment metadata kept in saved history (no content)"""
    name: str
    media_kind: MediaKind
    size_mb: Decimal


class Document(BaseModel):
    """Working copy of the invoice or quote being edited"""
    kind: DocumentKind = DocumentKind.INVOICE
    number: str = "INV-001"
    date: dt.date = Field(default_factory=dt.date.today)
    customer: Customer = Field(default_factory=Customer)
    line_items: List[LineItem] = Field(default_factory=lambda: [LineItem(id=1)])
    attachments: List[Attachment] = Field(default_factory=list)

    def billable_items(self) -> List[LineItem]:
        return [item for item in self.line_items if item.is_billable]


class DocumentTotals(BaseModel):
    """Derived totals; never stored on the working document"""
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def compute_subtotal(items: List[LineItem]) -> Decimal:
    """Sum of line totals over billable items"""
    return sum((item.line_total for item in items if item.is_billable), Decimal("0"))


def compute_totals(document: Document, tax_rate: Decimal) -> DocumentTotals:
    subtotal = compute_subtotal(document.line_items)
    tax = subtotal * Decimal(str(tax_rate))
    return DocumentTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


class SavedDocument(BaseModel):
    """Immutable history snapshot of a saved document"""
    id: str
    number: str
    kind: DocumentKind = DocumentKind.INVOICE
    date: dt.date
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    line_items: List[LineItem] = Field(default_factory=list)
    attachments: List[AttachmentMeta] = Field(default_factory=list)
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    saved_at: dt.datetime

    class Config:
        frozen = True


# ---------------------------------------------------------------------------
# Document numbering: <PREFIX>-<NNN>
# ---------------------------------------------------------------------------

_NUMBER_SEQUENCE = re.compile(r"^\s*(\d+)")


def format_document_number(kind: DocumentKind, sequence: int) -> str:
    return f"{kind.prefix}-{sequence:03d}"


def parse_number_sequence(number: str) -> int:
    """
    Numeric part after the first '-'; 1 when it cannot be parsed.
    
    Leading digits are honoured ("INV-12a" -> 12).
    """
    parts = (number or "").split("-")
    if len(parts) < 2:
        return 1
    match = _NUMBER_SEQUENCE.match(parts[1])
    if not match or int(match.group(1)) == 0:
        return 1
    return int(match.group(1))


def next_document_number(number: str, kind: DocumentKind) -> str:
    return format_document_number(kind, parse_number_sequence(number) + 1)


def kind_from_number(number: str) -> Optional[DocumentKind]:
    """Kind named by a number's prefix, or None for an unknown prefix"""
    prefix = (number or "").split("-", 1)[0].strip().upper()
    for kind in DocumentKind:
        if kind.prefix == prefix:
            return kind
    return None


def summarize_totals(totals: DocumentTotals) -> dict:
    """Totals rounded to cents for display and logs"""
    return {
        "subtotal": quantize_money(totals.subtotal),
        "tax": quantize_money(totals.tax),
        "total": quantize_money(totals.total),
    }
