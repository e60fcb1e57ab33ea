"""Working-copy editor for the invoice or quote being composed"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple
from datetime import date
from uuid import uuid4
import logging

from invoice_creator.config import settings
from invoice_creator.models.document import (
    Attachment,
    AttachmentHandle,
    Customer,
    Document,
    DocumentKind,
    DocumentTotals,
    LineItem,
    MediaKind,
    SavedDocument,
    compute_totals,
    format_document_number,
    parse_number_sequence,
)
from invoice_creator.models.contact import Contact
from invoice_creator.models.part import Part
from invoice_creator.utils.errors import ValidationError
from invoice_creator.validation.input_rules import (
    sanitize_input,
    parse_numeric,
    validate_numeric,
    NAME_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    NUMBER_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    QUANTITY_MIN,
    QUANTITY_MAX,
    PRICE_MIN,
    PRICE_MAX,
)

logger = logging.getLogger(__name__)

ALLOWED_ATTACHMENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/mov",
    "video/avi",
}

# field -> (min, max) for numeric line item fields
_NUMERIC_FIELDS: Dict[str, Tuple[Decimal, Decimal]] = {
    "quantity": (QUANTITY_MIN, QUANTITY_MAX),
    "unit_price": (PRICE_MIN, PRICE_MAX),
}


class DocumentEditor:
    """
    Mutates the single working Document in response to user actions.

    Owns the transient attachment handles: every handle acquired here is
    released on removal, on reset and on close.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        tax_rate: Optional[Decimal] = None,
        max_attachment_size_mb: Optional[int] = None
    ):
        """
        Args:
            document: Starting document (defaults to an empty invoice)
            tax_rate: Tax rate applied to totals (defaults to settings)
            max_attachment_size_mb: Attachment size limit (defaults to settings)
        """
        self.document = document or Document()
        self.tax_rate = Decimal(str(tax_rate if tax_rate is not None else settings.TAX_RATE))
        self.max_attachment_size_mb = max_attachment_size_mb or settings.MAX_ATTACHMENT_SIZE_MB

    # ------------------------------------------------------------------
    # Line items
    # ------------------------------------------------------------------

    def add_line_item(
        self,
        description: str = "",
        quantity: Decimal = Decimal("1"),
        unit_price: Decimal = Decimal("0")
    ) -> LineItem:
        """Append a line item with the next free id"""
        new_id = max((item.id for item in self.document.line_items), default=0) + 1
        item = LineItem(
            id=new_id,
            description=sanitize_input(description, DESCRIPTION_MAX_LENGTH),
            quantity=quantity,
            unit_price=unit_price,
        )
        self.document.line_items.append(item)
        return item

    def remove_line_item(self, item_id: int) -> bool:
        """
        Remove a line item.

        Returns:
            False when nothing was removed (unknown id or last remaining item)
        """
        if len(self.document.line_items) <= 1:
            return False
        before = len(self.document.line_items)
        self.document.line_items = [
            item for item in self.document.line_items if item.id != item_id
        ]
        return len(self.document.line_items) < before

    def update_line_item(self, item_id: int, field: str, value: Any) -> bool:
        """
        Update one field of a line item.

        Numeric values outside their range, or not numbers at all, are
        rejected silently and the item is left unchanged.

        Returns:
            True if the item was changed
        """
        item = self.get_line_item(item_id)
        if item is None:
            return False

        if field == "description":
            item.description = sanitize_input(str(value or ""), DESCRIPTION_MAX_LENGTH)
            return True

        if field in _NUMERIC_FIELDS:
            min_value, max_value = _NUMERIC_FIELDS[field]
            if not validate_numeric(value, min_value, max_value):
                logger.debug(f"Rejected {field}={value!r} for line item {item_id}")
                return False
            setattr(item, field, parse_numeric(value))
            return True

        logger.warning(f"Unknown line item field: {field}")
        return False

    def get_line_item(self, item_id: int) -> Optional[LineItem]:
        for item in self.document.line_items:
            if item.id == item_id:
                return item
        return None

    def apply_part(self, item_id: int, part: Part) -> bool:
        """Replace a line's description and price with a catalog part"""
        if self.get_line_item(item_id) is None:
            return False
        self.update_line_item(item_id, "description", part.line_description)
        self.update_line_item(item_id, "unit_price", part.price)
        return True

    def add_part_line(self, part: Part) -> LineItem:
        """Add a new line for a catalog part, quantity 1"""
        return self.add_line_item(
            description=part.line_description,
            quantity=Decimal("1"),
            unit_price=part.price,
        )

    # ------------------------------------------------------------------
    # Totals (always derived)
    # ------------------------------------------------------------------

    def totals(self) -> DocumentTotals:
        return compute_totals(self.document, self.tax_rate)

    def subtotal(self) -> Decimal:
        return self.totals().subtotal

    def tax(self) -> Decimal:
        return self.totals().tax

    def total(self) -> Decimal:
        return self.totals().total

    # ------------------------------------------------------------------
    # Header fields
    # ------------------------------------------------------------------

    def set_customer(
        self,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None
    ) -> Customer:
        customer = self.document.customer
        if name is not None:
            customer.name = sanitize_input(name, NAME_MAX_LENGTH)
        if phone is not None:
            customer.phone = sanitize_input(phone, PHONE_MAX_LENGTH)
        if email is not None:
            customer.email = sanitize_input(email, EMAIL_MAX_LENGTH)
        return customer

    def select_contact(self, contact: Contact) -> Customer:
        return self.set_customer(contact.name, contact.phone, contact.email)

    def set_kind(self, kind: DocumentKind) -> str:
        """Switch invoice/quote, keeping the numeric part of the number"""
        kind = DocumentKind(kind)
        self.document.kind = kind
        sequence = parse_number_sequence(self.document.number)
        self.document.number = format_document_number(kind, sequence)
        return self.document.number

    def set_number(self, number: str) -> str:
        """Manual edit; uniqueness is not enforced"""
        self.document.number = sanitize_input(number, NUMBER_MAX_LENGTH)
        return self.document.number

    def set_date(self, value: date) -> None:
        self.document.date = value

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def add_attachment(self, file_name: str, content_type: str, content: bytes) -> Attachment:
        """
        Attach a photo or video.

        Raises:
            ValidationError: unsupported type, empty or oversized file
        """
        if content_type not in ALLOWED_ATTACHMENT_TYPES:
            raise ValidationError(
                f'File "{file_name}" is not a supported type. Only images and videos are allowed.',
                field="attachment",
            )

        handle = AttachmentHandle(content)
        try:
            max_bytes = self.max_attachment_size_mb * 1024 * 1024
            if handle.size == 0:
                raise ValidationError(f'File "{file_name}" is empty.', field="attachment")
            if handle.size > max_bytes:
                raise ValidationError(
                    f'File "{file_name}" is too large. Maximum size is {self.max_attachment_size_mb}MB.',
                    field="attachment",
                )

            name = sanitize_input(file_name)
            if name != file_name:
                logger.warning("Attachment filename was sanitized")

            size_mb = (Decimal(handle.size) / Decimal(1024 * 1024)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
            attachment = Attachment(
                id=uuid4().hex,
                name=name,
                media_kind=MediaKind.IMAGE if content_type.startswith("image/") else MediaKind.VIDEO,
                content_type=content_type,
                size_mb=size_mb,
                handle=handle,
            )
        except Exception:
            handle.release()
            raise

        self.document.attachments.append(attachment)
        logger.info(f"Attached {attachment.media_kind.value} '{attachment.name}' ({size_mb}MB)")
        return attachment

    def remove_attachment(self, attachment_id: str) -> bool:
        for attachment in self.document.attachments:
            if attachment.id == attachment_id:
                if attachment.handle is not None:
                    attachment.handle.release()
                self.document.attachments.remove(attachment)
                return True
        return False

    def _release_attachments(self) -> None:
        for attachment in self.document.attachments:
            if attachment.handle is not None:
                attachment.handle.release()
        self.document.attachments = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> Document:
        """Clear the form: one empty line item, no customer, no attachments"""
        self._release_attachments()
        self.document.customer = Customer()
        self.document.line_items = [LineItem(id=1)]
        return self.document

    def load(self, saved: SavedDocument) -> Document:
        """Seed a new editable copy from a history entry"""
        self._release_attachments()
        items = [item.model_copy() for item in saved.line_items] or [LineItem(id=1)]
        self.document = Document(
            kind=self.document.kind,
            number=self.document.number,
            date=saved.date,
            customer=Customer(
                name=saved.customer_name,
                phone=saved.customer_phone,
                email=saved.customer_email,
            ),
            line_items=items,
        )
        return self.document

    def snapshot(self) -> Document:
        """
        Deep copy handed to renderers and history.

        Attachment handles are shared, not copied; the copy must not
        release them.
        """
        return Document(
            kind=self.document.kind,
            number=self.document.number,
            date=self.document.date,
            customer=self.document.customer.model_copy(),
            line_items=[item.model_copy() for item in self.document.line_items],
            attachments=[a.model_copy() for a in self.document.attachments],
        )

    def close(self) -> None:
        self._release_attachments()

    def __enter__(self) -> "DocumentEditor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
