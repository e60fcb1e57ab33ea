"""Saved-document history, the send log and document numbering"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Type, TypeVar
from uuid import uuid4
import logging

from pydantic import BaseModel, ValidationError as PydanticValidationError

from invoice_creator.config import settings
from invoice_creator.export.export_service import ExportOutcome, ExportService, ShareHandler
from invoice_creator.models.document import (
    AttachmentMeta,
    Document,
    SavedDocument,
    compute_totals,
    next_document_number,
)
from invoice_creator.models.history import HistoryLogEntry, SendChannel
from invoice_creator.storage.store import KeyValueStore, StoreKeys

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SaveResult(BaseModel):
    """What one save produced"""
    saved: SavedDocument
    log_entry: HistoryLogEntry
    next_number: str
    export: Optional[ExportOutcome] = None


class HistoryService:
    """
    Append-only history of saved documents and send-log entries.

    Both lists live in the store under invoices and invoiceLogs; the next
    document number lives under lastInvoiceNumber.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        export_service: Optional[ExportService] = None,
        tax_rate: Optional[Decimal] = None
    ):
        self.store = store or KeyValueStore()
        self.export_service = export_service
        self.tax_rate = Decimal(str(tax_rate if tax_rate is not None else settings.TAX_RATE))
        self.saved_documents: List[SavedDocument] = []
        self.logs: List[HistoryLogEntry] = []

    async def load(self) -> None:
        self.saved_documents = self._parse_list(
            await self.store.get(StoreKeys.INVOICES), SavedDocument
        )
        self.logs = self._parse_list(
            await self.store.get(StoreKeys.INVOICE_LOGS), HistoryLogEntry
        )
        logger.info(
            f"Loaded {len(self.saved_documents)} saved documents and {len(self.logs)} log entries"
        )

    async def last_number(self) -> Optional[str]:
        """Number to resume with, if one was stored"""
        value = await self.store.get(StoreKeys.LAST_INVOICE_NUMBER)
        return value if isinstance(value, str) and value else None

    def get_saved(self, saved_id: str) -> Optional[SavedDocument]:
        return next((doc for doc in self.saved_documents if doc.id == saved_id), None)

    async def save_document(
        self,
        document: Document,
        method: SendChannel,
        save_to_device: bool = False,
        share_enabled: bool = False,
        share_handler: Optional[ShareHandler] = None,
        now: Optional[datetime] = None
    ) -> SaveResult:
        """
        Record a document in history and advance the numbering.

        Args:
            document: Snapshot of the working document
            method: Channel the document is being sent through
            save_to_device: Also export the artifacts
            share_enabled: Prefer the native share sheet when exporting
            share_handler: Native share sheet, if the platform has one
            now: Timestamp for the history records (defaults to utcnow)
        """
        now = now or datetime.utcnow()
        totals = compute_totals(document, self.tax_rate)

        saved = SavedDocument(
            id=uuid4().hex,
            number=document.number,
            kind=document.kind,
            date=document.date,
            customer_name=document.customer.name,
            customer_phone=document.customer.phone,
            customer_email=document.customer.email,
            line_items=[item.model_copy() for item in document.billable_items()],
            attachments=[
                AttachmentMeta(name=a.name, media_kind=a.media_kind, size_mb=a.size_mb)
                for a in document.attachments
            ],
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            saved_at=now,
        )
        self.saved_documents.append(saved)
        await self._persist(StoreKeys.INVOICES, self.saved_documents)

        export_outcome = None
        files_saved = False
        if save_to_device and self.export_service is not None:
            try:
                export_outcome = await self.export_service.save_files(
                    document, share_enabled, share_handler, generated_at=now
                )
            except OSError as e:
                logger.error(f"Export of {document.number} failed: {e}", exc_info=True)
                export_outcome = ExportOutcome(success=False, message=f"Could not save files: {e}")
            files_saved = export_outcome.success

        log_entry = HistoryLogEntry(
            id=uuid4().hex,
            document_number=document.number,
            customer_name=document.customer.name,
            total=totals.total,
            sent_at=now,
            method=method,
            attachment_count=len(document.attachments),
            files_saved=files_saved,
            files_saved_location="Device Downloads" if files_saved else None,
            export_ready=files_saved,
        )
        self.logs.append(log_entry)
        await self._persist(StoreKeys.INVOICE_LOGS, self.logs)

        next_number = next_document_number(document.number, document.kind)
        await self.store.put(StoreKeys.LAST_INVOICE_NUMBER, next_number)

        logger.info(f"Saved {document.number} via {method.value}; next number {next_number}")
        return SaveResult(
            saved=saved,
            log_entry=log_entry,
            next_number=next_number,
            export=export_outcome,
        )

    async def _persist(self, key: str, records: List[BaseModel]) -> None:
        await self.store.put(key, [record.model_dump(mode="json") for record in records])

    @staticmethod
    def _parse_list(stored: Any, model: Type[ModelT]) -> List[ModelT]:
        """Records that fail to parse are dropped individually"""
        if not isinstance(stored, list):
            return []
        records: List[ModelT] = []
        for record in stored:
            try:
                records.append(model(**record))
            except (PydanticValidationError, TypeError) as e:
                logger.warning(f"Skipping malformed {model.__name__} record: {e}")
        return records
