"""Device export and native share of rendered documents"""

from datetime import datetime
from typing import Awaitable, Callable, List, Optional
import logging

from pydantic import BaseModel, Field

from invoice_creator.models.document import Document
from invoice_creator.models.money import format_money
from invoice_creator.utils.errors import UserCancelled
from .file_handler import FileHandler
from .renderers import DocumentRenderer, ExportFormat, artifact_file_names

logger = logging.getLogger(__name__)

DEVICE_LOCATION = "Device Downloads"

CONTENT_TYPES = {
    ExportFormat.TEXT: "text/plain",
    ExportFormat.CSV: "text/csv",
    ExportFormat.IIF: "application/octet-stream",
    ExportFormat.INSTRUCTIONS: "text/plain",
}


class ShareFile(BaseModel):
    """One file handed to the native share sheet"""
    file_name: str
    content_type: str
    content: bytes


class SharePayload(BaseModel):
    """Everything the native share sheet receives"""
    title: str
    text: str
    files: List[ShareFile] = Field(default_factory=list)


class ExportOutcome(BaseModel):
    """Result of an export or share attempt"""
    success: bool
    message: str
    files: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    shared: bool = False


# Raises UserCancelled when the user dismisses the sheet
ShareHandler = Callable[[SharePayload], Awaitable[None]]


class ExportService:
    """Renders documents and delivers the artifacts to the device or a share target"""
    
    def __init__(
        self,
        renderer: Optional[DocumentRenderer] = None,
        file_handler: Optional[FileHandler] = None
    ):
        self.renderer = renderer or DocumentRenderer()
        self.file_handler = file_handler or FileHandler()
    
    def render(
        self,
        document: Document,
        export_format: ExportFormat,
        generated_at: Optional[datetime] = None
    ) -> bytes:
        return self.renderer.render(document, export_format, generated_at)
    
    def export_to_device(
        self,
        document: Document,
        generated_at: Optional[datetime] = None
    ) -> ExportOutcome:
        """Write all four artifacts to the export directory"""
        generated_at = generated_at or datetime.now()
        saved: List[str] = []
        for export_format, file_name in artifact_file_names(document).items():
            content = self.render(document, export_format, generated_at)
            result = self.file_handler.save_artifact(content, file_name)
            saved.append(result["stored_name"])
        
        logger.info(f"Exported {len(saved)} files for {document.number}")
        return ExportOutcome(
            success=True,
            message="Files downloaded to your device!",
            files=saved,
            location=DEVICE_LOCATION,
        )
    
    def build_share_payload(self, document: Document) -> SharePayload:
        """Text and CSV files plus the share title and summary line"""
        names = artifact_file_names(document)
        files = [
            ShareFile(
                file_name=names[export_format],
                content_type=CONTENT_TYPES[export_format],
                content=self.render(document, export_format),
            )
            for export_format in (ExportFormat.TEXT, ExportFormat.CSV)
        ]
        total = self.renderer.totals(document).total
        return SharePayload(
            title=f"Invoice {document.number}",
            text=f"Invoice for {document.customer.name} - Total: ${format_money(total)}",
            files=files,
        )
    
    async def share(
        self,
        document: Document,
        share_handler: Optional[ShareHandler] = None,
        generated_at: Optional[datetime] = None
    ) -> ExportOutcome:
        """
        Hand the text and CSV to the native share sheet
        
        Falls back to device export when no share handler is available or
        sharing fails; a user cancel is reported without falling back.
        """
        if share_handler is None:
            logger.info("Native share unavailable; exporting to device")
            return self.export_to_device(document, generated_at)
        
        payload = self.build_share_payload(document)
        try:
            await share_handler(payload)
        except UserCancelled:
            logger.info(f"Share of {document.number} cancelled by user")
            return ExportOutcome(success=False, message="Share cancelled")
        except Exception as e:
            logger.warning(f"Share failed, falling back to device export: {e}")
            return self.export_to_device(document, generated_at)
        
        logger.info(f"Shared {len(payload.files)} files for {document.number}")
        return ExportOutcome(
            success=True,
            message="Shared successfully!",
            files=[f.file_name for f in payload.files],
            shared=True,
        )
    
    async def save_files(
        self,
        document: Document,
        share_enabled: bool = False,
        share_handler: Optional[ShareHandler] = None,
        generated_at: Optional[datetime] = None
    ) -> ExportOutcome:
        """Share when enabled and available, otherwise export to device"""
        if share_enabled and share_handler is not None:
            return await self.share(document, share_handler, generated_at)
        return self.export_to_device(document, generated_at)
