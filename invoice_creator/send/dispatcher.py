"""Send the working document by message, mail or clipboard"""

from typing import Optional
import logging

from pydantic import BaseModel

from invoice_creator.export.export_service import ShareHandler
from invoice_creator.export.renderers import DocumentRenderer
from invoice_creator.models.history import SendChannel
from invoice_creator.services.document_editor import DocumentEditor
from invoice_creator.services.history_service import HistoryService, SaveResult
from invoice_creator.utils.errors import ChannelUnavailableError, ValidationError
from invoice_creator.validation.input_rules import sanitize_input, validate_email, validate_phone
from .channels import ClipboardWriter, UriLauncher, build_mailto_uri, build_sms_uri

logger = logging.getLogger(__name__)

CLIPBOARD_SUCCESS = "Invoice copied to clipboard! You can paste it anywhere."
CLIPBOARD_FAILURE = "Could not copy to clipboard. Please try again."


class DispatchResult(BaseModel):
    """Outcome of one send; close_dialog is False only for recoverable failures"""
    success: bool
    close_dialog: bool
    channel: SendChannel
    message: Optional[str] = None
    uri: Optional[str] = None
    text: str
    save: SaveResult


class SendDispatcher:
    """
    Validates the recipient, saves the document to history and hands the
    plain-text rendering to the chosen channel.

    The text is rendered before the save, so it carries the number the
    document was saved under, not the advanced one.
    """

    def __init__(
        self,
        editor: DocumentEditor,
        history: HistoryService,
        renderer: Optional[DocumentRenderer] = None,
        uri_launcher: Optional[UriLauncher] = None,
        clipboard: Optional[ClipboardWriter] = None
    ):
        self.editor = editor
        self.history = history
        self.renderer = renderer or DocumentRenderer(tax_rate=editor.tax_rate)
        self.uri_launcher = uri_launcher
        self.clipboard = clipboard

    def validate_recipient(self, channel: SendChannel) -> None:
        """
        Raises:
            ValidationError: missing name, or the channel's address is
                missing or invalid
        """
        customer = self.editor.document.customer
        name = sanitize_input(customer.name)
        phone = sanitize_input(customer.phone)
        email = sanitize_input(customer.email)

        if not name:
            raise ValidationError("Please enter a valid customer name", field="name")
        if channel == SendChannel.MESSAGE and not (phone and validate_phone(phone)):
            raise ValidationError("Please enter a valid phone number for SMS", field="phone")
        if channel == SendChannel.MAIL and not (email and validate_email(email)):
            raise ValidationError("Please enter a valid email address for email", field="email")

    async def send(
        self,
        channel: SendChannel,
        save_to_device: bool = True,
        share_enabled: bool = False,
        share_handler: Optional[ShareHandler] = None
    ) -> DispatchResult:
        """
        Send the working document.

        Raises:
            ValidationError: recipient check failed; nothing was saved
        """
        channel = SendChannel(channel)
        self.validate_recipient(channel)

        snapshot = self.editor.snapshot()
        text = self.renderer.render_text(snapshot)

        save = await self.history.save_document(
            snapshot,
            method=channel,
            save_to_device=save_to_device,
            share_enabled=share_enabled,
            share_handler=share_handler,
        )
        self.editor.set_number(save.next_number)

        customer = snapshot.customer
        if channel == SendChannel.CLIPBOARD:
            return await self._copy(text, save)

        if channel == SendChannel.MESSAGE:
            uri = build_sms_uri(sanitize_input(customer.phone), text)
        else:
            uri = build_mailto_uri(
                sanitize_input(customer.email), sanitize_input(snapshot.number), text
            )
        await self._launch(uri)
        return DispatchResult(
            success=True,
            close_dialog=True,
            channel=channel,
            uri=uri,
            text=text,
            save=save,
        )

    async def _launch(self, uri: str) -> None:
        # Fire-and-forget: the caller opens the URI when no launcher is wired
        if self.uri_launcher is None:
            return
        try:
            await self.uri_launcher(uri)
        except Exception as e:
            logger.warning(f"URI hand-off failed: {e}")

    async def _copy(self, text: str, save: SaveResult) -> DispatchResult:
        try:
            if self.clipboard is None:
                raise ChannelUnavailableError(SendChannel.CLIPBOARD.value)
            await self.clipboard(text)
        except Exception as e:
            logger.error(f"Clipboard error: {e}")
            return DispatchResult(
                success=False,
                close_dialog=False,
                channel=SendChannel.CLIPBOARD,
                message=CLIPBOARD_FAILURE,
                text=text,
                save=save,
            )
        return DispatchResult(
            success=True,
            close_dialog=True,
            channel=SendChannel.CLIPBOARD,
            message=CLIPBOARD_SUCCESS,
            text=text,
            save=save,
        )
