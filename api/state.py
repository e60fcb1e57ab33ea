"""Process-wide application state shared by the API routes"""

from typing import Optional
import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from invoice_creator.export import ExportService, DocumentRenderer, FileHandler
from invoice_creator.models.document import kind_from_number
from invoice_creator.models.history import SendChannel
from invoice_creator.send import SendDispatcher
from invoice_creator.services import (
    ContactBook,
    DocumentEditor,
    HistoryService,
    LookupSiteRegistry,
    PartsCatalog,
)
from invoice_creator.storage import KeyValueStore, StoreKeys

logger = logging.getLogger(__name__)


class PresentationState(BaseModel):
    """
    Panel visibility and UI preferences, replaced wholesale on every change.

    The core services never see this; routes read the export preferences
    from it and pass them along explicitly.
    """
    show_contacts: bool = False
    show_send_dialog: bool = False
    show_history: bool = False
    show_parts_lookup: bool = False
    show_options: bool = False
    show_tutorial: bool = False
    tutorial_step: int = 0
    send_method: SendChannel = SendChannel.MESSAGE
    save_to_device: bool = True
    share_enabled: bool = False
    price_refresh_enabled: bool = True
    selected_item_id: Optional[int] = None
    price_alert: Optional[str] = None

    class Config:
        frozen = True


class AppState:
    """The single editor plus every store-backed service"""

    def __init__(
        self,
        db_engine: Optional[AsyncEngine] = None,
        export_path: Optional[str] = None
    ):
        """
        Args:
            db_engine: Engine backing the store (defaults to the app database)
            export_path: Export directory (defaults to settings.EXPORT_PATH)
        """
        self.db_engine = db_engine
        session_factory = None
        if db_engine is not None:
            session_factory = async_sessionmaker(
                db_engine, class_=AsyncSession, expire_on_commit=False
            )
        self.store = KeyValueStore(session_factory)
        self.editor = DocumentEditor()
        self.catalog = PartsCatalog(self.store)
        self.contacts = ContactBook(self.store)
        self.lookup_sites = LookupSiteRegistry(self.store)
        self.renderer = DocumentRenderer(tax_rate=self.editor.tax_rate)
        self.export_service = ExportService(self.renderer, FileHandler(export_path))
        self.history = HistoryService(self.store, self.export_service, self.editor.tax_rate)
        self.dispatcher = SendDispatcher(self.editor, self.history, self.renderer)
        self.presentation = PresentationState()

    async def load(self) -> None:
        """Load every persisted collection and resume numbering"""
        await self.contacts.load()
        await self.history.load()
        await self.lookup_sites.load()
        await self.catalog.load()

        last_number = await self.history.last_number()
        if last_number:
            kind = kind_from_number(last_number)
            if kind is not None:
                self.editor.document.kind = kind
            self.editor.set_number(last_number)

        seen_tutorial = await self.store.get_flag(StoreKeys.HAS_SEEN_TUTORIAL)
        self.presentation = self.presentation.model_copy(update={
            "show_tutorial": not seen_tutorial,
            "price_refresh_enabled": self.catalog.price_refresh_enabled,
            "price_alert": self.catalog.check_price_refresh(),
        })
        logger.info("Application state loaded")

    async def dismiss_tutorial(self) -> None:
        await self.store.put_flag(StoreKeys.HAS_SEEN_TUTORIAL, True)
        self.presentation = self.presentation.model_copy(
            update={"show_tutorial": False, "tutorial_step": 0}
        )

    def close(self) -> None:
        self.editor.close()


_state: Optional[AppState] = None


def get_app_state() -> AppState:
    """FastAPI dependency; state is created and loaded at startup"""
    global _state
    if _state is None:
        _state = AppState()
    return _state


def set_app_state(state: Optional[AppState]) -> None:
    global _state
    _state = state
