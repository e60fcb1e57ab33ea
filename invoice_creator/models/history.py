"""Send channels and the append-only send log"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class SendChannel(str, Enum):
    """Outbound delivery channels"""
    MESSAGE = "message"
    MAIL = "mail"
    CLIPBOARD = "clipboard"


class HistoryLogEntry(BaseModel):
    """One entry per save/send; never edited once appended"""
    id: str
    document_number: str
    customer_name: str
    total: Decimal
    sent_at: datetime
    method: SendChannel
    attachment_count: int = 0
    files_saved: bool = False
    files_saved_location: Optional[str] = None
    export_ready: bool = False

    class Config:
        frozen = True
