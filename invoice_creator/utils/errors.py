"""Error kinds shared by the store, the editor and the dispatchers"""

from typing import Optional


class InvoiceCreatorError(Exception):
    """Base class for all application errors"""
    pass


class ValidationError(InvoiceCreatorError):
    """User input failed validation; nothing was mutated"""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StorageDecodeError(InvoiceCreatorError):
    """A persisted blob could not be decoded"""
    def __init__(self, key: str, reason: str = "corrupt data"):
        super().__init__(f"Could not decode stored value for '{key}': {reason}")
        self.key = key


class ChannelUnavailableError(InvoiceCreatorError):
    """Clipboard or native share is not available on this platform"""
    def __init__(self, channel: str, message: Optional[str] = None):
        super().__init__(message or f"Channel '{channel}' is not available")
        self.channel = channel


class UserCancelled(InvoiceCreatorError):
    """The user dismissed a native dialog; not a failure"""
    pass
