"""Utility modules for common functionality"""

from .errors import (
    InvoiceCreatorError,
    ValidationError,
    StorageDecodeError,
    ChannelUnavailableError,
    UserCancelled,
)

__all__ = [
    'InvoiceCreatorError',
    'ValidationError',
    'StorageDecodeError',
    'ChannelUnavailableError',
    'UserCancelled',
]
