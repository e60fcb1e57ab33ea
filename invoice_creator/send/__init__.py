"""Outbound send channels"""

from .channels import build_sms_uri, build_mailto_uri, encode_component, UriLauncher, ClipboardWriter
from .dispatcher import SendDispatcher, DispatchResult, CLIPBOARD_FAILURE, CLIPBOARD_SUCCESS

__all__ = [
    "build_sms_uri",
    "build_mailto_uri",
    "encode_component",
    "UriLauncher",
    "ClipboardWriter",
    "SendDispatcher",
    "DispatchResult",
    "CLIPBOARD_FAILURE",
    "CLIPBOARD_SUCCESS",
]
