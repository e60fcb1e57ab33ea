"""Durable key/value storage"""

from .codec import encode_value, decode_value
from .store import KeyValueStore, StoreKeys

__all__ = ["encode_value", "decode_value", "KeyValueStore", "StoreKeys"]
