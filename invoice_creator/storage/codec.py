"""
Reversible text encoding for stored values.

Values are serialized to JSON and then base64-encoded. This only deters
casual inspection of the database file; it is not encryption.
"""

import base64
import binascii
import json
from typing import Any

from invoice_creator.utils.errors import StorageDecodeError


def encode_value(value: Any) -> str:
    """Serialize a JSON-compatible value to a text-safe blob"""
    serialized = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(serialized.encode("utf-8")).decode("ascii")


def decode_value(blob: str, key: str = "<unknown>") -> Any:
    """
    Reverse encode_value.
    
    Raises:
        StorageDecodeError: blob is not valid base64, UTF-8 or JSON, or nests too deeply
    """
    if not isinstance(blob, str) or not blob:
        raise StorageDecodeError(key, "empty or non-text blob")
    try:
        raw = base64.b64decode(blob.encode("ascii"), validate=True)
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError, RecursionError) as e:
        raise StorageDecodeError(key, str(e)) from e
