"""Hand-off URIs and platform hooks for the send channels"""

from typing import Awaitable, Callable
from urllib.parse import quote

# Characters encodeURIComponent-style encoding leaves alone
_URI_SAFE = "-_.!~*'()"

# Opens a sms:/mailto: URI in the platform's messaging or mail app
UriLauncher = Callable[[str], Awaitable[None]]

# Writes text to the system clipboard
ClipboardWriter = Callable[[str], Awaitable[None]]


def encode_component(text: str) -> str:
    return quote(text, safe=_URI_SAFE)


def build_sms_uri(phone: str, body: str) -> str:
    return f"sms:{phone}?body={encode_component(body)}"


def build_mailto_uri(email: str, number: str, body: str) -> str:
    subject = encode_component(f"Invoice {number}")
    return f"mailto:{email}?subject={subject}&body={encode_component(body)}"
