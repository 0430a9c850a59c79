# =============================================================================
# lib/codec.py - Inline Asset Encoding
# =============================================================================
# Curriculum code assets may be stored either as a plain location or as an
# inline data URL ("data:text/plain;base64,<payload>"). These helpers convert
# between text and that inline form.
#
# Decoding never raises: a missing or malformed payload yields the caller's
# default so a broken record still renders.
# =============================================================================

import base64
import binascii
import logging
import re
from urllib.parse import unquote_to_bytes

logger = logging.getLogger(__name__)

INLINE_TEXT_MIME = "text/plain"
INLINE_TEXT_PREFIX = f"data:{INLINE_TEXT_MIME};base64,"
DEFAULT_MIME = "application/octet-stream"

_HEADER_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*)$", re.IGNORECASE)


def is_inline(value: str | None) -> bool:
    """True if the value is a data URL rather than an external location."""
    return bool(value) and value.startswith("data:")


def encode_inline_text(text: str) -> str:
    """
    Encode text as an inline base64 data URL.

    Example:
        encode_inline_text("print('hi')")
        # "data:text/plain;base64,cHJpbnQoJ2hpJyk="
    """
    payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return INLINE_TEXT_PREFIX + payload


def _split_data_url(data_url: str) -> tuple[str, bool, str]:
    """Split a data URL into (mime, is_base64, payload). Raises ValueError."""
    if not is_inline(data_url):
        raise ValueError("Invalid data URL.")
    header, sep, payload = data_url.partition(",")
    if not sep:
        raise ValueError("Invalid data URL.")
    match = _HEADER_RE.match(header)
    if not match:
        raise ValueError("Invalid data URL.")
    params = [p.strip().lower() for p in match.group("params").split(";") if p.strip()]
    mime = match.group("mime").strip() or DEFAULT_MIME
    return mime, "base64" in params, payload


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """
    Decode a data URL into raw bytes and its MIME type.

    Used when an admin form submits a file as a data URL that has to be
    pushed to object storage.

    Raises:
        ValueError: If the value is not a well-formed data URL
    """
    mime, is_base64, payload = _split_data_url(data_url)
    if not is_base64:
        return unquote_to_bytes(payload), mime
    try:
        return base64.b64decode(payload, validate=True), mime
    except binascii.Error as e:
        raise ValueError("Invalid data URL.") from e


def decode_inline_text(value: str | None, default: str = "") -> str:
    """
    Decode an inline data URL back into text.

    Returns `default` when the value is absent, not a data URL, or carries a
    payload that is not valid base64 / UTF-8.
    """
    if not is_inline(value):
        return default
    try:
        raw, _mime = decode_data_url(value)
        return raw.decode("utf-8")
    except (ValueError, UnicodeDecodeError) as e:
        logger.debug(f"Unreadable inline payload: {e}")
        return default
