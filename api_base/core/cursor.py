"""Opaque pagination cursors.

A cursor is the base64 form of a record identifier's decimal string. It only
discourages callers from treating the value as an offset; it is not a security
token. Decoding is fail-open: anything that does not decode to an integer in
``0..MAX_CURSOR_VALUE`` means "no position".
"""

import base64
import binascii

DEFAULT_MAX_CURSOR_LENGTH = 64

# Largest position a signed 64-bit id column can hold
MAX_CURSOR_VALUE = 2**63 - 1

# Maps the standard alphabet onto the URL-safe one
_STANDARD_TO_URLSAFE = str.maketrans("+/", "-_")


def encode_cursor(value: int) -> str:
    """Encode a record position as an opaque cursor.

    Args:
        value: Non-negative integer position (usually a record id)

    Returns:
        URL-safe base64 string

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"Cursor position must be non-negative, got {value}")
    return base64.urlsafe_b64encode(str(int(value)).encode("ascii")).decode("ascii")


def decode_cursor(
    token: str | None,
    max_length: int = DEFAULT_MAX_CURSOR_LENGTH,
) -> int | None:
    """Decode a cursor back into a position.

    Accepts both base64 alphabets and missing padding.

    Args:
        token: Cursor from a query string, or None
        max_length: Longest token considered before giving up

    Returns:
        The decoded position, or None when the token is absent, malformed or
        out of range
    """
    if not token:
        return None

    token = token.strip()
    if not token or len(token) > max_length:
        return None

    normalized = token.translate(_STANDARD_TO_URLSAFE)
    normalized += "=" * (-len(normalized) % 4)

    try:
        raw = base64.urlsafe_b64decode(normalized.encode("ascii")).decode("ascii")
    except (binascii.Error, ValueError, UnicodeError):
        return None

    if not raw.isdecimal():
        return None
    value = int(raw)
    if value > MAX_CURSOR_VALUE:
        return None
    return value


class CursorCodec:
    """Cursor encoder/decoder with a configured maximum token length."""

    def __init__(self, max_length: int = DEFAULT_MAX_CURSOR_LENGTH):
        self.max_length = max_length

    def encode(self, value: int | None) -> str | None:
        """Encode a position, passing None through."""
        if value is None:
            return None
        return encode_cursor(value)

    def decode(self, token: str | None) -> int | None:
        """Decode a cursor, yielding None for absent or malformed tokens."""
        return decode_cursor(token, max_length=self.max_length)
