# src/otpmigrate/migration/base32.py

"""
RFC 4648 base32 without padding, the form OTP secrets travel in.
"""

import base64
import binascii
import re

from .errors import Base32Error

_VALID_TEXT = re.compile(r"[A-Za-z2-7]*")


def encode(data: bytes) -> str:
    """Encode bytes as upper-case base32 with the trailing '=' removed."""
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode unpadded base32, case-insensitively.

    Raises Base32Error for characters outside the alphabet, for a tail
    length encode() can never produce, and for a tail whose unused low
    bits are not zero.
    """
    if not _VALID_TEXT.fullmatch(text):
        raise Base32Error(f"invalid base32 character in {text!r}")
    normalized = text.upper()

    padding = -len(normalized) % 8
    try:
        data = base64.b32decode(normalized + "=" * padding)
    except binascii.Error as e:
        raise Base32Error(f"invalid base32 length {len(text)}: {e}") from e

    # b32decode ignores the leftover bits of the last character
    if encode(data) != normalized:
        raise Base32Error("base32 tail has non-zero leftover bits")
    return data
