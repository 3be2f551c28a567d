# src/otpmigrate/migration/payload.py

"""
Decoder for the account transfer message carried by a migration QR code.

The schema is fixed and small, so instead of a schema compiler this module
reads the two wire primitives it needs (varint and length-delimited) and
dispatches on field numbers with one table per message type:

    message MigrationPayload {
      repeated OtpParameters otp_parameters = 1;
      int32 version = 2;
      int32 batch_size = 3;
      int32 batch_index = 4;
      int32 batch_id = 5;
    }

    message OtpParameters {
      bytes secret = 1;
      string name = 2;
      string issuer = 3;
      Algorithm algorithm = 4;   // 1 = SHA1
      int32 digits = 5;
      OtpType type = 6;          // 1 = HOTP, 2 = TOTP
      int64 counter = 7;
    }

Fields outside these tables are skipped so payloads from newer exporters
still decode.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, Tuple

from .errors import TruncatedError, UnsupportedWireTypeError

logger = logging.getLogger(__name__)

WIRE_VARINT = 0
WIRE_LEN = 2

_MASK_64 = (1 << 64) - 1


class Algorithm(IntEnum):
    UNSPECIFIED = 0
    SHA1 = 1


class OtpType(IntEnum):
    UNSPECIFIED = 0
    HOTP = 1
    TOTP = 2


@dataclass(frozen=True)
class OtpParameter:
    secret: bytes = b""
    name: str = ""
    issuer: str = ""
    algorithm: Algorithm = Algorithm.UNSPECIFIED
    digits: int = 0
    kind: OtpType = OtpType.UNSPECIFIED
    counter: int = 0


@dataclass(frozen=True)
class MigrationPayload:
    parameters: Tuple[OtpParameter, ...] = ()
    version: int = 0
    batch_size: int = 0
    batch_index: int = 0
    batch_id: int = 0


def _to_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _int32(value: int) -> int:
    return _to_signed(value, 32)


def _int64(value: int) -> int:
    return _to_signed(value, 64)


def _utf8(value: bytes) -> str:
    return value.decode("utf-8", errors="replace")


def _algorithm(value: int) -> Algorithm:
    return Algorithm.SHA1 if value == Algorithm.SHA1 else Algorithm.UNSPECIFIED


def _otp_type(value: int) -> OtpType:
    try:
        return OtpType(value)
    except ValueError:
        return OtpType.UNSPECIFIED


class _Reader:
    """Cursor over a byte buffer yielding (field number, wire type, value)."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def read_varint(self) -> int:
        result = 0
        shift = 0
        while True:
            if self.pos >= len(self.data):
                raise TruncatedError(f"varint runs past end of buffer at offset {self.pos}")
            byte = self.data[self.pos]
            self.pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result & _MASK_64
            shift += 7

    def read_bytes(self) -> bytes:
        length = self.read_varint()
        end = self.pos + length
        if end > len(self.data):
            raise TruncatedError(
                f"field of {length} bytes at offset {self.pos} exceeds the "
                f"{len(self.data) - self.pos} bytes remaining"
            )
        value = self.data[self.pos:end]
        self.pos = end
        return value

    def fields(self) -> Iterator[Tuple[int, int, Any]]:
        while self.pos < len(self.data):
            offset = self.pos
            tag = self.read_varint()
            field_number, wire_type = tag >> 3, tag & 0b111
            if wire_type == WIRE_VARINT:
                value = self.read_varint()
            elif wire_type == WIRE_LEN:
                value = self.read_bytes()
            else:
                raise UnsupportedWireTypeError(wire_type, offset)
            yield field_number, wire_type, value


# field number -> (attribute, expected wire type, converter)
_PARAMETER_FIELDS: Dict[int, Tuple[str, int, Callable[[Any], Any]]] = {
    1: ("secret", WIRE_LEN, bytes),
    2: ("name", WIRE_LEN, _utf8),
    3: ("issuer", WIRE_LEN, _utf8),
    4: ("algorithm", WIRE_VARINT, _algorithm),
    5: ("digits", WIRE_VARINT, _int32),
    6: ("kind", WIRE_VARINT, _otp_type),
    7: ("counter", WIRE_VARINT, _int64),
}

_PAYLOAD_FIELDS: Dict[int, Tuple[str, int, Callable[[Any], Any]]] = {
    2: ("version", WIRE_VARINT, _int32),
    3: ("batch_size", WIRE_VARINT, _int32),
    4: ("batch_index", WIRE_VARINT, _int32),
    5: ("batch_id", WIRE_VARINT, _int32),
}


def _decode_parameter(data: bytes) -> OtpParameter:
    values = {}
    for field_number, wire_type, value in _Reader(data).fields():
        entry = _PARAMETER_FIELDS.get(field_number)
        if entry is None or entry[1] != wire_type:
            logger.debug("Skipping OtpParameter field %d (wire type %d)", field_number, wire_type)
            continue
        name, _, convert = entry
        # Last occurrence wins, as for any scalar field on the wire
        values[name] = convert(value)
    return OtpParameter(**values)


def decode_payload(raw: bytes) -> MigrationPayload:
    """
    Decode the binary migration message.

    Raises TruncatedError or UnsupportedWireTypeError; on failure no part of
    the payload is returned.
    """
    parameters = []
    values = {}
    for field_number, wire_type, value in _Reader(bytes(raw)).fields():
        if field_number == 1 and wire_type == WIRE_LEN:
            parameters.append(_decode_parameter(value))
            continue
        entry = _PAYLOAD_FIELDS.get(field_number)
        if entry is None or entry[1] != wire_type:
            logger.debug("Skipping MigrationPayload field %d (wire type %d)", field_number, wire_type)
            continue
        name, _, convert = entry
        values[name] = convert(value)

    logger.debug(
        "Decoded migration payload: %d account(s), batch %d/%d",
        len(parameters), values.get("batch_index", 0) + 1, values.get("batch_size", 0),
    )
    return MigrationPayload(parameters=tuple(parameters), **values)
