"""Hand-rolled writers for migration payload bytes used across the tests."""

import base64
from urllib.parse import quote


def varint(value: int) -> bytes:
    value &= (1 << 64) - 1
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def tag(field_number: int, wire_type: int) -> bytes:
    return varint(field_number << 3 | wire_type)


def varint_field(field_number: int, value: int) -> bytes:
    return tag(field_number, 0) + varint(value)


def bytes_field(field_number: int, value) -> bytes:
    if isinstance(value, str):
        value = value.encode("utf-8")
    return tag(field_number, 2) + varint(len(value)) + value


def otp_parameter(secret=b"Hello", name="alice@example.com", issuer="Example",
                  algorithm=1, digits=None, kind=2, counter=None) -> bytes:
    body = bytes_field(1, secret) + bytes_field(2, name) + bytes_field(3, issuer)
    if algorithm is not None:
        body += varint_field(4, algorithm)
    if digits is not None:
        body += varint_field(5, digits)
    if kind is not None:
        body += varint_field(6, kind)
    if counter is not None:
        body += varint_field(7, counter)
    return body


def migration_payload(*parameters: bytes, version=1, batch_size=1, batch_index=0, batch_id=0) -> bytes:
    body = b"".join(bytes_field(1, p) for p in parameters)
    return (
        body
        + varint_field(2, version)
        + varint_field(3, batch_size)
        + varint_field(4, batch_index)
        + varint_field(5, batch_id)
    )


def migration_uri(raw: bytes) -> str:
    data = base64.b64encode(raw).decode("ascii")
    return "otpauth-migration://offline?data=" + quote(data, safe="")
