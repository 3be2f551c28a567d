# src/otpmigrate/migration/importer.py

import base64
import logging
from dataclasses import dataclass
from typing import Tuple
from urllib.parse import parse_qs, urlparse

from .errors import (
    DecodeError,
    InvalidBase64Error,
    InvalidUriError,
    MissingDataParameterError,
    NoAccountsError,
    PayloadDecodeError,
)
from .payload import decode_payload
from .uri import build_otp_uri

logger = logging.getLogger(__name__)

MIGRATION_SCHEME = "otpauth-migration://"


@dataclass(frozen=True)
class ImportOutcome:
    uris: Tuple[str, ...]
    account_count: int

    @property
    def has_multiple_accounts(self) -> bool:
        return self.account_count > 1


def is_migration_uri(uri: str) -> bool:
    return uri.startswith(MIGRATION_SCHEME)


def _decode_data_parameter(encoded_data: str) -> bytes:
    # parse_qs turns a literal '+' into a space; exporters do not always
    # percent-encode it, so put it back. Accept the URL-safe alphabet too.
    encoded_data = encoded_data.replace(" ", "+").replace("-", "+").replace("_", "/")
    padding_needed = len(encoded_data) % 4
    if padding_needed:
        encoded_data += "=" * (4 - padding_needed)
    # binascii.Error covers bad symbols and length; non-ASCII text raises a plain ValueError
    try:
        return base64.b64decode(encoded_data, validate=True)
    except ValueError as e:
        raise InvalidBase64Error(f"data parameter is not valid base64: {e}") from e


def import_from_migration_uri(uri: str, strict: bool = False) -> ImportOutcome:
    """
    Turn a scanned string into otpauth:// URIs.

    A migration URI is decoded into one URI per account, in payload order.
    Any other string is passed through untouched as a single account and
    left for the code generator to validate.

    Raises a MigrationImportError subclass; nothing is returned on failure.
    Whether to use or drop accounts beyond the first is up to the caller.
    """
    if not is_migration_uri(uri):
        logger.debug("Not a migration URI, passing through")
        return ImportOutcome(uris=(uri,), account_count=1)

    try:
        parsed_uri = urlparse(uri)
    except ValueError as e:
        raise InvalidUriError(f"malformed migration URI: {e}") from e

    query_params = parse_qs(parsed_uri.query)
    data_list = query_params.get("data")
    if not data_list:
        raise MissingDataParameterError("migration URI has no data parameter")

    binary_data = _decode_data_parameter(data_list[0])
    logger.debug("Decoded %d payload bytes", len(binary_data))

    try:
        payload = decode_payload(binary_data)
    except DecodeError as e:
        raise PayloadDecodeError(e) from e

    if not payload.parameters:
        raise NoAccountsError("migration payload contains no accounts")

    uris = tuple(build_otp_uri(parameter, strict=strict) for parameter in payload.parameters)
    return ImportOutcome(uris=uris, account_count=len(uris))
