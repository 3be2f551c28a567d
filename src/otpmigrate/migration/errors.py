# src/otpmigrate/migration/errors.py


class Base32Error(ValueError):
    """Text is not a valid unpadded RFC 4648 base32 string."""


class DecodeError(ValueError):
    """The migration payload bytes could not be decoded."""


class TruncatedError(DecodeError):
    """The buffer ended in the middle of a varint or a length-delimited field."""


class UnsupportedWireTypeError(DecodeError):
    def __init__(self, wire_type: int, offset: int):
        super().__init__(f"unsupported wire type {wire_type} at offset {offset}")
        self.wire_type = wire_type
        self.offset = offset


class MigrationImportError(ValueError):
    """Base class for failures of a migration URI import."""


class InvalidUriError(MigrationImportError):
    pass


class MissingDataParameterError(MigrationImportError):
    pass


class InvalidBase64Error(MigrationImportError):
    pass


class PayloadDecodeError(MigrationImportError):
    def __init__(self, error: DecodeError):
        super().__init__(f"invalid migration payload: {error}")
        self.error = error


class NoAccountsError(MigrationImportError):
    pass
