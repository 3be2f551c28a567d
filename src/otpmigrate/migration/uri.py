# src/otpmigrate/migration/uri.py

from urllib.parse import quote

from . import base32
from .payload import OtpParameter, OtpType

OTPAUTH_SCHEME = "otpauth://"

DEFAULT_DIGITS = 6

# The exporter writes its DigitCount enum into the digits field rather than
# a code length; values outside it are taken as a literal length
_DIGIT_COUNT_CODES = {1: 6, 2: 8, 3: 7}

_LABEL_SAFE = "@:"
_QUERY_SAFE = "@"


def build_otp_uri(parameter: OtpParameter, strict: bool = False) -> str:
    """
    Render one decoded account as an otpauth:// key URI.

    With strict=True the output matches the legacy exporter byte for byte:
    name and issuer are inserted verbatim and only secret and issuer are
    written. The default form percent-encodes the label and issuer and adds
    digits and counter when they differ from the OTP defaults.
    """
    otp_type = "hotp" if parameter.kind == OtpType.HOTP else "totp"
    secret = base32.encode(parameter.secret)

    if strict:
        return f"{OTPAUTH_SCHEME}{otp_type}/{parameter.name}?secret={secret}&issuer={parameter.issuer}"

    query = [
        ("secret", secret),
        ("issuer", quote(parameter.issuer, safe=_QUERY_SAFE)),
    ]
    digits = _DIGIT_COUNT_CODES.get(parameter.digits, parameter.digits)
    if digits not in (0, DEFAULT_DIGITS):
        query.append(("digits", str(digits)))
    # No algorithm parameter: SHA1 is the only one the schema defines and
    # it is also the otpauth default
    if parameter.kind == OtpType.HOTP and parameter.counter:
        query.append(("counter", str(parameter.counter)))

    label = quote(parameter.name, safe=_LABEL_SAFE)
    return f"{OTPAUTH_SCHEME}{otp_type}/{label}?" + "&".join(f"{k}={v}" for k, v in query)
