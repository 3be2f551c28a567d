# src/otpmigrate/codes/generator.py

import logging
import time
from dataclasses import dataclass
from typing import Optional

import pyotp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodeResult:
    name: str = ""
    issuer: str = ""
    code: str = ""
    success: bool = True
    error_message: str = ""
    # Seconds until a TOTP code rolls over; None for counter based codes
    remaining: Optional[int] = None


def _error(message: str) -> CodeResult:
    return CodeResult(success=False, error_message=message)


def generate_code(uri: str, at: Optional[float] = None) -> CodeResult:
    """
    Generate the current one time code for an otpauth:// URI.

    Never raises: an unparsable URI or an undecodable secret is reported
    through success=False and error_message.
    """
    try:
        otp = pyotp.parse_uri(uri)
        if isinstance(otp, pyotp.TOTP):
            if otp.interval <= 0:
                raise ValueError(f"period must be a positive number of seconds, got {otp.interval}")
            now = time.time() if at is None else at
            code = otp.at(int(now))
            remaining = int(otp.interval - now % otp.interval)
        else:
            code = otp.at(0)
            remaining = None
    except (ValueError, TypeError) as e:
        logger.debug("Code generation failed for %r: %s", uri, e)
        return _error(str(e) or type(e).__name__)

    return CodeResult(
        name=otp.name or "",
        issuer=otp.issuer or "",
        code=code,
        remaining=remaining,
    )
