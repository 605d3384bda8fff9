"""
Signature generation and verification for the tif gateway.

The gateway signs with a plain SHA-256 digest over a canonical string in
which the shared token is interleaved with the timestamp and nonce:

    timestamp + token + nonce + timestamp

Requests relayed by the gateway on behalf of a user also carry caller
context, which is folded into the string between the nonce and the
trailing timestamp:

    timestamp + token + nonce + uid + "," + uinfo + "," + ext + timestamp

The digest is sent upper-case hex. The layout is fixed by existing
deployments and must not change.
"""

import hashlib
import hmac
import os
import re
import time
from typing import Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict

from .constants import (
    HEADER_TIF_UID,
    HEADER_TIF_UINFO,
    HEADER_TIF_EXT,
    HEADER_TIF_TIMESTAMP,
    HEADER_TIF_NONCE,
    HEADER_TIF_SIGNATURE,
    DEFAULT_TIME_OFFSET_LIMIT,
    DEFAULT_NONCE_SIZE
)
from .exceptions import (
    ConfigurationError,
    RandomSourceError,
    MalformedTimestampError,
    ClockSkewError,
    SignatureInvalidError
)

_TIMESTAMP_RE = re.compile(r'-?[0-9]{1,19}')
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def generate_nonce(size: int = DEFAULT_NONCE_SIZE) -> str:
    """
    Generate a hex-encoded nonce from the OS secure random source.

    Args:
        size: Number of random bytes; the result is twice as long

    Returns:
        Lower-case hex string

    Raises:
        RandomSourceError: If the OS cannot supply random bytes
    """
    try:
        return os.urandom(size).hex()
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError(f"secure random source failed: {e}") from e


def compute_signature(timestamp: Union[int, str], paas_token: str, nonce: str,
                      uid: str = "", uinfo: str = "", ext: str = "") -> str:
    """
    Compute the upper-case hex SHA-256 signature for the given fields.

    Caller context (uid, uinfo, ext) only enters the canonical string when
    uid is non-empty.
    """
    ts = str(timestamp)
    if uid:
        message = f"{ts}{paas_token}{nonce}{uid},{uinfo},{ext}{ts}"
    else:
        message = f"{ts}{paas_token}{nonce}{ts}"
    return hashlib.sha256(message.encode('utf-8')).hexdigest().upper()


def sign_outbound(timestamp: Union[int, str], nonce: str, paas_token: str) -> str:
    """Sign an outbound request to the gateway."""
    return compute_signature(timestamp, paas_token, nonce)


def verify_inbound(headers: Mapping[str, str], paas_token: str,
                   time_offset_limit: int = DEFAULT_TIME_OFFSET_LIMIT,
                   now: Optional[int] = None) -> None:
    """
    Verify the tif signature headers of an inbound request.

    Args:
        headers: Request headers (looked up case-insensitively)
        paas_token: Shared secret token
        time_offset_limit: Allowed clock skew in seconds
        now: Current unix time, defaults to time.time()

    Raises:
        ConfigurationError: If paas_token is empty
        MalformedTimestampError: If the timestamp header is not an integer
        ClockSkewError: If the timestamp is outside the window
        SignatureInvalidError: If the signature does not match
    """
    if not paas_token:
        raise ConfigurationError("paas_token cannot be empty")

    headers = CaseInsensitiveDict(headers)
    uid = headers.get(HEADER_TIF_UID, "")
    uinfo = headers.get(HEADER_TIF_UINFO, "")
    ext = headers.get(HEADER_TIF_EXT, "")
    ts = headers.get(HEADER_TIF_TIMESTAMP, "")
    nonce = headers.get(HEADER_TIF_NONCE, "")
    signature = headers.get(HEADER_TIF_SIGNATURE, "")

    if not _TIMESTAMP_RE.fullmatch(ts):
        raise MalformedTimestampError(ts)
    t = int(ts)
    if not _INT64_MIN <= t <= _INT64_MAX:
        raise MalformedTimestampError(ts)

    if now is None:
        now = int(time.time())
    if t < now - time_offset_limit or t > now + time_offset_limit:
        raise ClockSkewError(ts, now, time_offset_limit)

    expected = compute_signature(ts, paas_token, nonce, uid, uinfo, ext)
    if not hmac.compare_digest(expected.encode('utf-8'), signature.encode('utf-8')):
        raise SignatureInvalidError(uid, uinfo, ext, ts, nonce, signature)
