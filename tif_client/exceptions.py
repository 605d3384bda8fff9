"""
Custom exceptions for the tif gateway client library.
"""


class TifClientError(Exception):
    """Base exception for tif client errors."""
    pass


class ConfigurationError(TifClientError):
    """Raised when client configuration is invalid."""
    pass


class RandomSourceError(TifClientError):
    """Raised when the secure random source cannot supply a nonce."""
    pass


class RequestAlreadySentError(TifClientError):
    """Raised when a request object is executed a second time."""
    pass


class TransportError(TifClientError):
    """Raised when the HTTP call cannot be completed."""
    pass


class HTTPStatusError(TifClientError):
    """Raised when the gateway answers with a status other than 200."""

    def __init__(self, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"http status={status_code} content={body.decode('utf-8', errors='replace')}"
        )


class BodyReadError(TifClientError):
    """Raised when the response body cannot be read completely."""
    pass


class JSONDecodeError(TifClientError):
    """Raised when the response body is not the expected JSON."""
    pass


class DomainError(TifClientError):
    """Raised when the response envelope carries a non-zero errcode."""

    def __init__(self, errcode: int, errmsg: str):
        self.errcode = errcode
        self.errmsg = errmsg
        super().__init__(f"errcode={errcode} errmsg={errmsg}")


class AuthError(TifClientError):
    """Base exception for inbound signature verification failures."""
    pass


class MalformedTimestampError(AuthError):
    """Raised when the inbound timestamp header is not a decimal integer."""

    def __init__(self, timestamp: str):
        self.timestamp = timestamp
        super().__init__(f"Header timestamp is not an integer, timestamp={timestamp[:64]!r}")


class ClockSkewError(AuthError):
    """Raised when the inbound timestamp is outside the allowed window."""

    def __init__(self, timestamp: str, now: int, limit: int):
        self.timestamp = timestamp
        self.now = now
        self.limit = limit
        super().__init__(
            f"Header time offset exceeded limit, timestamp={timestamp} now={now}"
        )


class SignatureInvalidError(AuthError):
    """Raised when the recomputed signature does not match the supplied one."""

    def __init__(self, uid: str, uinfo: str, ext: str, timestamp: str,
                 nonce: str, signature: str):
        self.uid = uid
        self.uinfo = uinfo
        self.ext = ext
        self.timestamp = timestamp
        self.nonce = nonce
        self.signature = signature
        super().__init__(
            f"signature invalid, uid={uid} uinfo={uinfo} ext={ext} "
            f"timestamp={timestamp} nonce={nonce} signature={signature}"
        )

    def audit_fields(self) -> dict:
        """Return the offending header values for audit logging."""
        return {
            'uid': self.uid,
            'uinfo': self.uinfo,
            'ext': self.ext,
            'timestamp': self.timestamp,
            'nonce': self.nonce,
            'signature': self.signature,
        }
