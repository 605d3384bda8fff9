"""
Client Library for the tif paas gateway

A Python client library that signs requests for the multi-host tif gateway
and verifies the signatures of requests the gateway relays to a service.

Example usage:
    from tif_client import TifClient

    client = TifClient(["http://gw1:8080", "http://gw2:8080"], "paas-id", "paas-token")
    profile = client.get("/api/profile")
"""

from .client import TifClient
from .request import Request, APIResult
from .signing import generate_nonce, compute_signature, sign_outbound, verify_inbound
from .middleware import TifAuthWSGIMiddleware, AuthState
from .exceptions import (
    TifClientError,
    ConfigurationError,
    RandomSourceError,
    RequestAlreadySentError,
    TransportError,
    HTTPStatusError,
    BodyReadError,
    JSONDecodeError,
    DomainError,
    AuthError,
    MalformedTimestampError,
    ClockSkewError,
    SignatureInvalidError
)
from .constants import (
    HEADER_TIF_PAASID,
    HEADER_TIF_TIMESTAMP,
    HEADER_TIF_NONCE,
    HEADER_TIF_SIGNATURE,
    HEADER_TIF_UID,
    HEADER_TIF_UINFO,
    HEADER_TIF_EXT,
    DEFAULT_CONFIG,
    DEFAULT_TIME_OFFSET_LIMIT
)

__version__ = "1.0.0"
__all__ = [
    "TifClient",
    "Request",
    "APIResult",
    "generate_nonce",
    "compute_signature",
    "sign_outbound",
    "verify_inbound",
    "TifAuthWSGIMiddleware",
    "AuthState",
    "TifClientError",
    "ConfigurationError",
    "RandomSourceError",
    "RequestAlreadySentError",
    "TransportError",
    "HTTPStatusError",
    "BodyReadError",
    "JSONDecodeError",
    "DomainError",
    "AuthError",
    "MalformedTimestampError",
    "ClockSkewError",
    "SignatureInvalidError",
    "HEADER_TIF_PAASID",
    "HEADER_TIF_TIMESTAMP",
    "HEADER_TIF_NONCE",
    "HEADER_TIF_SIGNATURE",
    "HEADER_TIF_UID",
    "HEADER_TIF_UINFO",
    "HEADER_TIF_EXT",
    "DEFAULT_CONFIG",
    "DEFAULT_TIME_OFFSET_LIMIT"
]
