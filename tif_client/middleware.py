"""
WSGI middleware guarding an application behind tif signature verification.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from .constants import (
    HEADER_TIF_UID,
    HEADER_TIF_UINFO,
    HEADER_TIF_EXT,
    DEFAULT_TIME_OFFSET_LIMIT
)
from .exceptions import AuthError, ConfigurationError, SignatureInvalidError
from .signing import verify_inbound

logger = logging.getLogger(__name__)

ENVIRON_KEY = "tif.auth"


@dataclass
class AuthState:
    """
    Verification outcome attached to `environ["tif.auth"]`.

    Attributes:
        verified: Whether the signature headers were accepted
        uid: Caller user id relayed by the gateway, if any
        uinfo: Caller user info relayed by the gateway, if any
        ext: Extension data relayed by the gateway, if any
        error: Rejection reason when not verified
    """
    verified: bool
    uid: str = ""
    uinfo: str = ""
    ext: str = ""
    error: Optional[str] = None


def _extract_headers(environ: Dict[str, Any]) -> Dict[str, str]:
    """Extract HTTP headers from WSGI environ."""
    headers: Dict[str, str] = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            # HTTP_X_TIF_NONCE -> x-tif-nonce
            headers[key[5:].replace("_", "-").lower()] = value
    return headers


class TifAuthWSGIMiddleware:
    """
    WSGI middleware rejecting requests without a valid gateway signature.

    Rejected requests get a 401 with an envelope body and never reach the
    wrapped app. Accepted requests see an AuthState under
    `environ["tif.auth"]`.

    Example (Flask):
        >>> app = Flask(__name__)
        >>> app.wsgi_app = TifAuthWSGIMiddleware(app.wsgi_app, "paas-token")
    """

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        paas_token: str,
        time_offset_limit: int = DEFAULT_TIME_OFFSET_LIMIT,
    ):
        if not paas_token:
            raise ConfigurationError("paas_token cannot be empty")
        self.app = app
        self.paas_token = paas_token
        self.time_offset_limit = time_offset_limit or DEFAULT_TIME_OFFSET_LIMIT

    def __call__(
        self,
        environ: Dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        headers = _extract_headers(environ)
        try:
            verify_inbound(headers, self.paas_token, self.time_offset_limit)
        except AuthError as e:
            if isinstance(e, SignatureInvalidError):
                logger.info("tif signature rejected %s", e.audit_fields())
            else:
                logger.info("tif request rejected: %s", e)
            environ[ENVIRON_KEY] = AuthState(verified=False, error=str(e))
            return self._error_response(start_response, str(e))

        environ[ENVIRON_KEY] = AuthState(
            verified=True,
            uid=headers.get(HEADER_TIF_UID.lower(), ""),
            uinfo=headers.get(HEADER_TIF_UINFO.lower(), ""),
            ext=headers.get(HEADER_TIF_EXT.lower(), ""),
        )
        return self.app(environ, start_response)

    def _error_response(
        self,
        start_response: Callable[..., Any],
        error: str,
    ) -> Iterable[bytes]:
        """Return 401 envelope response."""
        body = json.dumps({"errcode": 401, "errmsg": error, "data": None}).encode("utf-8")
        start_response(
            "401 Unauthorized",
            [
                ("Content-Type", "application/json"),
                ("Content-Length", str(len(body))),
            ],
        )
        return [body]
