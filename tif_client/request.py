"""
Single-use signed request against the tif gateway.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union, TYPE_CHECKING

import requests

from .constants import ERROR_BODY_SNAPSHOT_SIZE
from .exceptions import (
    RequestAlreadySentError,
    TransportError,
    HTTPStatusError,
    BodyReadError,
    JSONDecodeError,
    DomainError
)

if TYPE_CHECKING:
    from .client import TifClient

logger = logging.getLogger(__name__)


@dataclass
class APIResult:
    """
    Uniform response envelope returned by gateway APIs.

    Attributes:
        errcode: 0 on success, anything else is a domain error
        errmsg: Human readable error message
        data: Payload
    """
    errcode: int = 0
    errmsg: str = ""
    data: Any = None

    @classmethod
    def from_json(cls, payload: Any) -> "APIResult":
        """Build an envelope from a decoded JSON body."""
        if not isinstance(payload, dict):
            raise JSONDecodeError(
                f"json parse fail envelope must be an object, got {type(payload).__name__}"
            )
        errcode = payload.get('errcode', 0)
        # bool is an int subclass but not a valid errcode
        if not isinstance(errcode, int) or isinstance(errcode, bool):
            raise JSONDecodeError(f"json parse fail errcode must be an integer, got {errcode!r}")
        errmsg = payload.get('errmsg') or ""
        return cls(errcode=errcode, errmsg=str(errmsg), data=payload.get('data'))


class Request:
    """
    A request being built for, and then sent to, the gateway.

    Created through TifClient.new(). Builder methods return the request so
    calls can be chained:

        data = client.new().set_method("POST").send({"id": 1}).do_api("/v1/items")

    A request is sent at most once.
    """

    def __init__(self, client: "TifClient"):
        self.client = client
        self.method = 'GET'
        self.headers: Dict[str, str] = {}
        self.request_body = b''
        self._json_body = False
        self._response: Optional[requests.Response] = None
        self._body: Optional[bytes] = None
        self._sent = False

    @property
    def response(self) -> Optional[requests.Response]:
        """The HTTP response, once sent."""
        return self._response

    @property
    def body(self) -> Optional[bytes]:
        """The raw response body, once read."""
        return self._body

    def set_method(self, method: str) -> "Request":
        self.method = method.upper()
        return self

    def set_header(self, key: str, value: str) -> "Request":
        self.headers[key] = value
        return self

    def send(self, json_data: Any = None, data: Optional[Union[str, bytes]] = None) -> "Request":
        """
        Set the request body, replacing any previous one.

        Args:
            json_data: Value serialized as compact JSON
            data: Raw body, used as-is when json_data is None
        """
        if json_data is not None:
            self.request_body = json.dumps(json_data, separators=(',', ':')).encode('utf-8')
            self._json_body = True
            return self
        self._json_body = False
        if isinstance(data, str):
            self.request_body = data.encode('utf-8')
        elif isinstance(data, bytes):
            self.request_body = data
        else:
            self.request_body = b''
        return self

    def do(self, path: str) -> Any:
        """
        Sign and send the request, returning the decoded JSON body.

        Args:
            path: URL path appended to the selected host

        Returns:
            Decoded JSON payload

        Raises:
            RequestAlreadySentError: If the request was already sent
            TransportError: If the HTTP call fails
            HTTPStatusError: If the status code is not 200
            BodyReadError: If the body cannot be read completely
            JSONDecodeError: If the body is not valid JSON
        """
        if self._sent:
            raise RequestAlreadySentError("request has already been sent")
        self._sent = True

        url = self.client.select_host() + path

        # Auth headers first, caller headers applied on top
        headers = self.client.sign_headers()
        if self._json_body:
            headers['Content-Type'] = 'application/json'
        headers.update(self.headers)

        logger.debug("tif request %s %s", self.method, url)
        try:
            self._response = self.client.session.request(
                self.method,
                url,
                data=self.request_body or None,
                headers=headers,
                timeout=self.client.config['timeout'],
                stream=True
            )
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}") from e

        try:
            if self._response.status_code != 200:
                raise HTTPStatusError(self._response.status_code, self._body_snapshot())
            self._body = self._read_body()
        finally:
            self._response.close()

        logger.debug("tif response %s %s status=%d bytes=%d",
                     self.method, url, self._response.status_code, len(self._body))

        try:
            return json.loads(self._body)
        except ValueError as e:
            raise JSONDecodeError(f"json parse fail {e}") from e

    def do_api(self, path: str) -> Any:
        """
        Send the request and unwrap the {errcode, errmsg, data} envelope.

        Returns:
            The envelope's data

        Raises:
            DomainError: If errcode is non-zero
            (plus everything do() raises)
        """
        result = APIResult.from_json(self.do(path))
        if result.errcode != 0:
            raise DomainError(result.errcode, result.errmsg)
        return result.data

    def _read_body(self) -> bytes:
        try:
            return self._response.content
        except requests.RequestException as e:
            raise BodyReadError(f"reading response body failed: {e}") from e

    def _body_snapshot(self) -> bytes:
        """Best-effort prefix of an error response body."""
        try:
            self._body = self._response.content
        except requests.RequestException:
            return b''
        return self._body[:ERROR_BODY_SNAPSHOT_SIZE]
