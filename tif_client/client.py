"""
Client library for the tif paas gateway.

This module provides the signed request client for the multi-host gateway
and the verification entry point used by services receiving gateway calls.
"""

import random
import time
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .constants import (
    HEADER_TIF_PAASID,
    HEADER_TIF_TIMESTAMP,
    HEADER_TIF_NONCE,
    HEADER_TIF_SIGNATURE,
    DEFAULT_CONFIG,
    DEFAULT_TIME_OFFSET_LIMIT
)
from .exceptions import ConfigurationError
from .request import Request
from .signing import generate_nonce, sign_outbound, verify_inbound


class TifClient:
    """
    Client for making signed requests to the tif gateway.

    Every request goes to one host picked at random from `hosts` and carries
    the X-Tif-Paasid, X-Tif-Timestamp, X-Tif-Nonce and X-Tif-Signature headers.
    The client owns its configuration and a pooled requests session; it is
    safe to share between threads once constructed.
    """

    def __init__(self, hosts: Sequence[str], paas_id: str, paas_token: str, **config):
        """
        Initialize tif client.

        Args:
            hosts: Base URLs of equivalent gateway hosts
            paas_id: Tenant/application identifier
            paas_token: Shared secret token (must match the gateway)
            **config: Configuration options (time_offset_limit, timeout,
                max_retries, retry_backoff, nonce_size)
        """
        self.hosts = [host.rstrip('/') for host in hosts]
        self.paas_id = paas_id
        self.paas_token = paas_token

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}
        if not self.config['time_offset_limit']:
            self.config['time_offset_limit'] = DEFAULT_TIME_OFFSET_LIMIT

        self._validate_config()

        # Create HTTP session, retrying only connection failures
        self.session = requests.Session()
        retry = Retry(
            total=self.config['max_retries'],
            connect=self.config['max_retries'],
            read=0,
            status=0,
            backoff_factor=self.config['retry_backoff'],
        )
        adapter = HTTPAdapter(max_retries=retry)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def _validate_config(self):
        """Validate client configuration."""
        if not self.hosts:
            raise ConfigurationError("hosts cannot be empty")

        if not self.paas_token:
            raise ConfigurationError("paas_token cannot be empty")

        if self.config['time_offset_limit'] < 0:
            raise ConfigurationError("time_offset_limit cannot be negative")

        # None disables the transport timeout, as in requests
        timeout = self.config['timeout']
        if timeout is not None and (
                not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0):
            raise ConfigurationError("timeout must be a positive number or None")

        if self.config['max_retries'] < 0:
            raise ConfigurationError("max_retries cannot be negative")

        if self.config['nonce_size'] <= 0:
            raise ConfigurationError("nonce_size must be positive")

    def select_host(self) -> str:
        """Pick one configured host uniformly at random."""
        if not self.hosts:
            raise ConfigurationError("no gateway hosts configured")
        return random.choice(self.hosts)

    def sign_headers(self, timestamp: Optional[int] = None,
                     nonce: Optional[str] = None) -> Dict[str, str]:
        """
        Build the gateway authentication headers.

        Args:
            timestamp: Unix seconds, defaults to now
            nonce: Hex nonce, defaults to a fresh one

        Returns:
            Dict with the four X-Tif-* headers

        Raises:
            RandomSourceError: If a nonce cannot be generated
        """
        ts = str(int(time.time()) if timestamp is None else timestamp)
        if nonce is None:
            nonce = generate_nonce(self.config['nonce_size'])

        return {
            HEADER_TIF_PAASID: self.paas_id,
            HEADER_TIF_TIMESTAMP: ts,
            HEADER_TIF_NONCE: nonce,
            HEADER_TIF_SIGNATURE: sign_outbound(ts, nonce, self.paas_token),
        }

    def auth_sign(self, headers: Mapping[str, str], now: Optional[int] = None) -> None:
        """
        Verify the signature headers of a request the gateway sent to us.

        Raises:
            MalformedTimestampError: If the timestamp header is not an integer
            ClockSkewError: If the timestamp is outside the window
            SignatureInvalidError: If the signature does not match
        """
        verify_inbound(headers, self.paas_token, self.config['time_offset_limit'], now=now)

    def new(self) -> Request:
        """Start a new GET request."""
        return Request(self)

    def get(self, path: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """Make signed GET request and return the envelope data."""
        return self._call('GET', path, headers=headers)

    def post(self, path: str, json=None, data: Optional[Union[str, bytes]] = None,
             headers: Optional[Dict[str, str]] = None) -> Any:
        """Make signed POST request and return the envelope data."""
        return self._call('POST', path, json, data, headers)

    def put(self, path: str, json=None, data: Optional[Union[str, bytes]] = None,
            headers: Optional[Dict[str, str]] = None) -> Any:
        """Make signed PUT request and return the envelope data."""
        return self._call('PUT', path, json, data, headers)

    def delete(self, path: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """Make signed DELETE request and return the envelope data."""
        return self._call('DELETE', path, headers=headers)

    def _call(self, method: str, path: str, json_data=None, data=None,
              headers: Optional[Dict[str, str]] = None) -> Any:
        request = self.new().set_method(method).send(json_data, data)
        for key, value in (headers or {}).items():
            request.set_header(key, value)
        return request.do_api(path)

    def close(self):
        """Close HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
