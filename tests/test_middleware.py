"""Tests for the WSGI signature guard."""

import io
import json
import time

import pytest

from tif_client import (
    TifClient,
    TifAuthWSGIMiddleware,
    AuthState,
    ConfigurationError,
    compute_signature
)

TOKEN = "guard-token"


def wsgi_app(environ, start_response):
    state = environ["tif.auth"]
    body = json.dumps({"verified": state.verified, "uid": state.uid}).encode("utf-8")
    start_response("200 OK", [("Content-Type", "application/json")])
    return [body]


def make_environ(headers):
    """Build a minimal WSGI environ carrying the given headers."""
    environ = {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": "/test",
        "wsgi.input": io.BytesIO(b""),
        "wsgi.url_scheme": "http",
    }
    for key, value in headers.items():
        environ["HTTP_" + key.upper().replace("-", "_")] = value
    return environ


def call(app, environ):
    """Run a WSGI app and collect status, headers and body."""
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


class TestTifAuthWSGIMiddleware:
    """Tests for TifAuthWSGIMiddleware."""

    @pytest.fixture
    def app(self):
        return TifAuthWSGIMiddleware(wsgi_app, TOKEN)

    def test_signed_request_passes(self, app):
        """Test that a correctly signed request reaches the app."""
        client = TifClient(["http://unused"], "paas-test", TOKEN)
        environ = make_environ(client.sign_headers())

        status, _, body = call(app, environ)

        assert status == "200 OK"
        assert json.loads(body) == {"verified": True, "uid": ""}
        assert environ["tif.auth"] == AuthState(verified=True)

    def test_uid_context_exposed(self, app):
        """Test that caller context is exposed on the auth state."""
        ts = str(int(time.time()))
        environ = make_environ({
            "X-Tif-Uid": "u-9",
            "X-Tif-Uinfo": "carol",
            "X-Tif-Ext": "mobile",
            "X-Tif-Timestamp": ts,
            "X-Tif-Nonce": "0a0b",
            "X-Tif-Signature": compute_signature(ts, TOKEN, "0a0b", "u-9", "carol", "mobile"),
        })

        status, _, body = call(app, environ)

        assert status == "200 OK"
        assert json.loads(body)["uid"] == "u-9"
        assert environ["tif.auth"].uinfo == "carol"
        assert environ["tif.auth"].ext == "mobile"

    def test_unsigned_request_rejected(self, app):
        """Test that a request without tif headers gets a 401."""
        environ = make_environ({})

        status, headers, body = call(app, environ)

        assert status == "401 Unauthorized"
        assert headers["Content-Type"] == "application/json"
        envelope = json.loads(body)
        assert envelope["errcode"] == 401
        assert envelope["data"] is None
        assert "timestamp" in envelope["errmsg"]
        assert environ["tif.auth"].verified is False

    def test_wrong_token_rejected(self, app):
        """Test that a request signed with another token gets a 401."""
        client = TifClient(["http://unused"], "paas-test", "other-token")
        environ = make_environ(client.sign_headers())

        status, _, body = call(app, environ)

        assert status == "401 Unauthorized"
        assert json.loads(body)["errmsg"].startswith("signature invalid")

    def test_stale_request_rejected(self, app):
        """Test that a request outside the window gets a 401."""
        client = TifClient(["http://unused"], "paas-test", TOKEN)
        environ = make_environ(client.sign_headers(timestamp=int(time.time()) - 3600))

        status, _, body = call(app, environ)

        assert status == "401 Unauthorized"
        assert json.loads(body)["errmsg"].startswith("Header time offset exceeded limit")

    def test_empty_token(self):
        """Test middleware construction without a token."""
        with pytest.raises(ConfigurationError):
            TifAuthWSGIMiddleware(wsgi_app, "")

    def test_oversized_timestamp_rejected(self, app):
        """Test that a huge timestamp header is answered with 401."""
        environ = make_environ({
            "X-Tif-Timestamp": "1" * 5000,
            "X-Tif-Nonce": "0a0b",
            "X-Tif-Signature": "00" * 32,
        })

        status, _, body = call(app, environ)

        assert status == "401 Unauthorized"
        assert json.loads(body)["errmsg"].startswith("Header timestamp is not an integer")
        assert environ["tif.auth"].verified is False
