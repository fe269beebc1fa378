"""Unit tests for the HTTP transport."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from dadata_client import __version__
from dadata_client.errors import TransportError
from dadata_client.transport import Credentials, Transport


def make_transport(handler, secret="test-secret"):
    return Transport(
        Credentials("test-token", secret),
        transport=httpx.MockTransport(handler),
    )


class TestCredentials:
    """Tests for Credentials."""

    def test_headers(self):
        """Auth and content headers are built from credentials."""
        headers = Credentials("abc", "xyz").headers()
        assert headers["Authorization"] == "Token abc"
        assert headers["X-Secret"] == "xyz"
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"
        assert headers["User-Agent"] == f"dadata-client-python/{__version__}"

    def test_missing_secret_sends_empty_header(self):
        """A missing secret is sent as an empty header."""
        assert Credentials("abc").headers()["X-Secret"] == ""

    def test_empty_token_rejected(self):
        """An empty token is rejected."""
        with pytest.raises(ValueError, match="token is required"):
            Credentials("")

    def test_immutable(self):
        """Credentials cannot be changed after creation."""
        credentials = Credentials("abc", "xyz")
        with pytest.raises(AttributeError):
            credentials.token = "other"

    def test_repr_hides_values(self):
        """repr does not leak the token."""
        assert "abc" not in repr(Credentials("abc", "xyz"))


class TestTransport:
    """Tests for Transport.send()."""

    def test_post_with_body(self):
        """A body is POSTed as UTF-8 JSON with auth headers."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[{"result": "ok"}])

        with make_transport(handler) as transport:
            status, raw = transport.send("https://api.example.org/clean/name", ["иван"])

        assert status == 200
        assert json.loads(raw) == [{"result": "ok"}]
        request = seen[0]
        assert request.method == "POST"
        assert json.loads(request.content) == ["иван"]
        assert "иван".encode("utf-8") in request.content
        assert request.headers["Authorization"] == "Token test-token"
        assert request.headers["X-Secret"] == "test-secret"
        assert request.headers["Content-Type"] == "application/json"

    def test_get_without_body(self):
        """A call without body is a GET with empty content."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"balance": 10})

        with make_transport(handler) as transport:
            transport.send("https://api.example.org/profile/balance")

        assert seen[0].method == "GET"
        assert seen[0].content == b""

    def test_query_params(self):
        """Query parameters are appended to the URL."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        with make_transport(handler) as transport:
            transport.send("https://api.example.org/detectAddressByIp", params={"ip": "1.2.3.4"})

        assert seen[0].url.params["ip"] == "1.2.3.4"

    def test_error_status_is_returned_not_raised(self):
        """Error statuses are returned for the decoder to handle."""
        with make_transport(lambda request: httpx.Response(403, json={"detail": "x"})) as transport:
            status, raw = transport.send("https://api.example.org/x", {})

        assert status == 403
        assert json.loads(raw) == {"detail": "x"}

    def test_connect_error_raises_transport_error(self):
        """Connection failures become TransportError."""
        def handler(request):
            raise httpx.ConnectError("Name or service not known", request=request)

        with make_transport(handler) as transport:
            with pytest.raises(TransportError, match="ConnectError") as exc_info:
                transport.send("https://api.example.org/x", {})

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_raises_transport_error(self):
        """Timeouts become TransportError."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with make_transport(handler) as transport:
            with pytest.raises(TransportError, match="timed out"):
                transport.send("https://api.example.org/x", {})

    def test_default_timeouts(self):
        """Connect and read timeouts default to 5 seconds."""
        transport = Transport(Credentials("t"))
        assert transport.timeout.connect == 5.0
        assert transport.timeout.read == 5.0


class TestConnectionLifecycle:
    """Tests for lazy creation, reuse and release of the HTTP client."""

    @pytest.fixture
    def mock_client_cls(self):
        response = MagicMock()
        response.status_code = 200
        response.content = b"{}"

        with patch("httpx.Client") as mock_cls:
            mock_cls.return_value.request.return_value = response
            yield mock_cls

    def test_client_created_lazily(self, mock_client_cls):
        """The HTTP client is created on first send."""
        transport = Transport(Credentials("t", "s"))
        assert mock_client_cls.call_count == 0

        transport.send("https://api.example.org/x", {})

        assert mock_client_cls.call_count == 1
        kwargs = mock_client_cls.call_args.kwargs
        assert kwargs["headers"]["Authorization"] == "Token t"

    def test_client_reused(self, mock_client_cls):
        """One HTTP client serves every request."""
        transport = Transport(Credentials("t"))
        transport.send("https://api.example.org/x", {})
        transport.send("https://api.example.org/y", {})

        assert mock_client_cls.call_count == 1
        assert mock_client_cls.return_value.request.call_count == 2

    def test_close_releases_client(self, mock_client_cls):
        """close() closes and drops the HTTP client."""
        transport = Transport(Credentials("t"))
        transport.send("https://api.example.org/x", {})
        transport.close()

        mock_client_cls.return_value.close.assert_called_once()
        assert transport._client is None

    def test_close_before_use_is_noop(self, mock_client_cls):
        """Closing an unused transport does nothing."""
        transport = Transport(Credentials("t"))
        transport.close()
        transport.close()
        assert mock_client_cls.call_count == 0

    def test_context_manager_closes_on_error(self, mock_client_cls):
        """The with-block closes the client even on error."""
        mock_client_cls.return_value.request.side_effect = httpx.ConnectError("boom")

        with pytest.raises(TransportError):
            with Transport(Credentials("t")) as transport:
                transport.send("https://api.example.org/x", {})

        mock_client_cls.return_value.close.assert_called_once()

    def test_reopens_after_close(self, mock_client_cls):
        """A closed transport creates a new client on next use."""
        transport = Transport(Credentials("t"))
        transport.send("https://api.example.org/x", {})
        transport.close()
        transport.send("https://api.example.org/x", {})

        assert mock_client_cls.call_count == 2
