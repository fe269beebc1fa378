"""
HTTP transport for the DaData API.

Owns one reusable httpx.Client per instance, attaches the auth headers
and turns network failures into TransportError.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from . import __version__
from .errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = f"dadata-client-python/{__version__}"


@dataclass(frozen=True)
class Credentials:
    """API token plus optional secret. Immutable for the client's lifetime."""

    token: str
    secret: str | None = None

    def __post_init__(self):
        if not self.token:
            raise ValueError("DaData API token is required")

    def __repr__(self) -> str:
        return "Credentials(token='***', secret='***')"

    def headers(self) -> dict[str, str]:
        """Build the headers sent on every request."""
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Token {self.token}",
            "X-Secret": self.secret or "",
            "User-Agent": USER_AGENT,
        }


class Transport:
    """
    Sends requests and returns the raw status code and body.

    The underlying httpx.Client is created on first use and kept until
    close(). One call in flight at a time per instance.
    """

    def __init__(
        self,
        credentials: Credentials,
        connect_timeout: float = 5.0,
        read_timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the transport.

        Args:
            credentials: Token and secret for the auth headers
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
            transport: Optional httpx transport (used by tests to stub HTTP)
        """
        self.credentials = credentials
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get the shared HTTP client, creating it if needed."""
        if self._client is None:
            self._client = httpx.Client(
                headers=self.credentials.headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def send(
        self,
        url: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> tuple[int, bytes]:
        """
        Execute one request.

        A request without a body is sent as GET, otherwise the body is
        serialized to JSON and POSTed.

        Args:
            url: Absolute endpoint URL
            body: JSON-serializable payload, or None
            params: Optional query string parameters

        Returns:
            (status_code, raw response bytes)

        Raises:
            TransportError: on any network-level failure
        """
        method = "GET" if body is None else "POST"
        content = None
        if body is not None:
            content = json.dumps(body, ensure_ascii=False).encode("utf-8")

        logger.debug(f"{method} {url}")

        try:
            response = self._get_client().request(
                method, url, content=content, params=params
            )
        except httpx.RequestError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response.status_code, response.content

    def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
