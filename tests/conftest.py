"""Shared pytest fixtures for dadata-client tests."""

import httpx
import pytest

from dadata_client import ClientConfig, DaDataClient

CLEAN_URL = "https://clean.example.org/api/v2"
SUGGESTIONS_URL = "https://suggest.example.org/rs"


@pytest.fixture(autouse=True)
def no_env_credentials(monkeypatch):
    """Keep real credentials in the environment from leaking into tests."""
    monkeypatch.delenv("DADATA_TOKEN", raising=False)
    monkeypatch.delenv("DADATA_SECRET", raising=False)


@pytest.fixture
def config():
    return ClientConfig(clean_url=CLEAN_URL, suggestions_url=SUGGESTIONS_URL)


@pytest.fixture
def stub_api(config):
    """Build a client whose HTTP calls are answered by a stub.

    Usage:
        client, calls = stub_api({"suggestions": []})
        client, calls = stub_api(b"not json", status_code=500)
        client, calls = stub_api(lambda request: httpx.Response(200, json=[]))

    `calls` collects every httpx.Request the client sent.
    """
    clients = []

    def _make(answer, status_code: int = 200):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if callable(answer):
                return answer(request)
            if isinstance(answer, bytes):
                return httpx.Response(status_code, content=answer)
            return httpx.Response(status_code, json=answer)

        client = DaDataClient(
            "test-token",
            "test-secret",
            config=config,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client, calls

    yield _make

    for client in clients:
        client.close()
