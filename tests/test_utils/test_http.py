from __future__ import annotations

import httpx
import pytest
from typing import Callable, List

from peerdep.utils.http import HTTPClient
from peerdep.exceptions import NetworkError, RegistryError

URL = "https://registry.npmjs.org/swr/latest"

Handler = Callable[[httpx.Request], httpx.Response]


def _client_with(handler: Handler, **kwargs: object) -> HTTPClient:
    """Build an HTTPClient whose transport is served by ``handler``."""
    client = HTTPClient(**kwargs)  # type: ignore[arg-type]
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


@pytest.mark.unit
class TestHTTPClientInit:
    """Tests for HTTPClient initialization and configuration."""

    def test_default_values(self) -> None:
        client = HTTPClient()

        assert client.timeout == 30
        assert client.verify_ssl is True
        assert client.max_concurrency == 1
        assert client.user_agent.startswith("peerdep-checker/")
        assert client._client is None

    def test_custom_values(self) -> None:
        client = HTTPClient(
            timeout=5,
            verify_ssl=False,
            user_agent="CustomAgent/1.0",
            max_concurrency=4,
        )

        assert client.timeout == 5
        assert client.verify_ssl is False
        assert client.user_agent == "CustomAgent/1.0"
        assert client.max_concurrency == 4


@pytest.mark.unit
class TestHTTPClientLifecycle:
    @pytest.mark.asyncio
    async def test_context_manager_creates_and_closes_client(self) -> None:
        async with HTTPClient() as client:
            assert isinstance(client._client, httpx.AsyncClient)
            assert client._client.headers["Accept"] == "application/json"
            assert client._client.headers["User-Agent"] == client.user_agent

        assert client._client is None

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        client = HTTPClient()

        await client.close()
        await client.close()

        assert client._client is None


@pytest.mark.unit
class TestGetJson:
    """Tests for JSON fetching and error normalization."""

    @pytest.mark.asyncio
    async def test_returns_object(self) -> None:
        seen: List[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"name": "swr", "version": "2.2.5"})

        client = _client_with(handler)
        try:
            data = await client.get_json(URL)
        finally:
            await client.close()

        assert data == {"name": "swr", "version": "2.2.5"}
        assert seen == [URL]

    @pytest.mark.asyncio
    async def test_not_found_raises_registry_error(self) -> None:
        client = _client_with(lambda request: httpx.Response(404, text="Not Found"))
        try:
            with pytest.raises(RegistryError) as exc_info:
                await client.get_json(URL)
        finally:
            await client.close()

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == URL

    @pytest.mark.asyncio
    async def test_server_error_raises_network_error(self) -> None:
        client = _client_with(lambda request: httpx.Response(503, text="busy"))
        try:
            with pytest.raises(NetworkError) as exc_info:
                await client.get_json(URL)
        finally:
            await client.close()

        assert not isinstance(exc_info.value, RegistryError)
        assert exc_info.value.status_code == 503
        assert exc_info.value.details["response"] == "busy"

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self) -> None:
        calls: List[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(500)

        client = _client_with(handler)
        try:
            with pytest.raises(NetworkError):
                await client.get_json(URL)
        finally:
            await client.close()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client_with(handler, timeout=3)
        try:
            with pytest.raises(NetworkError, match="timed out after 3s"):
                await client.get_json(URL)
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_transport_error_raises_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_with(handler)
        try:
            with pytest.raises(NetworkError, match="Request failed"):
                await client.get_json(URL)
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_network_error(self) -> None:
        client = _client_with(lambda request: httpx.Response(200, text="<html>"))
        try:
            with pytest.raises(NetworkError, match="Invalid JSON"):
                await client.get_json(URL)
        finally:
            await client.close()

    @pytest.mark.asyncio
    async def test_non_object_json_raises_network_error(self) -> None:
        client = _client_with(lambda request: httpx.Response(200, json=["a", "b"]))
        try:
            with pytest.raises(NetworkError, match="Expected JSON object"):
                await client.get_json(URL)
        finally:
            await client.close()
