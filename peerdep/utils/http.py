"""
Async HTTP access to the npm registry.

:class:`HTTPClient` wraps one ``httpx.AsyncClient`` for the duration of a
scan. Requests are bounded by a semaphore and attempted exactly once;
transport failures, timeouts and error statuses all surface as
:class:`~peerdep.exceptions.NetworkError` (a 404 as its
:class:`~peerdep.exceptions.RegistryError` subclass) for the caller to
absorb.
"""

from __future__ import annotations

import httpx
import asyncio
from typing import Any, Dict, Optional

from peerdep.utils.logger import get_logger
from peerdep.__version__ import __version__
from peerdep.exceptions import NetworkError, RegistryError
from peerdep.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


def _raise_for_status(response: httpx.Response, url: str) -> None:
    status = response.status_code
    if status == 404:
        raise RegistryError(f"Resource not found: {url}", url=url, status_code=404)
    if status >= 400:
        raise NetworkError(
            f"HTTP {status} error for {url}",
            url=url,
            status_code=status,
            response_body=response.text,
        )


class HTTPClient:
    """Shared async HTTP client with a concurrency limit.

    Args:
        timeout: Per-request timeout in seconds.
        verify_ssl: Whether to verify TLS certificates.
        user_agent: User-Agent header; defaults to ``peerdep-checker/<version>``.
        max_concurrency: Requests allowed in flight at once.

    Example:
        >>> async with HTTPClient(timeout=10) as client:
        ...     data = await client.get_json("https://registry.npmjs.org/swr/latest")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        self._session()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _session(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url`` once.

        Raises:
            RegistryError: The server answered 404.
            NetworkError: Timeout, transport failure or any other 4xx/5xx.
        """
        session = self._session()
        logger.debug("GET %s", url)

        try:
            async with self._semaphore:
                response = await session.get(url, **kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"Request timed out after {self.timeout}s: {url}", url=url
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(f"Request failed: {exc}", url=url) from exc

        _raise_for_status(response, url)
        return response

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """GET ``url`` and decode a JSON object from the body."""
        response = await self.get(url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )
        return data
