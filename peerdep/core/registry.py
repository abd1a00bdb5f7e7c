"""Registry prober for peerdep.

Looks up the latest published metadata of every dependency and reduces it to
a :class:`~peerdep.models.RegistrySnapshot` (latest version plus declared
peer dependencies).

Two lookup backends are available:

- :class:`HttpRegistryLookup` queries the npm registry's abbreviated
  ``/<name>/latest`` document over HTTP.
- :class:`NpmCliLookup` runs ``npm info <name> version peerDependencies
  --json`` and parses its output.

Lookups fail open. :class:`RegistryProber` turns any
:class:`~peerdep.exceptions.PeerDepError` raised for one package into a
``None`` slot, so a single unreachable or malformed package never aborts
the scan. Nothing is cached and nothing is retried.

Typical usage::

    async with open_lookup("http", timeout=30, concurrency=1) as lookup:
        prober = RegistryProber(lookup)
        snapshots = await prober.probe(["react-dom", "swr"])
"""

from __future__ import annotations

import json
import shutil
import asyncio
from abc import ABC, abstractmethod
from urllib.parse import quote
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, List, Optional, Sequence

from peerdep.exceptions import NetworkError, PeerDepError, RegistryError
from peerdep.models import RegistrySnapshot
from peerdep.utils.http import HTTPClient
from peerdep.utils.logger import get_logger
from peerdep.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
    NPM_INFO_COMMAND,
    NPM_INFO_FIELDS,
    NPM_REGISTRY_LATEST_URL,
)

logger = get_logger("core.registry")

__all__ = [
    "RegistryLookup",
    "HttpRegistryLookup",
    "NpmCliLookup",
    "RegistryProber",
    "open_lookup",
]

ProgressCallback = Callable[[int, int], None]


class RegistryLookup(ABC):
    """Base class for one-package metadata lookups."""

    @abstractmethod
    async def fetch(self, name: str) -> RegistrySnapshot:
        """Return the latest metadata of ``name``.

        Raises:
            RegistryError: The lookup failed for any reason.
        """
        raise NotImplementedError


class HttpRegistryLookup(RegistryLookup):
    """Fetch ``https://registry.npmjs.org/<name>/latest`` with :class:`HTTPClient`.

    Args:
        http: Open HTTP client; its lifetime is managed by the caller.
    """

    def __init__(self, http: HTTPClient) -> None:
        self.http = http

    @staticmethod
    def url_for(name: str) -> str:
        # Scoped names keep their "@scope/" prefix unescaped
        return NPM_REGISTRY_LATEST_URL.format(package=quote(name, safe="@/"))

    async def fetch(self, name: str) -> RegistrySnapshot:
        url = self.url_for(name)
        try:
            data = await self.http.get_json(url)
        except NetworkError as exc:
            raise RegistryError(
                exc.message,
                package_name=name,
                url=exc.url,
                status_code=exc.status_code,
            ) from exc

        return RegistrySnapshot.from_registry_data(name, data)


class NpmCliLookup(RegistryLookup):
    """Run ``npm info`` in a subprocess for each package.

    Args:
        timeout: Seconds to wait for one ``npm info`` call before killing it.
        executable: npm executable; resolved from ``PATH`` by default.
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        executable: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.executable = (
            executable or shutil.which(NPM_INFO_COMMAND[0]) or NPM_INFO_COMMAND[0]
        )

    def command_for(self, name: str) -> List[str]:
        return [self.executable, *NPM_INFO_COMMAND[1:], name, *NPM_INFO_FIELDS]

    async def fetch(self, name: str) -> RegistrySnapshot:
        command = self.command_for(name)
        logger.debug("Running: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise RegistryError(
                f"Cannot run {self.executable}: {exc}",
                package_name=name,
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            raise RegistryError(
                f"npm info timed out after {self.timeout}s",
                package_name=name,
            ) from exc

        if process.returncode != 0:
            raise RegistryError(
                f"npm info exited with status {process.returncode}",
                package_name=name,
                response_body=stderr.decode("utf-8", errors="replace"),
            )

        return self.parse_output(name, stdout.decode("utf-8", errors="replace"))

    @staticmethod
    def parse_output(name: str, output: str) -> RegistrySnapshot:
        """Decode ``npm info --json`` output; empty output means no data."""
        text = output.strip()
        if not text:
            return RegistrySnapshot(name=name)

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RegistryError(
                f"Malformed npm info output: {exc.msg}",
                package_name=name,
                response_body=text,
            ) from exc

        return RegistrySnapshot.from_registry_data(name, data)


@asynccontextmanager
async def open_lookup(
    backend: str,
    *,
    timeout: int = DEFAULT_TIMEOUT,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> AsyncIterator[RegistryLookup]:
    """Create the lookup named by ``backend`` and release it afterwards.

    Args:
        backend: ``"http"`` or ``"npm"``.
        timeout: Per-lookup timeout in seconds.
        concurrency: Requests the HTTP client may have in flight.
    """
    if backend == "npm":
        yield NpmCliLookup(timeout=timeout)
        return

    async with HTTPClient(timeout=timeout, max_concurrency=concurrency) as http:
        yield HttpRegistryLookup(http)


class RegistryProber:
    """Run one lookup per package name and collect the snapshots in order.

    Args:
        lookup: Backend performing the individual lookups.
        concurrency: Lookups in flight at once. With ``1`` (the default)
            packages are looked up strictly one after another.
        progress_callback: Called as ``(completed, total)`` after every
            lookup finishes, successful or not.
    """

    def __init__(
        self,
        lookup: RegistryLookup,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.lookup = lookup
        self.concurrency = concurrency
        self.progress_callback = progress_callback

    async def probe(self, names: Sequence[str]) -> List[Optional[RegistrySnapshot]]:
        """Look up every name.

        Returns:
            One entry per input name, in input order. Failed lookups yield
            ``None``.
        """
        total = len(names)
        results: List[Optional[RegistrySnapshot]] = [None] * total
        completed = 0

        async def _probe_slot(index: int, name: str) -> None:
            nonlocal completed
            results[index] = await self._fetch_quietly(name)
            completed += 1
            if self.progress_callback:
                self.progress_callback(completed, total)

        if self.concurrency == 1:
            for index, name in enumerate(names):
                await _probe_slot(index, name)
            return results

        semaphore = asyncio.Semaphore(self.concurrency)

        async def _bounded(index: int, name: str) -> None:
            async with semaphore:
                await _probe_slot(index, name)

        await asyncio.gather(*(_bounded(i, name) for i, name in enumerate(names)))
        return results

    async def _fetch_quietly(self, name: str) -> Optional[RegistrySnapshot]:
        try:
            return await self.lookup.fetch(name)
        except PeerDepError as exc:
            logger.debug("Skipping %s: %s", name, exc)
            return None
