from __future__ import annotations

import json
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, Generator, List, Optional

import pytest

from peerdep.core.registry import RegistryLookup
from peerdep.exceptions import RegistryError
from peerdep.models import RegistrySnapshot
from peerdep.utils.console import reconfigure_console
from peerdep.utils.logger import disable_logging


class FakeLookup(RegistryLookup):
    """Registry lookup answering from a dict.

    A missing name or an exception value makes the lookup fail.
    """

    def __init__(self, responses: Dict[str, Any]) -> None:
        self.responses = responses
        self.calls: List[str] = []

    async def fetch(self, name: str) -> RegistrySnapshot:
        self.calls.append(name)
        value = self.responses.get(name)
        if value is None:
            raise RegistryError("Resource not found", package_name=name)
        if isinstance(value, Exception):
            raise value
        return RegistrySnapshot.from_registry_data(name, value)


@pytest.fixture(autouse=True)
def reset_output_state() -> Generator[None, None, None]:
    """Keep logging handlers and console singletons from leaking between tests."""
    reconfigure_console()
    yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a package.json into ``tmp_path``."""

    def _write(
        dependencies: Optional[Dict[str, str]] = None,
        dev_dependencies: Optional[Dict[str, str]] = None,
        **extra: Any,
    ) -> Path:
        manifest: Dict[str, Any] = {"name": "demo-app", "version": "1.0.0", **extra}
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev_dependencies is not None:
            manifest["devDependencies"] = dev_dependencies
        path = tmp_path / "package.json"
        path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_registry(monkeypatch: pytest.MonkeyPatch) -> Callable[[Dict[str, Any]], FakeLookup]:
    """Route the check command's registry lookups to a :class:`FakeLookup`."""

    def _install(responses: Dict[str, Any]) -> FakeLookup:
        lookup = FakeLookup(responses)

        @asynccontextmanager
        async def _open_lookup(
            backend: str, *, timeout: int, concurrency: int
        ) -> AsyncIterator[RegistryLookup]:
            yield lookup

        monkeypatch.setattr("peerdep.commands.check.open_lookup", _open_lookup)
        return lookup

    return _install
