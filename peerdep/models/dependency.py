"""
Dependency data models for peerdep.

Defines what the manifest declares about a dependency and what the registry
reports for it. Both are created once per run and never mutated.
"""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from peerdep.constants import UNKNOWN_VERSION


class DependencyKind(str, Enum):
    """Manifest section a dependency was declared in."""

    DEPENDENCY = "dependency"
    DEV_DEPENDENCY = "devDependency"


@dataclass(frozen=True)
class DependencyDeclaration:
    """A dependency as declared in ``package.json``.

    Attributes:
        name: Package name exactly as written in the manifest.
        declared_range: Version range from the manifest, or ``"unknown"``
            when the entry is empty.
        kind: Section the name is attributed to.
    """

    name: str
    declared_range: str
    kind: DependencyKind


@dataclass(frozen=True)
class RegistrySnapshot:
    """Latest published metadata of one package.

    Attributes:
        name: Package name the lookup was made for.
        latest_version: Version of the ``latest`` dist-tag.
        peer_dependencies: Declared peer name -> range mapping.
    """

    name: str
    latest_version: str = UNKNOWN_VERSION
    peer_dependencies: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_registry_data(cls, name: str, data: Any) -> "RegistrySnapshot":
        """Build a snapshot from a decoded registry or ``npm info`` payload.

        ``npm info <pkg> version peerDependencies --json`` prints a bare
        version string when the package declares no peers, so non-object
        payloads are accepted: a string becomes the version and anything
        else yields an empty snapshot.

        Args:
            name: Package name the payload belongs to.
            data: Decoded JSON payload.

        Returns:
            A new :class:`RegistrySnapshot`.
        """
        if isinstance(data, str):
            return cls(name=name, latest_version=data or UNKNOWN_VERSION)

        if not isinstance(data, Mapping):
            return cls(name=name)

        version = data.get("version")
        peers = data.get("peerDependencies")

        peer_dependencies: Dict[str, str] = {}
        if isinstance(peers, Mapping):
            peer_dependencies = {
                str(peer): str(spec) for peer, spec in peers.items() if spec is not None
            }

        return cls(
            name=name,
            latest_version=str(version) if version else UNKNOWN_VERSION,
            peer_dependencies=peer_dependencies,
        )

    def peer_range(self, peer: str) -> Optional[str]:
        """Return the declared range for ``peer``, matched case-sensitively."""
        return self.peer_dependencies.get(peer)
