"""
Evaluation row model for peerdep.

One :class:`EvaluationRow` is produced for every dependency whose latest
release declares a peer constraint on the target package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from peerdep.models.dependency import (
    DependencyDeclaration,
    RegistrySnapshot,
)


@dataclass(frozen=True)
class EvaluationRow:
    """Result of checking one dependency against the target peer.

    Attributes:
        package: Dependency name.
        type: ``"dependency"`` or ``"devDependency"``.
        current: Range declared in the manifest.
        latest: Latest published version.
        peer_range: Range the latest release declares for the peer.
        compatible: Whether the target version satisfies ``peer_range``.
    """

    package: str
    type: str
    current: str
    latest: str
    peer_range: str
    compatible: bool

    @classmethod
    def from_parts(
        cls,
        declaration: DependencyDeclaration,
        snapshot: RegistrySnapshot,
        peer_range: str,
        compatible: bool,
    ) -> "EvaluationRow":
        return cls(
            package=declaration.name,
            type=declaration.kind.value,
            current=declaration.declared_range,
            latest=snapshot.latest_version,
            peer_range=peer_range,
            compatible=compatible,
        )

    def to_json(self) -> Dict[str, Any]:
        """Return the JSON-safe representation used by ``--json``.

        Example::

            {
              "package": "react-dom",
              "type": "dependency",
              "current": "^18.2.0",
              "latest": "18.3.1",
              "peerRange": "^18.3.1",
              "compatible": true
            }
        """
        return {
            "package": self.package,
            "type": self.type,
            "current": self.current,
            "latest": self.latest,
            "peerRange": self.peer_range,
            "compatible": self.compatible,
        }
