"""Compatibility evaluator for peerdep.

Joins a manifest declaration with its registry snapshot and decides whether
the target version of the peer satisfies the range the dependency declares.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from peerdep.models import DependencyDeclaration, EvaluationRow, RegistrySnapshot
from peerdep.utils.logger import get_logger
from peerdep.utils.version_utils import version_satisfies

logger = get_logger("core.evaluator")

__all__ = ["CompatibilityEvaluator"]


class CompatibilityEvaluator:
    """Evaluate dependencies against one peer package.

    Args:
        peer: Peer package name, matched case-sensitively against the keys
            of each snapshot's ``peerDependencies``.
        target_version: Version of the peer to test. When omitted every
            matched dependency is reported as compatible.
    """

    def __init__(self, peer: str, target_version: Optional[str] = None) -> None:
        self.peer = peer
        self.target_version = target_version or None

    def is_compatible(self, peer_range: str) -> bool:
        if self.target_version is None:
            return True
        return version_satisfies(self.target_version, peer_range)

    def evaluate(
        self,
        declaration: DependencyDeclaration,
        snapshot: RegistrySnapshot,
    ) -> Optional[EvaluationRow]:
        """Return a row if ``snapshot`` declares the peer, else ``None``."""
        peer_range = snapshot.peer_range(self.peer)
        if peer_range is None:
            return None

        compatible = self.is_compatible(peer_range)
        logger.debug(
            "%s declares %s@%s -> %s",
            declaration.name,
            self.peer,
            peer_range,
            "compatible" if compatible else "incompatible",
        )
        return EvaluationRow.from_parts(declaration, snapshot, peer_range, compatible)

    def evaluate_all(
        self,
        pairs: Iterable[Tuple[DependencyDeclaration, Optional[RegistrySnapshot]]],
    ) -> List[EvaluationRow]:
        """Evaluate pairs in order, skipping failed lookups and non-matches."""
        rows: List[EvaluationRow] = []
        for declaration, snapshot in pairs:
            if snapshot is None:
                continue
            row = self.evaluate(declaration, snapshot)
            if row is not None:
                rows.append(row)
        return rows
