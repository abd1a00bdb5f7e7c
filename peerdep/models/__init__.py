"""
Unified data model exports for peerdep.

Example:
    >>> from peerdep.models import DependencyDeclaration, EvaluationRow
"""

from __future__ import annotations

from peerdep.models.dependency import (
    DependencyDeclaration,
    DependencyKind,
    RegistrySnapshot,
)
from peerdep.models.row import EvaluationRow

__all__ = [
    "DependencyDeclaration",
    "DependencyKind",
    "RegistrySnapshot",
    "EvaluationRow",
]
