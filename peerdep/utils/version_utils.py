"""
Version comparison utilities for peerdep.

Thin wrappers around ``node-semver`` so that ranges are matched exactly as
npm matches them (caret, tilde, x-ranges, hyphen ranges, ``||`` unions).
"""

from __future__ import annotations

from typing import Optional

from nodesemver import satisfies, valid


def is_valid_version(version: Optional[str]) -> bool:
    """Return True if ``version`` is a strict SemVer 2.0 version string.

    Examples:
        >>> is_valid_version("18.2.0")
        True
        >>> is_valid_version("18.2")
        False
    """
    if not version:
        return False
    try:
        return valid(version, False) is not None
    except (TypeError, ValueError):
        return False


def version_satisfies(version: str, version_range: str) -> bool:
    """Check whether ``version`` falls inside the npm ``version_range``.

    Invalid versions and unparseable ranges never satisfy anything,
    mirroring ``semver.satisfies`` in npm.

    Examples:
        >>> version_satisfies("18.2.0", "^18.0.0")
        True
        >>> version_satisfies("17.0.2", "^16.8.0 || ^18.0.0")
        False
    """
    if not is_valid_version(version):
        return False
    try:
        return bool(satisfies(version, version_range, False))
    except (TypeError, ValueError):
        return False
