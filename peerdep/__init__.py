"""
peerdep: peer dependency compatibility checker for npm projects.

peerdep reads a project's ``package.json``, looks up the latest release of
every dependency on the npm registry, and reports which of them declare a
peer dependency on a given package and whether a target version of that
package satisfies the declared range.

Features include:
    • npm-compatible range matching (caret, tilde, x-ranges, unions)
    • Table, JSON and standalone HTML reports
    • Registry lookups over HTTP or through the ``npm`` CLI
"""

from __future__ import annotations

from peerdep.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "peerdep Contributors"
__license__ = "Apache-2.0"
__description__ = "Check which npm dependencies declare a peer on a package, and whether a version fits."

__all__ = [
    "__version__",
]
