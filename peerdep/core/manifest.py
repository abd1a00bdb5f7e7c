"""Manifest reader for peerdep.

Loads a ``package.json`` and flattens its ``dependencies`` and
``devDependencies`` sections into one ordered list of
:class:`~peerdep.models.DependencyDeclaration`.

The merge behaves like ``{...dependencies, ...devDependencies}``:

- names from ``dependencies`` come first, in file order, followed by names
  that only appear in ``devDependencies``;
- when a name is in both sections its declared range comes from
  ``devDependencies`` but it is still reported as a ``dependency``.

The manifest schema is not validated. Sections that are missing or are not
JSON objects count as empty; only an unreadable file or invalid JSON is an
error.

Typical usage::

    reader = ManifestReader()
    declarations = reader.parse_file(Path("package.json"))
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from peerdep.exceptions import FileOperationError, ManifestError
from peerdep.models import DependencyDeclaration, DependencyKind
from peerdep.utils.filesystem import safe_read_file
from peerdep.utils.logger import get_logger
from peerdep.constants import (
    DEPENDENCIES_KEY,
    DEV_DEPENDENCIES_KEY,
    UNKNOWN_VERSION,
)

logger = get_logger("core.manifest")

__all__ = ["ManifestReader"]


def _section(manifest: Any, key: str) -> Dict[str, Any]:
    """Return a dependency section as a dict, or ``{}`` if absent/non-object."""
    if not isinstance(manifest, Mapping):
        return {}
    section = manifest.get(key)
    if not isinstance(section, Mapping):
        if section is not None:
            logger.debug("Ignoring non-object %r section", key)
        return {}
    return dict(section)


class ManifestReader:
    """Read dependency declarations from a ``package.json`` manifest."""

    def parse_file(self, file_path: Union[str, Path]) -> List[DependencyDeclaration]:
        """Read and parse a manifest file.

        Args:
            file_path: Path to ``package.json``.

        Returns:
            Declarations in merge order.

        Raises:
            ManifestError: The file is missing, unreadable, or not valid JSON.
        """
        path = Path(file_path)
        try:
            content = safe_read_file(path)
        except FileOperationError as exc:
            raise ManifestError(
                f"Cannot read manifest: {exc.message}",
                file_path=str(path),
            ) from exc

        return self.parse_string(content, source_file=str(path))

    def parse_string(
        self,
        content: str,
        *,
        source_file: Optional[str] = None,
    ) -> List[DependencyDeclaration]:
        """Parse manifest JSON text.

        Args:
            content: Raw ``package.json`` text.
            source_file: Origin of ``content``, for error messages.

        Returns:
            Declarations in merge order.

        Raises:
            ManifestError: ``content`` is not valid JSON.
        """
        try:
            manifest = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ManifestError(
                f"Invalid JSON in manifest: {exc.msg}",
                file_path=source_file,
                line_number=exc.lineno,
            ) from exc

        return self.merge(manifest)

    def merge(self, manifest: Any) -> List[DependencyDeclaration]:
        """Flatten the dependency sections of a decoded manifest."""
        dependencies = _section(manifest, DEPENDENCIES_KEY)
        dev_dependencies = _section(manifest, DEV_DEPENDENCIES_KEY)

        merged = {**dependencies, **dev_dependencies}

        declarations = [
            DependencyDeclaration(
                name=name,
                declared_range=str(spec) if spec else UNKNOWN_VERSION,
                kind=(
                    DependencyKind.DEPENDENCY
                    if name in dependencies
                    else DependencyKind.DEV_DEPENDENCY
                ),
            )
            for name, spec in merged.items()
        ]

        logger.info(
            "Found %d dependencies (%d regular, %d dev)",
            len(declarations),
            len(dependencies),
            len(dev_dependencies),
        )
        return declarations
