"""
Filesystem helpers for peerdep.

The manifest is read with a size cap and the HTML report is written through
a sibling temporary file, so an interrupted run never leaves a truncated
report behind. Every failure surfaces as
:class:`~peerdep.exceptions.FileOperationError`.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from peerdep.utils.logger import get_logger
from peerdep.exceptions import FileOperationError
from peerdep.constants import MAX_FILE_SIZE

logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path) -> Path:
    """Return ``path`` resolved, or raise if it is not an existing regular file."""
    if not path.exists():
        problem = "File not found"
    elif not path.is_file():
        problem = "Not a file"
    else:
        return path.resolve()

    raise FileOperationError(
        f"{problem}: {path}",
        file_path=str(path),
        operation="read",
    )


def _atomic_write(target: Path, content: str) -> None:
    """Write ``content`` next to ``target`` and rename it into place."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
        )
    except OSError as exc:
        raise FileOperationError(
            f"Cannot create {target.parent}: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, target)
    except OSError as exc:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Read a text file, refusing anything larger than ``max_size`` bytes.

    Args:
        file_path: Path to the file.
        max_size: Size cap in bytes; ``None`` disables it.
        encoding: Text encoding.

    Raises:
        FileOperationError: Missing file, too large, or unreadable.
    """
    path = _validated_file(Path(file_path))

    size = path.stat().st_size
    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(file_path: PathLike, content: str) -> Path:
    """Replace ``file_path`` with ``content`` atomically, creating parents."""
    path = Path(file_path)
    _atomic_write(path, content)
    logger.debug("Wrote %d characters to %s", len(content), path)
    return path
