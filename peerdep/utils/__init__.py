"""
Utility helpers for peerdep.

This package provides reusable utilities used across peerdep, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client utilities
- npm range matching helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from peerdep.utils.filesystem import safe_read_file, safe_write_file

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from peerdep.utils.logger import (
    disable_logging,
    get_logger,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from peerdep.utils.console import (
    ProgressLine,
    format_compatible,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from peerdep.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from peerdep.utils.version_utils import is_valid_version, version_satisfies

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "ProgressLine",
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "format_compatible",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    # HTTP
    "HTTPClient",
    # Version utilities
    "is_valid_version",
    "version_satisfies",
]
