"""
Centralized constants for peerdep.

This module defines immutable configuration values used across peerdep,
including registry endpoints, lookup defaults, report texts, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "peerdep-checker/{version}"

# ---------------------------------------------------------------------------
# npm registry
# ---------------------------------------------------------------------------

#: Abbreviated manifest of the ``latest`` dist-tag of a package.
NPM_REGISTRY_LATEST_URL: Final[str] = "https://registry.npmjs.org/{package}/latest"

#: Command used by the ``npm`` lookup; the package name is appended.
NPM_INFO_COMMAND: Final[Sequence[str]] = ("npm", "info")

#: Fields requested from ``npm info``.
NPM_INFO_FIELDS: Final[Sequence[str]] = ("version", "peerDependencies", "--json")

#: Placeholder shown when a version is not known.
UNKNOWN_VERSION: Final[str] = "unknown"

# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

#: Default manifest file name, resolved against the working directory.
DEFAULT_MANIFEST: Final[str] = "package.json"

#: Primary dependency section.
DEPENDENCIES_KEY: Final[str] = "dependencies"

#: Secondary (development) dependency section.
DEV_DEPENDENCIES_KEY: Final[str] = "devDependencies"

# ---------------------------------------------------------------------------
# Lookup configuration defaults
# ---------------------------------------------------------------------------

#: Supported lookup backends.
LOOKUP_BACKENDS: Final[Sequence[str]] = ("http", "npm")

#: Default lookup backend.
DEFAULT_LOOKUP: Final[str] = "http"

#: Default per-lookup timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Number of lookups in flight at once; 1 keeps the scan sequential.
DEFAULT_CONCURRENCY: Final[int] = 1

#: Whether the live progress line is suppressed by default.
DEFAULT_HIDE_PROGRESS: Final[bool] = False

#: Name of the auto-discovered configuration file.
CONFIG_FILE_NAME: Final[str] = "peerdep.toml"

#: Table holding peerdep settings inside the configuration file.
CONFIG_SECTION: Final[str] = "peerdep"

# ---------------------------------------------------------------------------
# Report texts
# ---------------------------------------------------------------------------

#: Printed when no dependency declares the peer (or none is left to show).
ALL_COMPATIBLE_MESSAGE: Final[str] = (
    "All packages are compatible with the specified peer dependency."
)

#: Printed on stderr when the peer name argument is missing.
MISSING_PEER_MESSAGE: Final[str] = (
    "Please provide a peer dependency name. "
    "Example: peerdep-checker react 18.2.0"
)

#: HTML report template file name.
HTML_TEMPLATE_NAME: Final[str] = "report.html.j2"

# ---------------------------------------------------------------------------
# Security constraints
# ---------------------------------------------------------------------------

#: Maximum allowed manifest size in bytes.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
