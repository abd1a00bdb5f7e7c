"""Configuration file loader for peerdep.

Handles discovery, loading, parsing, and validation of ``peerdep.toml``.
Settings live under the ``[peerdep]`` table.

Discovery order:

1. Explicit path from ``--config``
2. ``peerdep.toml`` in current directory

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``peerdep.toml``)::

    [peerdep]
    lookup = "npm"
    timeout = 15
    concurrency = 4
    hide_progress = true
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass, field

from peerdep.exceptions import ConfigError
from peerdep.utils.logger import get_logger
from peerdep.constants import (
    CONFIG_FILE_NAME,
    CONFIG_SECTION,
    DEFAULT_CONCURRENCY,
    DEFAULT_HIDE_PROGRESS,
    DEFAULT_LOOKUP,
    DEFAULT_TIMEOUT,
    LOOKUP_BACKENDS,
)

logger = get_logger("config")


@dataclass
class PeerDepConfig:
    """Parsed and validated peerdep configuration.

    All fields have defaults, so an empty config file is valid.

    Attributes:
        lookup: Registry lookup backend, ``"http"`` or ``"npm"``.
        timeout: Seconds allowed for a single lookup.
        concurrency: Lookups in flight at once. ``1`` scans sequentially.
        hide_progress: Suppress the live progress line.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    lookup: str = DEFAULT_LOOKUP
    timeout: int = DEFAULT_TIMEOUT
    concurrency: int = DEFAULT_CONCURRENCY
    hide_progress: bool = DEFAULT_HIDE_PROGRESS

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "lookup": self.lookup,
            "timeout": self.timeout,
            "concurrency": self.concurrency,
            "hide_progress": self.hide_progress,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    candidate = Path.cwd() / CONFIG_FILE_NAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, candidate)
        return candidate

    logger.debug("No configuration file found")
    return None


def load_config(config_path: Optional[Path] = None) -> PeerDepConfig:
    """Load and validate peerdep configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PeerDepConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return PeerDepConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    section = raw.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(
            f"[{CONFIG_SECTION}] must be a table",
            config_path=str(resolved),
        )

    if not section:
        logger.debug("Config file found but no [%s] section, using defaults", CONFIG_SECTION)
        return PeerDepConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _positive_int(key: str, value: Any, config_path: str) -> int:
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(
            f"{key} must be an integer, got {type(value).__name__}",
            config_path=config_path,
            option=key,
        )
    if value < 1:
        raise ConfigError(
            f"{key} must be at least 1, got {value}",
            config_path=config_path,
            option=key,
        )
    return value


def _boolean(key: str, value: Any, config_path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(
            f"{key} must be a boolean, got {type(value).__name__}",
            config_path=config_path,
            option=key,
        )
    return value


def _lookup_backend(key: str, value: Any, config_path: str) -> str:
    if value not in LOOKUP_BACKENDS:
        raise ConfigError(
            f"{key} must be one of {', '.join(LOOKUP_BACKENDS)}, got {value!r}",
            config_path=config_path,
            option=key,
        )
    return value


_OPTION_VALIDATORS: Dict[str, Callable[[str, Any, str], Any]] = {
    "lookup": _lookup_backend,
    "timeout": _positive_int,
    "concurrency": _positive_int,
    "hide_progress": _boolean,
}


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PeerDepConfig:
    """Validate the ``[peerdep]`` table and build a config from it.

    Raises:
        ConfigError: Unknown keys, wrong types, or out-of-range values.
    """
    unknown = sorted(set(section) - set(_OPTION_VALIDATORS))
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            config_path=config_path,
        )

    options = {
        key: _OPTION_VALIDATORS[key](key, value, config_path)
        for key, value in section.items()
    }
    return PeerDepConfig(**options)
