"""
Shared runtime context for a peerdep invocation.

Created once by the CLI entry point and handed to the check command so that
global options (verbosity, color, configuration) travel together.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from peerdep.config import PeerDepConfig


class PeerDepContext:
    """Global state of one CLI invocation.

    Attributes:
        config_path: Path to the loaded configuration file, if any.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Effective configuration.
    """

    __slots__ = ("config_path", "verbose", "color", "config")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: PeerDepConfig = PeerDepConfig()
