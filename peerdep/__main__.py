"""
Executable module for peerdep.

Running:
    python -m peerdep

is equivalent to:
    peerdep-checker

This module simply forwards execution to the CLI entrypoint defined in
`peerdep.cli`.
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Explain on stderr why the CLI could not be imported."""
    try:
        from peerdep.__version__ import __version__
    except ImportError:
        __version__ = "<unknown>"

    sys.stderr.write("peerdep-checker could not start.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    sys.stderr.write(f"peerdep version: {__version__}\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m peerdep`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from peerdep.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
