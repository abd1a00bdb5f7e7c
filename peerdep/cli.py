"""
Command-line interface for peerdep.

This module provides the CLI entry point, handles global options and
configuration loading, and hands the scan over to
:mod:`peerdep.commands.check`.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from peerdep.config import load_config
from peerdep.__version__ import PROG_NAME, __version__
from peerdep.context import PeerDepContext
from peerdep.commands.check import run_check
from peerdep.exceptions import PeerDepError
from peerdep.constants import DEFAULT_MANIFEST, MISSING_PEER_MESSAGE
from peerdep.utils.logger import get_logger, setup_logging
from peerdep.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("peer", required=False)
@click.argument("target_version", metavar="VERSION", required=False)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table.")
@click.option(
    "--summary",
    is_flag=True,
    help="Print summary counts after the table (ignored with --json).",
)
@click.option(
    "--only-incompatible",
    is_flag=True,
    help="Show only packages whose peer range rejects VERSION.",
)
@click.option(
    "--html",
    "html_path",
    type=click.Path(dir_okay=False, path_type=Path),
    metavar="PATH",
    help=(
        "Also write an HTML report to PATH. PATH is required; "
        "a bare --html is a usage error."
    ),
)
@click.option("--hide-progress", is_flag=True, help="Suppress the progress line.")
@click.option(
    "--manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_MANIFEST,
    show_default=True,
    help="Path to the project manifest.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
)
@click.version_option(
    version=__version__,
    prog_name=PROG_NAME,
    message="%(prog)s %(version)s",
)
def cli(
    peer: Optional[str],
    target_version: Optional[str],
    as_json: bool,
    summary: bool,
    only_incompatible: bool,
    html_path: Optional[Path],
    hide_progress: bool,
    manifest: Path,
    config_path: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Report dependencies that declare a peer dependency on PEER.

    Every dependency in package.json is looked up on the npm registry. Those
    whose latest release lists PEER under peerDependencies are shown, and
    when VERSION is given, checked against the declared range.

    \b
    Examples:
      peerdep-checker react
      peerdep-checker react 18.2.0 --summary
      peerdep-checker react 17.0.2 --only-incompatible --json --hide-progress
      peerdep-checker react 18.2.0 --html report.html
    """
    root_logger = setup_logging(verbose)
    logger.debug(
        "Logging initialized at %s level", logging.getLevelName(root_logger.level)
    )

    if not peer:
        print_error(MISSING_PEER_MESSAGE)
        raise SystemExit(1)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config_path)
    except PeerDepError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    peerdep_ctx = PeerDepContext()
    peerdep_ctx.config_path = config_path or loaded_config.source_path
    peerdep_ctx.color = color
    peerdep_ctx.verbose = verbose
    peerdep_ctx.config = loaded_config

    logger.debug("peerdep v%s", __version__)
    logger.debug("Config path: %s", peerdep_ctx.config_path)
    logger.debug("Effective configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)

    try:
        run_check(
            peerdep_ctx,
            peer,
            target_version,
            manifest=manifest,
            as_json=as_json,
            summary=summary,
            incompatible_only=only_incompatible,
            html_path=html_path,
            hide_progress=hide_progress,
        )
    except PeerDepError as exc:
        print_error(str(exc))
        logger.debug("PeerDepError details: %s", exc.details or "<none>", exc_info=True)
        raise SystemExit(1) from exc


def main() -> int:
    """Main entry point for the peerdep CLI.

    Returns:
        Exit code:
            0   Success
            1   Missing peer name, or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else 1

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
