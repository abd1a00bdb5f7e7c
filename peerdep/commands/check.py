"""Check command implementation for peerdep.

Scans ``package.json`` for dependencies that declare a peer dependency on a
given package and reports whether a target version of that package fits.

The command orchestrates four components, strictly in this order:

1. **ManifestReader**: merges ``dependencies`` and ``devDependencies``.
2. **RegistryProber**: one registry lookup per dependency; failures are
   skipped silently.
3. **CompatibilityEvaluator**: keeps dependencies that declare the peer
   and matches the target version against their range.
4. **Renderers**: table, JSON, summary and HTML report.

Typical usage::

    # Which dependencies declare a peer on react, and do they accept 18.2.0?
    $ peerdep-checker react 18.2.0

    # Only the ones that do not, as JSON
    $ peerdep-checker react 18.2.0 --only-incompatible --json --hide-progress

    # Table, summary and an HTML report
    $ peerdep-checker react 18.2.0 --summary --html report.html
"""

from __future__ import annotations

import json
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rich.markup import escape

from peerdep.models import DependencyDeclaration, EvaluationRow
from peerdep.context import PeerDepContext
from peerdep.constants import ALL_COMPATIBLE_MESSAGE
from peerdep.core import (
    CompatibilityEvaluator,
    ManifestReader,
    RegistryProber,
    ReportSummary,
    only_incompatible,
    open_lookup,
    render_html_report,
)
from peerdep.utils import (
    ProgressLine,
    format_compatible,
    get_logger,
    get_raw_console,
    is_valid_version,
    print_success,
    print_table,
    safe_write_file,
)

logger = get_logger("commands.check")


def run_check(
    ctx: PeerDepContext,
    peer: str,
    target_version: Optional[str],
    *,
    manifest: Path,
    as_json: bool = False,
    summary: bool = False,
    incompatible_only: bool = False,
    html_path: Optional[Path] = None,
    hide_progress: bool = False,
) -> List[EvaluationRow]:
    """Run a full scan and render the results.

    Args:
        ctx: Runtime context carrying the effective configuration.
        peer: Peer package to look for.
        target_version: Version of ``peer`` to test, if any.
        manifest: Path to ``package.json``.
        as_json: Print rows as JSON instead of a table.
        summary: Print summary counts after the table.
        incompatible_only: Drop compatible rows from table/JSON output.
        html_path: Also write an HTML report here.
        hide_progress: Suppress the progress line.

    Returns:
        Every matched row, unfiltered.

    Raises:
        ManifestError: The manifest is missing or not valid JSON.
        FileOperationError: The HTML report could not be written.
    """
    rows = asyncio.run(
        _scan_async(
            ctx,
            peer,
            target_version,
            manifest=manifest,
            show_progress=not (hide_progress or ctx.config.hide_progress),
        )
    )

    render_results(
        rows,
        peer,
        target_version,
        as_json=as_json,
        summary=summary,
        incompatible_only=incompatible_only,
        html_path=html_path,
    )
    return rows


# ---------------------------------------------------------------------------
# Async orchestration
# ---------------------------------------------------------------------------


async def _scan_async(
    ctx: PeerDepContext,
    peer: str,
    target_version: Optional[str],
    *,
    manifest: Path,
    show_progress: bool,
) -> List[EvaluationRow]:
    """Read the manifest, probe the registry and evaluate every dependency."""
    config = ctx.config

    logger.info("Reading %s...", manifest)
    declarations: List[DependencyDeclaration] = ManifestReader().parse_file(manifest)

    if target_version is not None and not is_valid_version(target_version):
        logger.info(
            "%r is not a valid semantic version; no range will accept it",
            target_version,
        )

    progress = ProgressLine(len(declarations), enabled=show_progress)

    logger.info(
        "Looking up %d package(s) via %s (concurrency=%d)",
        len(declarations),
        config.lookup,
        config.concurrency,
    )
    async with open_lookup(
        config.lookup,
        timeout=config.timeout,
        concurrency=config.concurrency,
    ) as lookup:
        prober = RegistryProber(
            lookup,
            concurrency=config.concurrency,
            progress_callback=lambda completed, _total: progress.update(completed),
        )
        snapshots = await prober.probe([d.name for d in declarations])

    progress.finish()

    evaluator = CompatibilityEvaluator(peer, target_version)
    rows = evaluator.evaluate_all(zip(declarations, snapshots))

    logger.info("%d package(s) declare a peer dependency on %s", len(rows), peer)
    return rows


# ---------------------------------------------------------------------------
# Display renderers
# ---------------------------------------------------------------------------


def render_results(
    rows: Sequence[EvaluationRow],
    peer: str,
    target_version: Optional[str],
    *,
    as_json: bool = False,
    summary: bool = False,
    incompatible_only: bool = False,
    html_path: Optional[Path] = None,
) -> None:
    """Print the report for already evaluated rows.

    Branches, evaluated once and in this order:

    1. No matched rows: print the success message and stop.
    2. ``--only-incompatible``: filter the rows shown by table/JSON.
    3. ``--json``: print the JSON array and stop.
    4. Table (or the success message if the filter left nothing).
    5. ``--summary``: counts over all matched rows.
    6. ``--html``: report over all matched rows.
    """
    if not rows:
        print_success(ALL_COMPATIBLE_MESSAGE)
        return

    shown = only_incompatible(rows) if incompatible_only else list(rows)

    if as_json:
        _display_json(shown)
        return

    if shown:
        _display_table(shown, peer)
    else:
        print_success(ALL_COMPATIBLE_MESSAGE)

    if summary:
        _display_summary(ReportSummary.from_rows(rows))

    if html_path is not None:
        _write_html_report(html_path, peer, target_version, rows)


def _display_table(rows: Sequence[EvaluationRow], peer: str) -> None:
    """Render rows as a Rich table.

    Example::

        ┏━━━━━━━━━━━┳━━━━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━┳━━━━━━━━━━━━━━━━━━┳━━━━━━━━━━━━┓
        ┃ Package   ┃ Type       ┃ Current ┃ Latest ┃ react Peer Range ┃ Compatible ┃
        ┡━━━━━━━━━━━╇━━━━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━╇━━━━━━━━━━━━━━━━━━╇━━━━━━━━━━━━┩
        │ react-dom │ dependency │ ^18.2.0 │ 18.3.1 │ ^18.3.1          │ ✅ Yes     │
        └───────────┴────────────┴─────────┴────────┴──────────────────┴────────────┘
    """
    range_header = f"{peer} Peer Range"
    headers = ["Package", "Type", "Current", "Latest", range_header, "Compatible"]

    data: List[Dict[str, Any]] = [
        {
            "Package": escape(row.package),
            "Type": row.type,
            "Current": escape(row.current),
            "Latest": escape(row.latest),
            range_header: escape(row.peer_range),
            "Compatible": format_compatible(row.compatible),
        }
        for row in rows
    ]

    column_styles: Dict[str, Dict[str, Any]] = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Type": {"style": "dim"},
        "Latest": {"style": "bold green"},
        "Compatible": {"justify": "center", "no_wrap": True},
    }

    print_table(data, headers=headers, column_styles=column_styles)


def _display_json(rows: Sequence[EvaluationRow]) -> None:
    """Print rows as an indented JSON array for machine consumption."""
    print(json.dumps([row.to_json() for row in rows], indent=2, ensure_ascii=False))


def _display_summary(summary: ReportSummary) -> None:
    """Print the summary block.

    Example output::

        📊 Summary:
        - Total packages checked: 4
        - Compatible: 3
        - Incompatible: 1
        - Compatibility Rate: 75%
    """
    console = get_raw_console()
    console.print("\n📊 [bold]Summary:[/bold]")
    console.print(f"- Total packages checked: {summary.total}")
    console.print(f"- Compatible: {summary.compatible}")
    console.print(f"- Incompatible: {summary.incompatible}")
    console.print(f"- Compatibility Rate: {summary.percent}%")


def _write_html_report(
    path: Path,
    peer: str,
    target_version: Optional[str],
    rows: Sequence[EvaluationRow],
) -> None:
    html = render_html_report(peer, target_version, rows)
    safe_write_file(path, html)
    logger.info("Wrote HTML report for %d package(s)", len(rows))
    get_raw_console().print(f"\n📝 HTML report written to {escape(str(path))}")
