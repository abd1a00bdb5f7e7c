"""
Terminal output for peerdep, built on Rich.

Report output (tables, the summary, the progress line, success messages)
goes to stdout. Errors and warnings go to stderr so that ``--json`` output
stays parseable. Diagnostics belong in :mod:`peerdep.utils.logger`, never
here.

Both consoles are created lazily and cached; call
:func:`reconfigure_console` after changing ``NO_COLOR`` so the next print
picks the new setting up.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence

from rich.table import Table
from rich.theme import Theme
from rich.console import Console

PEERDEP_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
    }
)


def _should_use_color() -> bool:
    """Color only on an interactive stdout, never under NO_COLOR or CI."""
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError, ValueError):
        return False


@lru_cache(maxsize=2)
def _console_for(stderr: bool) -> Console:
    use_color = _should_use_color()
    return Console(
        theme=PEERDEP_THEME,
        no_color=not use_color,
        highlight=use_color,
        stderr=stderr,
    )


def _get_console() -> Console:
    """Return the shared stdout console."""
    return _console_for(False)


def _get_error_console() -> Console:
    """Return the shared stderr console."""
    return _console_for(True)


def reconfigure_console() -> None:
    """Drop the cached consoles so they are rebuilt on next use."""
    _console_for.cache_clear()


def get_raw_console() -> Console:
    """Return the stdout console for output the helpers below do not cover."""
    return _get_console()


def print_success(message: str, *, prefix: str = "✅") -> None:
    _get_console().print(f"{prefix} {message}", style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print ``message`` verbatim (no markup) to stderr."""
    _get_error_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_error_console().print(f"{prefix} {message}", style="warning", markup=False)


def print_table(
    rows: Sequence[Mapping[str, Any]],
    *,
    headers: Optional[List[str]] = None,
    title: Optional[str] = None,
    column_styles: Optional[Dict[str, Dict[str, Any]]] = None,
) -> None:
    """Render ``rows`` as a Rich table; nothing is printed for no rows.

    Args:
        rows: One mapping per row. Values may contain Rich markup.
        headers: Column order; defaults to the keys of the first row.
        title: Optional title above the table.
        column_styles: Per-column ``style``, ``justify`` and ``no_wrap``.
    """
    if not rows:
        return

    columns = headers or list(rows[0].keys())
    styles = column_styles or {}

    table = Table(title=title, header_style="bold")
    for column in columns:
        options = styles.get(column, {})
        table.add_column(
            column,
            style=options.get("style"),
            justify=options.get("justify", "left"),
            no_wrap=options.get("no_wrap", False),
            overflow="fold",
        )

    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in columns))

    _get_console().print(table)


def format_compatible(compatible: bool) -> str:
    """Return the Rich-markup cell shown in the ``Compatible`` column."""
    return "[green]✅ Yes[/green]" if compatible else "[red]❌ No[/red]"


class ProgressLine:
    """Status line on stdout, rewritten in place after every step.

    Renders ``🔄 <label>: <current> / <total> (<percent>%)`` with the
    percentage floored. Nothing is written when disabled or when
    ``total`` is zero.

    Args:
        total: Number of steps expected.
        enabled: Whether anything is written at all.
        label: Text shown before the counters.
    """

    def __init__(
        self,
        total: int,
        *,
        enabled: bool = True,
        label: str = "Processing packages",
    ) -> None:
        self.total = total
        self.enabled = enabled and total > 0
        self.label = label
        self._shown = False

    @staticmethod
    def percent(current: int, total: int) -> int:
        return (current * 100) // total

    def _write(self, text: str) -> None:
        stream = _get_console().file
        stream.write(text)
        stream.flush()

    def update(self, current: int) -> None:
        if not self.enabled:
            return
        pct = self.percent(current, self.total)
        self._write(f"\r🔄 {self.label}: {current} / {self.total} ({pct}%)")
        self._shown = True

    def finish(self) -> None:
        """End the status line and leave a blank line before later output."""
        if self._shown:
            self._write("\n\n")
            self._shown = False
