"""Report helpers for peerdep.

Row filtering, the summary counts, and the static HTML report. Rendering to
the terminal lives in :mod:`peerdep.commands.check`.
"""

from __future__ import annotations

import math
from pathlib import Path
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from peerdep.__version__ import __version__
from peerdep.constants import HTML_TEMPLATE_NAME
from peerdep.models import EvaluationRow

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

__all__ = [
    "ReportSummary",
    "only_incompatible",
    "render_html_report",
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class ReportSummary:
    """Counts shown by ``--summary``.

    Attributes:
        total: Dependencies that declare the peer.
        compatible: How many of them accept the target version.
        incompatible: ``total - compatible``.
        percent: Compatible share, rounded half-up to a whole percent.
    """

    total: int
    compatible: int
    incompatible: int
    percent: int

    @classmethod
    def from_rows(cls, rows: Sequence[EvaluationRow]) -> "ReportSummary":
        total = len(rows)
        compatible = sum(1 for row in rows if row.compatible)
        percent = _round_half_up(compatible / total * 100) if total else 0
        return cls(
            total=total,
            compatible=compatible,
            incompatible=total - compatible,
            percent=percent,
        )


def only_incompatible(rows: Sequence[EvaluationRow]) -> List[EvaluationRow]:
    """Return the incompatible rows, preserving order."""
    return [row for row in rows if not row.compatible]


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html_report(
    peer: str,
    target_version: Optional[str],
    rows: Sequence[EvaluationRow],
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the standalone HTML report.

    Args:
        peer: Peer package name.
        target_version: Version that was tested, if any.
        rows: Rows to list; all matched rows, not the filtered view.
        generated_at: Timestamp printed in the footer; defaults to now (UTC).

    Returns:
        Complete HTML document.
    """
    template = _environment().get_template(HTML_TEMPLATE_NAME)
    generated_at = generated_at or datetime.now(timezone.utc)

    return template.render(
        peer=peer,
        target_version=target_version,
        rows=rows,
        summary=ReportSummary.from_rows(rows),
        generated_at=generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        version=__version__,
    )
