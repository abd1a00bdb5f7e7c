"""
Core functionality exports for peerdep.

Importing from here keeps user-facing imports clean and stable:

    from peerdep.core import ManifestReader, RegistryProber
"""

from __future__ import annotations

from peerdep.core.manifest import ManifestReader
from peerdep.core.evaluator import CompatibilityEvaluator
from peerdep.core.registry import (
    HttpRegistryLookup,
    NpmCliLookup,
    RegistryLookup,
    RegistryProber,
    open_lookup,
)
from peerdep.core.report import ReportSummary, only_incompatible, render_html_report

__all__ = [
    "ManifestReader",
    "RegistryLookup",
    "HttpRegistryLookup",
    "NpmCliLookup",
    "RegistryProber",
    "open_lookup",
    "CompatibilityEvaluator",
    "ReportSummary",
    "only_incompatible",
    "render_html_report",
]
