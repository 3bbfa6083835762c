"""
method_audit.api
================

Programmatic entrypoints for using method_audit as a library.

Goals:
  - No argparse / CLI dependencies
  - Deterministic mode support (ci_mode=True)
  - Stable, JSON-friendly outputs that match the report schema

Usage::

    from method_audit.api import analyze_source, analyze_path

    report = analyze_source(code, "csharp")
    result, result_dict = analyze_path("src/", ci_mode=True)
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from method_audit.core.config import Thresholds
from method_audit.core.discover import discover_source_files
from method_audit.core.runner import analyze_unit, parse_checks, run_analysis
from method_audit.frontends import load_source, parse_source
from method_audit.model import Language
from method_audit.model.report import AnalysisReport, FileReport

# Fixed timestamp for deterministic mode (matches CLI contract).
_DETERMINISTIC_TIMESTAMP = "2000-01-01T00:00:00+00:00"

DETERMINISTIC_ENV = "METHOD_AUDIT_DETERMINISTIC"


def _to_path(p: Union[str, Path]) -> Path:
    return p if isinstance(p, Path) else Path(p)


def deterministic_requested() -> bool:
    """True when the environment asks for byte-stable output."""
    return os.getenv(DETERMINISTIC_ENV) == "1"


def _content_run_id(target: Path, exclude: Optional[list[str]] = None) -> str:
    """``ci-`` plus a hash of the analysed files' names and contents."""
    h = hashlib.sha256()
    if target.is_dir():
        root = target.resolve()
        files = discover_source_files(root, exclude=exclude)
    else:
        root = target.resolve().parent
        files = [target.resolve()]
    for p in files:
        try:
            h.update(p.relative_to(root).as_posix().encode("utf-8"))
            h.update(p.read_bytes())
        except (OSError, ValueError):
            h.update(b"0")
    return "ci-" + h.hexdigest()[:12]


def analyze_source(
    source: str,
    language: Union[Language, str],
    *,
    filename: str = "<source>",
    checks: Optional[Iterable[str]] = None,
    thresholds: Optional[Thresholds] = None,
) -> FileReport:
    """Analyse in-memory source text.

    Raises ``InvalidSourceError`` / ``UnsupportedLanguageError`` before any
    analyzer runs, and ``ValueError`` for an unknown check name.
    """
    unit = parse_source(source, language, filename)
    return analyze_unit(
        unit,
        checks=parse_checks(checks),
        thresholds=thresholds or Thresholds(),
    )


def analyze_file(
    path: Union[str, Path],
    *,
    checks: Optional[Iterable[str]] = None,
    thresholds: Optional[Thresholds] = None,
) -> FileReport:
    """Analyse one file on disk; its language is taken from the suffix."""
    return analyze_unit(
        load_source(_to_path(path)),
        checks=parse_checks(checks),
        thresholds=thresholds or Thresholds(),
    )


def analyze_path(
    path: Union[str, Path],
    *,
    checks: Optional[Iterable[str]] = None,
    thresholds: Optional[Thresholds] = None,
    ci_mode: bool = False,
    exclude: Optional[list[str]] = None,
) -> tuple[AnalysisReport, dict[str, Any]]:
    """Analyse a file or directory and build a schema-validated report.

    Parameters
    ----------
    path:
        File or directory to analyse.
    checks:
        Check names to run; ``None`` runs all of them.
    thresholds:
        Presentation thresholds; defaults apply when omitted.
    ci_mode:
        If True, output is byte-deterministic (fixed timestamp, run id
        derived from the analysed content).
    exclude:
        Extra directory names to skip; they take no part in the run id either.

    Returns
    -------
    ``(AnalysisReport, report_dict)``

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    target = _to_path(path)
    kwargs: dict[str, Any] = {}
    if ci_mode and target.exists():
        kwargs["_created_at"] = _DETERMINISTIC_TIMESTAMP
        kwargs["_run_id"] = _content_run_id(target, exclude)

    report = run_analysis(
        target,
        checks=parse_checks(checks),
        thresholds=thresholds or Thresholds(),
        exclude=exclude,
        **kwargs,
    )
    return report, report.to_dict()
