"""Runner: applies the analyzers to source units and aggregates reports."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Iterable, Optional

from method_audit.analyzers import ComplexityAnalyzer, NestingAnalyzer, ReachabilityAnalyzer
from method_audit.analyzers.comments import pending_tasks
from method_audit.analyzers.complexity import file_complexity
from method_audit.analyzers.conventions import is_generic_name, method_length, parameter_count
from method_audit.analyzers.file_stats import file_stats
from method_audit.analyzers.literals import duplicate_strings, magic_numbers
from method_audit.contracts.load import validate_instance
from method_audit.core.config import Thresholds
from method_audit.core.discover import discover_source_files
from method_audit.frontends import SourceError, load_source
from method_audit.model import ALL_CHECKS, Check, Language
from method_audit.model.report import AnalysisReport, FileError, FileReport, MethodReport
from method_audit.model.source import MethodUnit, SourceUnit
from method_audit.policy.bands import (
    complexity_band,
    file_complexity_band,
    is_too_long,
    nesting_band,
    parameter_band,
)

_logger = logging.getLogger(__name__)

# Caps bulk concurrency; unset means the executor's own default.
WORKERS_ENV = "METHOD_AUDIT_WORKERS"

_REACHABILITY = ReachabilityAnalyzer()
_NESTING = NestingAnalyzer()
_COMPLEXITY = ComplexityAnalyzer()


def parse_checks(names: Optional[Iterable[str]]) -> frozenset[Check]:
    """Map check names (``"dead-code"``, ...) to ``Check`` members.

    ``None`` or an empty selection means every check.  Raises ``ValueError``
    naming the first unknown check.
    """
    selected = [n.strip() for n in names or () if n.strip()]
    if not selected:
        return ALL_CHECKS
    checks: set[Check] = set()
    for name in selected:
        try:
            checks.add(Check(name))
        except ValueError:
            valid = ", ".join(c.value for c in Check)
            raise ValueError(f"unknown check {name!r} (choose from: {valid})") from None
    return frozenset(checks)


def analyze_method(
    method: MethodUnit,
    *,
    language: Language = Language.CSHARP,
    checks: frozenset[Check] = ALL_CHECKS,
    thresholds: Thresholds = Thresholds(),
) -> MethodReport:
    """Run every selected per-method check on *method*."""
    fields: dict[str, Any] = {}
    if Check.DEAD_CODE in checks:
        fields["unreachable_lines"] = tuple(_REACHABILITY.analyze(method))
    if Check.DEPTH in checks:
        depth = _NESTING.analyze(method)
        fields["nesting_depth"] = depth
        fields["nesting_band"] = nesting_band(depth, thresholds.nesting_depth)
    if Check.COMPLEXITY in checks:
        breakdown = _COMPLEXITY.analyze(method)
        fields["complexity"] = breakdown
        fields["complexity_band"] = complexity_band(breakdown.total)
    if Check.LENGTH in checks:
        length = method_length(method)
        fields["line_count"] = length
        fields["too_long"] = is_too_long(length, thresholds.method_length)
    if Check.PARAMS in checks:
        count = parameter_count(method)
        fields["parameter_count"] = count
        fields["parameter_band"] = parameter_band(count)
    if Check.MAGIC in checks:
        fields["magic_numbers"] = tuple(magic_numbers(method))
    if Check.NAMES in checks:
        fields["generic_name"] = is_generic_name(method.name, language)
    return MethodReport(name=method.name, line=method.line, **fields)


def analyze_unit(
    unit: SourceUnit,
    *,
    checks: frozenset[Check] = ALL_CHECKS,
    thresholds: Thresholds = Thresholds(),
    display_path: Optional[str] = None,
) -> FileReport:
    """Aggregate every selected check for one parsed source unit."""
    methods = tuple(
        analyze_method(m, language=unit.language, checks=checks, thresholds=thresholds)
        for m in unit.methods
    )
    fields: dict[str, Any] = {}
    if Check.PENDING in checks:
        fields["pending_tasks"] = tuple(pending_tasks(unit))
    if Check.DUPLICATES in checks:
        fields["duplicate_strings"] = duplicate_strings(unit)
    if Check.FILE_STATS in checks:
        fields["file_stats"] = file_stats(unit)
    if Check.COMPLEXITY in checks:
        total = file_complexity(unit.methods)
        fields["file_complexity"] = total
        fields["file_complexity_band"] = file_complexity_band(total)
    return FileReport(
        path=display_path or unit.path,
        language=unit.language,
        methods=methods,
        **fields,
    )


def _worker_count(max_workers: Optional[int]) -> Optional[int]:
    if max_workers is not None:
        return max_workers
    raw = os.environ.get(WORKERS_ENV, "")
    if not raw:
        return None
    try:
        return max(1, int(raw))
    except ValueError:
        _logger.warning("ignoring non-integer %s=%r", WORKERS_ENV, raw)
        return None


def analyze_files(
    paths: list[Path],
    *,
    root: Optional[Path] = None,
    checks: frozenset[Check] = ALL_CHECKS,
    thresholds: Thresholds = Thresholds(),
    max_workers: Optional[int] = None,
) -> tuple[list[FileReport], list[FileError]]:
    """Analyse *paths* concurrently.

    A file that fails to load is logged and recorded as a ``FileError``; it
    never aborts the batch.  Results keep the order of *paths*.
    """

    def display(p: Path) -> str:
        if root is not None:
            try:
                return p.relative_to(root).as_posix()
            except ValueError:
                pass
        return p.as_posix()

    def work(p: Path) -> FileReport:
        _logger.debug("analysing %s", p)
        return analyze_unit(
            load_source(p), checks=checks, thresholds=thresholds, display_path=display(p)
        )

    reports: list[FileReport] = []
    errors: list[FileError] = []
    with ThreadPoolExecutor(max_workers=_worker_count(max_workers)) as pool:
        futures = [(p, pool.submit(work, p)) for p in paths]
        for p, future in futures:
            try:
                reports.append(future.result())
            except SourceError as exc:
                _logger.warning("skipped %s: %s", display(p), exc)
                errors.append(FileError(display(p), str(exc)))
    return reports, errors


def run_analysis(
    target: Path,
    *,
    checks: frozenset[Check] = ALL_CHECKS,
    thresholds: Thresholds = Thresholds(),
    exclude: Optional[list[str]] = None,
    max_workers: Optional[int] = None,
    # Testing hooks for deterministic output
    _run_id: Optional[str] = None,
    _created_at: Optional[str] = None,
) -> AnalysisReport:
    """Analyse a file or a directory and assemble a validated ``AnalysisReport``.

    A single file that fails to parse raises its ``SourceError``; inside a
    directory the failure is recorded in ``report.errors`` instead.

    Raises ``FileNotFoundError`` when *target* does not exist.
    """
    if not target.exists():
        raise FileNotFoundError(f"path does not exist: {target}")

    report = AnalysisReport(
        config={
            "target": target.as_posix(),
            "checks": sorted(c.value for c in checks),
            "thresholds": thresholds.to_dict(),
        },
    )
    if _run_id is not None:
        report.run_id = _run_id
    if _created_at is not None:
        report.created_at = _created_at

    if target.is_dir():
        root = target.resolve()
        files = discover_source_files(root, exclude=exclude)
        _logger.debug("discovered %d source files under %s", len(files), root)
        report.files, report.errors = analyze_files(
            files, root=root, checks=checks, thresholds=thresholds, max_workers=max_workers
        )
    else:
        report.files = [
            analyze_unit(
                load_source(target),
                checks=checks,
                thresholds=thresholds,
                display_path=target.name,
            )
        ]

    validate_instance(report.to_dict(), "analysis_report.schema.json")
    return report
