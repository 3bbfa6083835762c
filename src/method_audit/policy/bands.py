"""Value → band → exit-code policy, the single source of truth.

Every presentation layer (CLI, console report, web API) must derive bands
and exit codes from this module instead of hard-coding thresholds locally.
The analyzers return raw counts; nothing here feeds back into them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from method_audit.model import ComplexityBand, NestingBand, ParameterBand
from method_audit.utils.exit_codes import ExitCode

if TYPE_CHECKING:
    from method_audit.model.report import FileReport


@dataclass(frozen=True, slots=True)
class ComplexityThresholds:
    """Upper bounds (inclusive) of each band below critical."""

    easy_max: int = 5
    moderate_max: int = 10
    complex_max: int = 20


METHOD_COMPLEXITY = ComplexityThresholds()
FILE_COMPLEXITY = ComplexityThresholds(easy_max=20, moderate_max=50, complex_max=100)


def complexity_band(
    total: int,
    *,
    thresholds: ComplexityThresholds = METHOD_COMPLEXITY,
) -> ComplexityBand:
    """Map a method complexity total to its band.

    Policy: 1-5 easy, 6-10 moderate, 11-20 complex, >20 critical.
    """
    if total <= thresholds.easy_max:
        return ComplexityBand.EASY
    if total <= thresholds.moderate_max:
        return ComplexityBand.MODERATE
    if total <= thresholds.complex_max:
        return ComplexityBand.COMPLEX
    return ComplexityBand.CRITICAL


def file_complexity_band(total: int) -> ComplexityBand:
    """Policy: <=20 easy, 21-50 moderate, 51-100 complex, >100 critical."""
    return complexity_band(total, thresholds=FILE_COMPLEXITY)


def nesting_band(depth: int, threshold: int = 3) -> NestingBand:
    if depth >= threshold:
        return NestingBand.RESTRUCTURE
    return NestingBand.OK


def parameter_band(count: int) -> ParameterBand:
    """Policy: >=7 excessive, >=5 high, >=3 moderate."""
    if count >= 7:
        return ParameterBand.EXCESSIVE
    if count >= 5:
        return ParameterBand.HIGH
    if count >= 3:
        return ParameterBand.MODERATE
    return ParameterBand.OK


def is_too_long(line_count: int, threshold: int) -> bool:
    return line_count > threshold


def exit_code_from_reports(reports: list[FileReport]) -> int:
    """Map analysis results to a CLI exit code.

    Policy: any unreachable code or any critical method → 1, else 0.
    """
    for report in reports:
        for method in report.methods:
            if method.unreachable_lines:
                return ExitCode.VIOLATION
            if (
                method.complexity is not None
                and complexity_band(method.complexity.total) == ComplexityBand.CRITICAL
            ):
                return ExitCode.VIOLATION
    return ExitCode.SUCCESS
