"""Console report: rich tables for humans.

One table per file (a row per method), followed by the file-level scans and
a run summary.  Columns for checks that did not run are left out.
"""

from __future__ import annotations

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from method_audit.model import ComplexityBand, NestingBand, ParameterBand
from method_audit.model.report import AnalysisReport, FileReport, MethodReport

_BAND_STYLE = {
    ComplexityBand.EASY: "green",
    ComplexityBand.MODERATE: "yellow",
    ComplexityBand.COMPLEX: "dark_orange",
    ComplexityBand.CRITICAL: "bold red",
}

_PARAM_STYLE = {
    ParameterBand.OK: "",
    ParameterBand.MODERATE: "yellow",
    ParameterBand.HIGH: "dark_orange",
    ParameterBand.EXCESSIVE: "bold red",
}


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]" if style else text


def _complexity_cell(method: MethodReport) -> str:
    if method.complexity is None:
        return ""
    band = method.complexity_band
    label = f"{method.complexity.total} ({band.value})" if band else str(method.complexity.total)
    return _styled(label, _BAND_STYLE.get(band, "") if band else "")


def _depth_cell(method: MethodReport) -> str:
    if method.nesting_depth is None:
        return ""
    if method.nesting_band == NestingBand.RESTRUCTURE:
        return _styled(f"{method.nesting_depth} (restructure)", "yellow")
    return str(method.nesting_depth)


def _methods_table(report: FileReport) -> Table:
    methods = report.keyed_methods()
    sample = next(iter(methods.values()), MethodReport(name="", line=1))

    table = Table(title=f"{escape(report.path)} ({report.language.value})", title_justify="left")
    table.add_column("Method")
    table.add_column("Line", justify="right")
    columns = [
        ("Lines", sample.line_count is not None),
        ("Params", sample.parameter_count is not None),
        ("Loop depth", sample.nesting_depth is not None),
        ("Complexity", sample.complexity is not None),
        ("Unreachable", sample.unreachable_lines is not None),
        ("Magic numbers", sample.magic_numbers is not None),
    ]
    shown = [name for name, present in columns if present]
    for name in shown:
        table.add_column(name, justify="left" if name in ("Unreachable", "Magic numbers") else "right")

    for key, method in methods.items():
        name = escape(key)
        if method.generic_name:
            name += _styled(" (generic name)", "yellow")
        cells = {
            "Lines": (
                _styled(str(method.line_count), "yellow" if method.too_long else "")
                if method.line_count is not None
                else ""
            ),
            "Params": (
                _styled(str(method.parameter_count), _PARAM_STYLE.get(method.parameter_band, ""))
                if method.parameter_count is not None
                else ""
            ),
            "Loop depth": _depth_cell(method),
            "Complexity": _complexity_cell(method),
            "Unreachable": _styled(
                ", ".join(str(n) for n in method.unreachable_lines or ()), "bold red"
            ),
            "Magic numbers": ", ".join(
                f"{m.text}@{m.line}" for m in method.magic_numbers or ()
            ),
        }
        table.add_row(name, str(method.line), *(cells[c] for c in shown))
    return table


def _file_sections(console: Console, report: FileReport) -> None:
    if report.file_complexity is not None:
        band = report.file_complexity_band
        console.print(
            "File complexity: "
            + _styled(
                f"{report.file_complexity} ({band.value})" if band else str(report.file_complexity),
                _BAND_STYLE.get(band, "") if band else "",
            )
        )
    for task in report.pending_tasks or ():
        console.print(_styled(escape(task.message), "yellow" if task.vague else "cyan"))
    for text, count in (report.duplicate_strings or {}).items():
        console.print(f"Duplicate string {text!r} used {count} times", markup=False)
    if report.file_stats is not None:
        stats = report.file_stats
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column()
        table.add_column(justify="right")
        for label, value in stats.to_dict().items():
            table.add_row(label.replace("_", " "), "" if value is None else str(value))
        console.print(Panel(table, title="File statistics", expand=False))


def render_report(report: AnalysisReport, console: Optional[Console] = None) -> None:
    """Print *report* to *console* (stdout by default)."""
    console = console or Console()
    for file_report in report.files:
        if file_report.methods:
            console.print(_methods_table(file_report))
        else:
            console.print(f"{file_report.path}: no methods found", markup=False)
        _file_sections(console, file_report)
        console.print()

    for error in report.errors:
        console.print(_styled(escape(f"error: {error.path}: {error.message}"), "red"), markup=True)

    summary = report.to_dict()["summary"]
    console.print(
        Panel(
            f"files: {summary['files_analyzed']}  failed: {summary['files_failed']}  "
            f"methods: {summary['methods_analyzed']}  "
            f"unreachable statements: {summary['unreachable_statements']}  "
            f"critical methods: {summary['critical_methods']}",
            title="Summary",
            expand=False,
        )
    )


def render_to_text(report: AnalysisReport, *, width: int = 120) -> str:
    """Render *report* without colour; used by tests and log capture."""
    buf = io.StringIO()
    render_report(report, Console(file=buf, width=width, color_system=None, highlight=False))
    return buf.getvalue()
