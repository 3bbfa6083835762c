"""Reports: the aggregated, schema-aligned analysis artifacts.

``MethodReport`` and ``FileReport`` are assembled by ``core.runner`` from the
raw analyzer output; ``AnalysisReport`` wraps one or many file reports with
run metadata and matches ``analysis_report.schema.json``.  A field left as
``None`` means its check was not selected and is omitted from the JSON.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from method_audit import __version__
from method_audit.analyzers.comments import PendingTask
from method_audit.analyzers.complexity import ComplexityBreakdown
from method_audit.analyzers.file_stats import FileStats
from method_audit.analyzers.literals import MagicNumber
from method_audit.model import ComplexityBand, Language, NestingBand, ParameterBand

SCHEMA_VERSION = "method_audit_report_v1"


def _drop_none(d: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


@dataclass(frozen=True, slots=True)
class MethodReport:
    name: str
    line: int
    line_count: Optional[int] = None
    too_long: Optional[bool] = None
    parameter_count: Optional[int] = None
    parameter_band: Optional[ParameterBand] = None
    unreachable_lines: Optional[tuple[int, ...]] = None
    nesting_depth: Optional[int] = None
    nesting_band: Optional[NestingBand] = None
    complexity: Optional[ComplexityBreakdown] = None
    complexity_band: Optional[ComplexityBand] = None
    magic_numbers: Optional[tuple[MagicNumber, ...]] = None
    generic_name: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        complexity = None
        if self.complexity is not None:
            complexity = self.complexity.to_dict()
            if self.complexity_band is not None:
                complexity["band"] = self.complexity_band.value
        nesting = None
        if self.nesting_depth is not None:
            nesting = _drop_none(
                {
                    "depth": self.nesting_depth,
                    "band": self.nesting_band.value if self.nesting_band else None,
                }
            )
        return _drop_none(
            {
                "name": self.name,
                "line": self.line,
                "line_count": self.line_count,
                "too_long": self.too_long,
                "parameter_count": self.parameter_count,
                "parameter_band": self.parameter_band.value if self.parameter_band else None,
                "unreachable_lines": (
                    list(self.unreachable_lines) if self.unreachable_lines is not None else None
                ),
                "nesting": nesting,
                "complexity": complexity,
                "magic_numbers": (
                    [m.to_dict() for m in self.magic_numbers]
                    if self.magic_numbers is not None
                    else None
                ),
                "generic_name": self.generic_name,
            }
        )


@dataclass(frozen=True, slots=True)
class FileReport:
    path: str
    language: Language
    methods: tuple[MethodReport, ...] = ()
    pending_tasks: Optional[tuple[PendingTask, ...]] = None
    duplicate_strings: Optional[dict[str, int]] = None
    file_stats: Optional[FileStats] = None
    file_complexity: Optional[int] = None
    file_complexity_band: Optional[ComplexityBand] = None

    def keyed_methods(self) -> dict[str, MethodReport]:
        """Methods keyed by identifier; repeats become ``Name(2)``, ``Name(3)``..."""
        keyed: dict[str, MethodReport] = {}
        seen: dict[str, int] = {}
        for method in self.methods:
            seen[method.name] = seen.get(method.name, 0) + 1
            key = method.name if seen[method.name] == 1 else f"{method.name}({seen[method.name]})"
            keyed[key] = method
        return keyed

    @property
    def unreachable_count(self) -> int:
        return sum(len(m.unreachable_lines or ()) for m in self.methods)

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "path": self.path,
                "language": self.language.value,
                "methods": {k: m.to_dict() for k, m in self.keyed_methods().items()},
                "pending_tasks": (
                    [t.to_dict() for t in self.pending_tasks]
                    if self.pending_tasks is not None
                    else None
                ),
                "duplicate_strings": (
                    dict(self.duplicate_strings) if self.duplicate_strings is not None else None
                ),
                "file_stats": self.file_stats.to_dict() if self.file_stats is not None else None,
                "file_complexity": (
                    _drop_none(
                        {
                            "total": self.file_complexity,
                            "band": (
                                self.file_complexity_band.value
                                if self.file_complexity_band
                                else None
                            ),
                        }
                    )
                    if self.file_complexity is not None
                    else None
                ),
            }
        )


@dataclass(frozen=True, slots=True)
class FileError:
    """A file the batch could not analyse."""

    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass(slots=True)
class AnalysisReport:
    """One analysis run over a single file or a directory."""

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
    tool_version: str = __version__
    config: dict = field(default_factory=dict)
    files: list[FileReport] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        methods = [m for f in self.files for m in f.methods]
        file_complexities = sorted(
            (
                {
                    "path": f.path,
                    "total": f.file_complexity,
                    "band": f.file_complexity_band.value if f.file_complexity_band else None,
                }
                for f in self.files
                if f.file_complexity is not None
            ),
            key=lambda d: (d["total"], d["path"]),
        )
        return {
            "schema_version": SCHEMA_VERSION,
            "run": {
                "run_id": self.run_id,
                "created_at": self.created_at,
                "tool_version": self.tool_version,
                "config": self.config,
            },
            "summary": {
                "files_analyzed": len(self.files),
                "files_failed": len(self.errors),
                "methods_analyzed": len(methods),
                "unreachable_statements": sum(f.unreachable_count for f in self.files),
                "critical_methods": sum(
                    1 for m in methods if m.complexity_band == ComplexityBand.CRITICAL
                ),
                "file_complexities": [_drop_none(d) for d in file_complexities],
            },
            "files": [f.to_dict() for f in self.files],
            "errors": [e.to_dict() for e in self.errors],
        }
