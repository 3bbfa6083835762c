"""File-wide statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from method_audit.analyzers.comments import pending_tasks
from method_audit.model.source import SourceUnit


@dataclass(frozen=True, slots=True)
class FileStats:
    total_lines: int = 0
    method_count: int = 0
    longest_method: Optional[str] = None
    longest_method_lines: int = 0
    average_method_length: float = 0.0
    class_count: int = 0
    pending_task_count: int = 0
    property_count: int = 0
    field_count: int = 0
    comment_density: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_lines": self.total_lines,
            "method_count": self.method_count,
            "longest_method": self.longest_method,
            "longest_method_lines": self.longest_method_lines,
            "average_method_length": self.average_method_length,
            "class_count": self.class_count,
            "pending_task_count": self.pending_task_count,
            "property_count": self.property_count,
            "field_count": self.field_count,
            "comment_density": self.comment_density,
        }


def comment_density(unit: SourceUnit) -> float:
    """Percentage of lines taken up by comments."""
    comment_lines = sum(c.line_count for c in unit.comments)
    return comment_lines / max(unit.line_count, 1) * 100


def file_stats(unit: SourceUnit) -> FileStats:
    longest = max(unit.methods, key=lambda m: m.line_count, default=None)
    average = (
        sum(m.line_count for m in unit.methods) / len(unit.methods)
        if unit.methods
        else 0.0
    )
    return FileStats(
        total_lines=unit.line_count,
        method_count=len(unit.methods),
        longest_method=longest.name if longest is not None else None,
        longest_method_lines=longest.line_count if longest is not None else 0,
        average_method_length=round(average, 2),
        class_count=unit.class_count,
        pending_task_count=len(pending_tasks(unit)),
        property_count=unit.property_count,
        field_count=unit.field_count,
        comment_density=round(comment_density(unit), 2),
    )
