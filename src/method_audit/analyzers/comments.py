"""Pending-task scan: TODO/FIXME-style markers left in comments."""

from __future__ import annotations

from dataclasses import dataclass

from method_audit.model.source import SourceUnit

# Checked in order; the first marker contained in a comment wins.
TASK_MARKERS: tuple[str, ...] = (
    "todo",
    "fixme",
    "hack",
    "xxx",
    "bug",
    "note",
    "tbd",
    "fix",
    "optimize",
    "cleanup",
)

# A trimmed comment shorter than this is too terse to act on.
_VAGUE_LENGTH = 10


@dataclass(frozen=True, slots=True)
class PendingTask:
    line: int
    marker: str
    text: str
    vague: bool = False

    @property
    def message(self) -> str:
        if self.vague:
            return f"{self.marker} on line {self.line} is vague, add more detail."
        return f"{self.marker} found on line {self.line}"

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "marker": self.marker,
            "text": self.text,
            "vague": self.vague,
        }


def pending_tasks(unit: SourceUnit) -> list[PendingTask]:
    tasks: list[PendingTask] = []
    for comment in unit.comments:
        text = comment.text.strip()
        lowered = text.lower()
        marker = next((m for m in TASK_MARKERS if m in lowered), None)
        if marker is None:
            continue
        tasks.append(
            PendingTask(
                line=comment.line,
                marker=marker.upper(),
                text=text,
                vague=len(text) < _VAGUE_LENGTH,
            )
        )
    return tasks
