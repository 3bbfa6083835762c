"""Complexity analyzer: counts the decision points of a method.

CC = 1 + ifs + for/foreach loops + while/do loops + case labels + ``&&``/``||``.

Every count is a full-subtree scan, so an ``else if`` is its own ``if`` and
a loop nested anywhere is counted once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from method_audit.model.source import MethodUnit
from method_audit.model.tree import (
    DoWhile,
    For,
    ForEach,
    If,
    Statement,
    Switch,
    While,
    walk_body,
)

# Whether a ``default:`` label counts as a case label.
COUNT_DEFAULT_LABELS = False


@dataclass(frozen=True, slots=True)
class ComplexityBreakdown:
    if_statements: int = 0
    for_loops: int = 0
    while_loops: int = 0
    case_labels: int = 0
    logical_operators: int = 0

    @property
    def decision_points(self) -> int:
        return (
            self.if_statements
            + self.for_loops
            + self.while_loops
            + self.case_labels
            + self.logical_operators
        )

    @property
    def total(self) -> int:
        return 1 + self.decision_points

    def to_dict(self) -> dict[str, Any]:
        return {
            "if_statements": self.if_statements,
            "for_loops": self.for_loops,
            "while_loops": self.while_loops,
            "case_labels": self.case_labels,
            "logical_operators": self.logical_operators,
            "total": self.total,
        }


def _case_labels(node: Switch) -> int:
    return sum(
        1
        for section in node.sections
        for label in section.labels
        if COUNT_DEFAULT_LABELS or not label.is_default
    )


def score_body(body: Optional[Sequence[Statement]]) -> ComplexityBreakdown:
    """Count decision points across every statement of *body*."""
    ifs = fors = whiles = cases = logic = 0
    for node in walk_body(body):
        if isinstance(node, If):
            ifs += 1
        elif isinstance(node, (For, ForEach)):
            fors += 1
        elif isinstance(node, (While, DoWhile)):
            whiles += 1
        elif isinstance(node, Switch):
            cases += _case_labels(node)
        logic += getattr(node, "logic_ops", 0)
    return ComplexityBreakdown(ifs, fors, whiles, cases, logic)


def file_complexity(methods: Iterable[MethodUnit]) -> int:
    """File-level aggregate: one baseline path plus every method's decision points."""
    return 1 + sum(score_body(m.body).decision_points for m in methods)


class ComplexityAnalyzer:
    """Scores methods by cyclomatic-style decision points."""

    id: str = "complexity"
    version: str = "1.0.0"

    def analyze(self, method: MethodUnit) -> ComplexityBreakdown:
        return score_body(method.body)
