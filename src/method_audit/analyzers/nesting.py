"""Nesting-depth analyzer: how deeply loops nest inside a method."""

from __future__ import annotations

from typing import Optional, Sequence

from method_audit.model.source import MethodUnit
from method_audit.model.tree import LOOP_TYPES, Block, Statement, loop_body


def max_depth(stmt: Optional[Statement], depth: int = 0) -> int:
    """Deepest loop level reached at or below *stmt*.

    Blocks are transparent, each loop adds one level, and every other
    statement is a leaf: loops nested under an ``if`` or ``try`` do not
    count towards the depth.
    """
    if stmt is None:
        return depth

    if isinstance(stmt, Block):
        deepest = depth
        for child in stmt.statements:
            deepest = max(deepest, max_depth(child, depth))
        return deepest

    if isinstance(stmt, LOOP_TYPES):
        return max(depth, max_depth(loop_body(stmt), depth + 1))

    return depth


def method_depth(body: Optional[Sequence[Statement]]) -> int:
    """Maximum loop depth of a method body; 0 when it has no loops."""
    return max((max_depth(stmt, 0) for stmt in body or ()), default=0)


class NestingAnalyzer:
    id: str = "nesting"
    version: str = "1.0.0"

    def analyze(self, method: MethodUnit) -> int:
        return method_depth(method.body)
