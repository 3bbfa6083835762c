"""Analyzers derive structured facts from a parsed source unit.

Structural analyzers (one method at a time, recursive over the statement
tree) expose ``id``, ``version`` and ``analyze(method)``:

    - ReachabilityAnalyzer: lines of unreachable statements
    - NestingAnalyzer: maximum loop depth
    - ComplexityAnalyzer: decision-point breakdown

The remaining modules are single-pass scans (conventions, literals,
comments, file_stats) exposed as plain functions.
"""

from __future__ import annotations

from typing import Any, Protocol

from method_audit.analyzers.complexity import ComplexityAnalyzer, ComplexityBreakdown
from method_audit.analyzers.nesting import NestingAnalyzer
from method_audit.analyzers.reachability import ReachabilityAnalyzer
from method_audit.model.source import MethodUnit


class MethodAnalyzer(Protocol):
    """Every structural analyzer must expose ``id``, ``version`` and ``analyze()``."""

    id: str
    version: str

    def analyze(self, method: MethodUnit) -> Any:
        """Analyze one method; must not mutate it."""
        ...


__all__ = [
    "ComplexityAnalyzer",
    "ComplexityBreakdown",
    "MethodAnalyzer",
    "NestingAnalyzer",
    "ReachabilityAnalyzer",
]
