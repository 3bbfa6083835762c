"""Reachability analyzer: detects statements that can never execute.

A statement is unreachable when an earlier statement of the same sequence is
guaranteed to end it.  The walk is a single recursive descent; each call
returns a ``TerminationResult`` and the caller merges the warning lines, so
no state outlives one method.

Termination rules:
  return / throw          always terminate
  break                   terminates only when NOT inside a loop or switch
  continue                terminates only when NOT inside a loop
  if                      terminates when both branches do (no else: never)
  while/do/for/foreach    never; the body is still checked on its own
  switch                  terminates when every section does (vacuously when empty)
  bare block              never; its contents are still checked
  anything else           never

The break/continue rule is inverted from what a compiler would do: a jump
that does leave a loop or switch does NOT end the local sequence, while a
stray jump outside any target does.  Statements following a well-placed
``break`` are therefore not reported.  This matches the historical behaviour
of the tool and downstream baselines depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Optional, Sequence

from method_audit.model.source import MethodUnit
from method_audit.model.tree import (
    LOOP_TYPES,
    Block,
    Break,
    Continue,
    If,
    Other,
    Return,
    Statement,
    Switch,
    Throw,
)


class Scope(IntFlag):
    """Enclosing jump targets at the current point of the walk."""

    NONE = 0
    LOOP = 1
    SWITCH = 2


@dataclass(frozen=True, slots=True)
class TerminationResult:
    terminated: bool
    warnings: tuple[int, ...] = ()


def _as_sequence(stmt: Optional[Statement]) -> tuple[Statement, ...]:
    """A branch or loop body as a statement sequence (absent → empty)."""
    if stmt is None:
        return ()
    if isinstance(stmt, Block):
        return stmt.statements
    return (stmt,)


def analyze_sequence(
    statements: Optional[Sequence[Statement]],
    scope: Scope = Scope.NONE,
) -> TerminationResult:
    """Walk *statements* in order, reporting every one after a terminator."""
    terminated = False
    warnings: list[int] = []
    for stmt in statements or ():
        if terminated:
            # Dead statements are reported once each; their insides are not walked.
            warnings.append(stmt.line)
            continue
        result = analyze_statement(stmt, scope)
        warnings.extend(result.warnings)
        terminated = result.terminated
    return TerminationResult(terminated, tuple(warnings))


def analyze_statement(stmt: Statement, scope: Scope = Scope.NONE) -> TerminationResult:
    """Termination of a single statement plus any dead code found inside it."""
    if isinstance(stmt, (Return, Throw)):
        return TerminationResult(True)

    if isinstance(stmt, Break):
        return TerminationResult(not scope & (Scope.LOOP | Scope.SWITCH))

    if isinstance(stmt, Continue):
        return TerminationResult(not scope & Scope.LOOP)

    if isinstance(stmt, Block):
        # Inspected for dead code, but a bare block never terminates.
        inner = analyze_sequence(stmt.statements, scope)
        return TerminationResult(False, inner.warnings)

    if isinstance(stmt, If):
        then = analyze_sequence(_as_sequence(stmt.then), scope)
        if stmt.orelse is None:
            return TerminationResult(False, then.warnings)
        orelse = analyze_sequence(_as_sequence(stmt.orelse), scope)
        return TerminationResult(
            then.terminated and orelse.terminated,
            then.warnings + orelse.warnings,
        )

    if isinstance(stmt, LOOP_TYPES):
        # A loop may run zero times or exit early; only its body is inspected.
        inner = analyze_sequence(_as_sequence(stmt.body), scope | Scope.LOOP)
        return TerminationResult(False, inner.warnings)

    if isinstance(stmt, Switch):
        warnings: list[int] = []
        every_section = True
        for section in stmt.sections:
            result = analyze_sequence(section.statements, scope | Scope.SWITCH)
            warnings.extend(result.warnings)
            every_section = every_section and result.terminated
        return TerminationResult(every_section, tuple(warnings))

    if isinstance(stmt, Other):
        warnings = []
        for child in stmt.children:
            warnings.extend(analyze_sequence(_as_sequence(child), scope).warnings)
        return TerminationResult(False, tuple(warnings))

    return TerminationResult(False)


def unreachable_lines(body: Optional[Sequence[Statement]]) -> list[int]:
    """Lines of every unreachable statement in *body*, in source order."""
    return list(analyze_sequence(body).warnings)


class ReachabilityAnalyzer:
    """Finds statements after a guaranteed terminator."""

    id: str = "dead_code"
    version: str = "1.0.0"

    def analyze(self, method: MethodUnit) -> list[int]:
        return unreachable_lines(method.body)
