"""Tests for the loop nesting-depth analyzer."""

from __future__ import annotations

from method_audit.analyzers.nesting import NestingAnalyzer, max_depth, method_depth
from method_audit.model.source import MethodUnit
from method_audit.model.tree import (
    Block,
    DoWhile,
    For,
    ForEach,
    If,
    Other,
    Return,
    While,
)


def loop_chain(depth: int, line: int = 2):
    """``for { for { ... } }`` nested *depth* times."""
    node = Block(line + depth, ())
    for i in reversed(range(depth)):
        node = For(line + i, body=Block(line + i, (node,)))
    return node


class TestMethodDepth:
    """method_depth returns the deepest loop level of a body."""

    def test_no_loops_is_zero(self) -> None:
        assert method_depth((Return(2),)) == 0

    def test_empty_and_absent_bodies(self) -> None:
        assert method_depth(()) == 0
        assert method_depth(None) == 0
        assert NestingAnalyzer().analyze(MethodUnit("M", body=None)) == 0

    def test_single_loop_is_one(self) -> None:
        assert method_depth((While(2, body=Block(2, (Return(3),))),)) == 1

    def test_triple_nested_for_is_three(self) -> None:
        assert method_depth((loop_chain(3),)) == 3

    def test_siblings_take_max(self) -> None:
        body = (loop_chain(1), loop_chain(2, line=10), loop_chain(1, line=20))
        assert method_depth(body) == 2

    def test_mixed_loop_kinds(self) -> None:
        inner = DoWhile(4, body=Block(4, ()))
        middle = ForEach(3, body=inner)
        outer = While(2, body=Block(2, (middle,)))
        assert method_depth((outer,)) == 3

    def test_loop_without_body_counts(self) -> None:
        """A loop with no body still records its own level."""
        assert method_depth((For(2, body=None),)) == 1

    def test_bare_block_is_transparent(self) -> None:
        assert method_depth((Block(2, (Block(3, (loop_chain(2, line=4),)),)),)) == 2


class TestLeafStatements:
    """Anything other than a block or loop stops the descent."""

    def test_loop_under_if_not_counted(self) -> None:
        guarded = If(2, then=Block(2, (loop_chain(2, line=3),)))
        assert method_depth((guarded,)) == 0

    def test_loop_under_if_inside_loop(self) -> None:
        inner_if = If(3, then=Block(3, (loop_chain(2, line=4),)))
        outer = For(2, body=Block(2, (inner_if,)))
        assert method_depth((outer,)) == 1

    def test_loop_under_try_not_counted(self) -> None:
        try_stmt = Other(2, "try", children=(Block(2, (loop_chain(1, line=3),)),))
        assert method_depth((try_stmt,)) == 0

    def test_max_depth_leaf_returns_current(self) -> None:
        assert max_depth(Return(1), 4) == 4
        assert max_depth(None, 2) == 2
