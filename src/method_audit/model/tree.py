"""Statement tree: the immutable input every structural analyzer walks.

Tree providers (``method_audit.frontends``) lower a parsed file into these
nodes.  The set of statement forms is closed: analyzers dispatch on the
concrete class and treat anything they do not special-case as ``Other``.

Every node carries the 1-based line its source span starts on.  Nodes whose
own expressions (conditions, operands, initialisers) contain short-circuit
operators record how many in ``logic_ops``; operators inside nested
statements belong to those nested nodes, so a full walk counts each once.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union


@dataclass(frozen=True, slots=True)
class Block:
    """Braced statement list; introduces no control flow of its own."""

    line: int
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class If:
    line: int
    then: Optional[Statement] = None
    orelse: Optional[Statement] = None
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class While:
    line: int
    body: Optional[Statement] = None
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class For:
    """C-style ``for (init; cond; step)`` loop."""

    line: int
    body: Optional[Statement] = None
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class ForEach:
    line: int
    body: Optional[Statement] = None
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class DoWhile:
    line: int
    body: Optional[Statement] = None
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class SwitchLabel:
    line: int
    is_default: bool = False


@dataclass(frozen=True, slots=True)
class SwitchSection:
    """One group of labels sharing a statement list."""

    labels: tuple[SwitchLabel, ...] = ()
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True, slots=True)
class Switch:
    line: int
    sections: tuple[SwitchSection, ...] = ()
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class Return:
    line: int
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class Throw:
    line: int
    logic_ops: int = 0


@dataclass(frozen=True, slots=True)
class Break:
    line: int


@dataclass(frozen=True, slots=True)
class Continue:
    line: int


@dataclass(frozen=True, slots=True)
class Other:
    """Any statement form without special control-flow meaning.

    ``kind`` is the provider's own tag (``"expression"``, ``"try"``, ...).
    ``children`` holds nested statements (e.g. try/catch bodies) so that
    full-subtree scans still see them.
    """

    line: int
    kind: str = ""
    children: tuple[Statement, ...] = ()
    logic_ops: int = 0


Statement = Union[
    Block,
    If,
    While,
    For,
    ForEach,
    DoWhile,
    Switch,
    Return,
    Throw,
    Break,
    Continue,
    Other,
]

LOOP_TYPES = (While, For, ForEach, DoWhile)


def loop_body(node: Statement) -> Optional[Statement]:
    """Return the body of a loop node, ``None`` for anything else."""
    if isinstance(node, LOOP_TYPES):
        return node.body
    return None


def child_statements(node: Statement) -> tuple[Statement, ...]:
    """Direct child statements of *node*, in source order."""
    if isinstance(node, Block):
        return node.statements
    if isinstance(node, If):
        return tuple(s for s in (node.then, node.orelse) if s is not None)
    if isinstance(node, LOOP_TYPES):
        return (node.body,) if node.body is not None else ()
    if isinstance(node, Switch):
        return tuple(s for section in node.sections for s in section.statements)
    if isinstance(node, Other):
        return node.children
    return ()


def walk(node: Statement) -> Iterator[Statement]:
    """Yield *node* and every nested statement, pre-order.

    Mirrors ``ast.walk`` but keeps source order, which the reports rely on.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(child_statements(current)))


def walk_body(body: Optional[tuple[Statement, ...]]) -> Iterator[Statement]:
    """``walk`` over every top-level statement of a method body."""
    for stmt in body or ():
        yield from walk(stmt)
