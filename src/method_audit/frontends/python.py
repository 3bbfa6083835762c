"""Python tree provider: lowers the standard-library ``ast`` into statement nodes.

Lowering rules:

    if / elif            If (an ``elif`` is the nested If in ``orelse``)
    while                While, then a Block for any ``else`` clause
    for / async for      ForEach, then a Block for any ``else`` clause
    match                Switch; ``case _:`` without a guard is the default label
    with / async with    Block
    try                  Other("try") with one child Block per clause
    raise                Throw
    nested def / class   Other, opaque (each nested def is its own MethodUnit)

Every ``def`` / ``async def`` becomes a ``MethodUnit`` except property
accessors, which are counted as properties instead.
"""

from __future__ import annotations

import ast
import io
import logging
import tokenize
from typing import Optional

from method_audit.frontends.errors import InvalidSourceError
from method_audit.model import Language
from method_audit.model.source import (
    Comment,
    MethodUnit,
    NumericLiteral,
    SourceUnit,
    StringLiteral,
)
from method_audit.model.tree import (
    Block,
    Break,
    Continue,
    ForEach,
    If,
    Other,
    Return,
    Statement,
    Switch,
    SwitchLabel,
    SwitchSection,
    Throw,
    While,
)

_logger = logging.getLogger(__name__)

_FUNCTION_TYPES = (ast.FunctionDef, ast.AsyncFunctionDef)
_OPAQUE_TYPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)
# ``except*`` only exists from 3.11 on.
_TRY_TYPES = tuple(t for t in (ast.Try, getattr(ast, "TryStar", None)) if t is not None)

_PROPERTY_DECORATORS = frozenset({"property", "cached_property"})
_ACCESSOR_ATTRS = frozenset({"setter", "getter", "deleter"})
_BOUND_FIRST_ARGS = frozenset({"self", "cls"})


# ── statements ───────────────────────────────────────────────────────


def _bool_ops(node: Optional[ast.AST]) -> int:
    """Short-circuit operators inside *node*; ``a and b and c`` counts two."""
    if node is None:
        return 0
    return sum(len(n.values) - 1 for n in ast.walk(node) if isinstance(n, ast.BoolOp))


def _lower_body(stmts: list[ast.stmt]) -> tuple[Statement, ...]:
    lowered: list[Statement] = []
    for stmt in stmts:
        lowered.extend(_lower(stmt))
    return tuple(lowered)


def _block(stmts: list[ast.stmt], line: int) -> Block:
    return Block(stmts[0].lineno if stmts else line, _lower_body(stmts))


def _is_wildcard(case: ast.match_case) -> bool:
    pattern = case.pattern
    return (
        case.guard is None
        and isinstance(pattern, ast.MatchAs)
        and pattern.pattern is None
        and pattern.name is None
    )


def _lower(node: ast.stmt) -> tuple[Statement, ...]:
    line = node.lineno

    if isinstance(node, ast.If):
        orelse: Optional[Statement] = None
        if len(node.orelse) == 1 and isinstance(node.orelse[0], ast.If):
            orelse = _lower(node.orelse[0])[0]
        elif node.orelse:
            orelse = _block(node.orelse, line)
        return (If(line, _block(node.body, line), orelse, _bool_ops(node.test)),)

    if isinstance(node, (ast.While, ast.For, ast.AsyncFor)):
        if isinstance(node, ast.While):
            loop: Statement = While(line, _block(node.body, line), _bool_ops(node.test))
        else:
            loop = ForEach(line, _block(node.body, line), _bool_ops(node.iter))
        if node.orelse:
            return (loop, _block(node.orelse, line))
        return (loop,)

    if isinstance(node, (ast.With, ast.AsyncWith)):
        return (Block(line, _lower_body(node.body)),)

    if isinstance(node, _TRY_TYPES):
        children = [_block(node.body, line)]
        children.extend(_block(h.body, h.lineno) for h in node.handlers)
        if node.orelse:
            children.append(_block(node.orelse, line))
        if node.finalbody:
            children.append(_block(node.finalbody, line))
        return (Other(line, "try", tuple(children)),)

    if isinstance(node, ast.Match):
        sections = tuple(
            SwitchSection(
                labels=(SwitchLabel(case.pattern.lineno, _is_wildcard(case)),),
                statements=_lower_body(case.body),
            )
            for case in node.cases
        )
        logic = _bool_ops(node.subject) + sum(_bool_ops(c.guard) for c in node.cases)
        return (Switch(line, sections, logic),)

    if isinstance(node, ast.Return):
        return (Return(line, _bool_ops(node.value)),)
    if isinstance(node, ast.Raise):
        return (Throw(line, _bool_ops(node.exc)),)
    if isinstance(node, ast.Break):
        return (Break(line),)
    if isinstance(node, ast.Continue):
        return (Continue(line),)
    if isinstance(node, _FUNCTION_TYPES):
        return (Other(line, "def"),)
    if isinstance(node, ast.ClassDef):
        return (Other(line, "class"),)

    return (Other(line, type(node).__name__.lower(), logic_ops=_bool_ops(node)),)


# ── per-method facts ─────────────────────────────────────────────────


def _accessor_kind(node: ast.AST) -> Optional[str]:
    """``"property"`` for a getter, ``"accessor"`` for setter/deleter, else None."""
    for dec in getattr(node, "decorator_list", ()):
        if isinstance(dec, ast.Name) and dec.id in _PROPERTY_DECORATORS:
            return "property"
        if isinstance(dec, ast.Attribute):
            if dec.attr in _PROPERTY_DECORATORS:
                return "property"
            if dec.attr in _ACCESSOR_ATTRS:
                return "accessor"
    return None


def _parameter_count(node: ast.AST, in_class: bool) -> int:
    args = node.args
    positional = [*args.posonlyargs, *args.args]
    count = len(positional) + len(args.kwonlyargs)
    count += (args.vararg is not None) + (args.kwarg is not None)
    if in_class and positional and positional[0].arg in _BOUND_FIRST_ARGS:
        count -= 1
    return count


def _is_number(node: ast.AST) -> bool:
    return (
        isinstance(node, ast.Constant)
        and isinstance(node.value, (int, float, complex))
        and not isinstance(node.value, bool)
    )


def _initialises_names(node: ast.AST) -> bool:
    """True for ``x = ...`` / ``x: int = ...``: the value already has a name."""
    if isinstance(node, ast.Assign):
        targets = node.targets
    elif isinstance(node, ast.AnnAssign):
        targets = [node.target]
    else:
        return False
    return all(isinstance(t, ast.Name) for t in targets)


def _numeric_literals(func: ast.AST, source: str) -> tuple[NumericLiteral, ...]:
    """Magic-number candidates in *func*'s body.

    Nested functions and classes are skipped (they are scanned on their own),
    as are named initialisers, lambda defaults and ``case`` patterns.
    """
    found: list[NumericLiteral] = []
    stack: list[ast.AST] = list(reversed(func.body))
    while stack:
        current = stack.pop()
        if isinstance(current, (*_OPAQUE_TYPES, ast.arguments)):
            continue
        if _initialises_names(current):
            continue
        if isinstance(current, ast.match_case):
            children: list[ast.AST] = [current.guard] if current.guard is not None else []
            children.extend(current.body)
        else:
            if _is_number(current):
                value = current.value if not isinstance(current.value, complex) else None
                text = ast.get_source_segment(source, current) or repr(current.value)
                found.append(NumericLiteral(current.lineno, text, value))
            children = list(ast.iter_child_nodes(current))
        stack.extend(reversed(children))
    return tuple(found)


# ── file-level collection ────────────────────────────────────────────


def _docstring_ids(tree: ast.Module) -> set[int]:
    ids: set[int] = set()
    for node in ast.walk(tree):
        if isinstance(node, (ast.Module, *_OPAQUE_TYPES)) and node.body:
            first = node.body[0]
            if (
                isinstance(first, ast.Expr)
                and isinstance(first.value, ast.Constant)
                and isinstance(first.value.value, str)
            ):
                ids.add(id(first.value))
    return ids


class _UnitCollector(ast.NodeVisitor):
    """Single pass over the module collecting methods, counts and strings."""

    def __init__(self, source: str, tree: ast.Module) -> None:
        self.source = source
        self.methods: list[MethodUnit] = []
        self.strings: list[StringLiteral] = []
        self.class_count = 0
        self.property_count = 0
        self.field_count = 0
        self._scopes: list[ast.AST] = []
        self._docstrings = _docstring_ids(tree)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        self.class_count += 1
        self.field_count += sum(
            1 for stmt in node.body if isinstance(stmt, (ast.Assign, ast.AnnAssign))
        )
        self._scopes.append(node)
        self.generic_visit(node)
        self._scopes.pop()

    def visit_FunctionDef(self, node: ast.AST) -> None:
        in_class = bool(self._scopes) and isinstance(self._scopes[-1], ast.ClassDef)
        kind = _accessor_kind(node) if in_class else None
        if kind == "property":
            self.property_count += 1
        if kind is None:
            self.methods.append(
                MethodUnit(
                    name=node.name,
                    parameter_count=_parameter_count(node, in_class),
                    body=_lower_body(node.body),
                    line=node.lineno,
                    end_line=node.end_lineno or node.lineno,
                    numeric_literals=_numeric_literals(node, self.source),
                )
            )
        self._scopes.append(node)
        self.generic_visit(node)
        self._scopes.pop()

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Constant(self, node: ast.Constant) -> None:
        if isinstance(node.value, str) and id(node) not in self._docstrings:
            self.strings.append(StringLiteral(node.lineno, node.value))

    def visit_JoinedStr(self, node: ast.JoinedStr) -> None:
        # f-string fragments are not literals of their own.
        for value in node.values:
            if isinstance(value, ast.FormattedValue):
                self.visit(value)


def _comments(text: str, path: str) -> list[Comment]:
    comments: list[Comment] = []
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type == tokenize.COMMENT:
                comments.append(Comment(tok.start[0], tok.string))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise InvalidSourceError(path, str(exc)) from exc
    return comments


def parse(text: str, path: str = "<source>") -> SourceUnit:
    """Parse Python *text* into a ``SourceUnit``.

    Raises ``InvalidSourceError`` when the text is not valid Python.
    """
    try:
        tree = ast.parse(text, filename=path)
    except SyntaxError as exc:
        raise InvalidSourceError(path, f"line {exc.lineno}: {exc.msg}") from exc
    except ValueError as exc:
        # e.g. source containing null bytes
        raise InvalidSourceError(path, str(exc)) from exc

    collector = _UnitCollector(text, tree)
    collector.visit(tree)
    _logger.debug("%s: %d methods", path, len(collector.methods))
    return SourceUnit(
        path=path,
        language=Language.PYTHON,
        line_count=len(text.splitlines()),
        methods=tuple(collector.methods),
        class_count=collector.class_count,
        property_count=collector.property_count,
        field_count=collector.field_count,
        comments=tuple(_comments(text, path)),
        string_literals=tuple(collector.strings),
    )
