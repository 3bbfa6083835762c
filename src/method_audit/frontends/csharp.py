"""C# tree provider: lowers a tree-sitter syntax tree into statement nodes.

tree-sitter never rejects input: a file with syntax errors still yields a
tree with ``ERROR`` nodes.  Such files are analysed on a best-effort basis
and a warning is logged.

Statements without control-flow meaning (try, using, lock, checked, unsafe,
fixed, labeled, local functions, expression statements with lambda bodies)
become ``Other`` nodes whose children are the nearest nested statements.
"""

from __future__ import annotations

import functools
import logging
from typing import Iterator, Optional, Union

import tree_sitter_c_sharp
from tree_sitter import Language as TSLanguage
from tree_sitter import Node, Parser

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
    DoWhile,
    For,
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

_LOGICAL_OPERATORS = frozenset({"&&", "||"})
_NUMERIC_LITERALS = frozenset({"integer_literal", "real_literal"})
_STRING_LITERALS = frozenset(
    {"string_literal", "verbatim_string_literal", "raw_string_literal"}
)

# Older grammar releases wrap labels in their own nodes; newer ones inline
# bare ``case`` / ``default`` tokens into the section.
_CASE_LABELS = frozenset({"case_switch_label", "case_pattern_switch_label", "case"})
_DEFAULT_LABELS = frozenset({"default_switch_label", "default"})

# A numeric literal with one of these within five ancestors is not magic.
_EXEMPT_ANCESTORS = frozenset(
    {
        "enum_member_declaration",
        "enum_declaration",
        "attribute_argument",
        "parameter",
        "case_switch_label",
        "switch_section",
        "using_directive",
        "variable_declarator",
        "compilation_unit",
    }
)
_EXEMPT_DEPTH = 5

_INTEGER_SUFFIXES = "uUlL"
_REAL_SUFFIXES = "fFdDmM"


@functools.lru_cache(maxsize=None)
def _language() -> TSLanguage:
    return TSLanguage(tree_sitter_c_sharp.language())


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _is_statement(node: Node) -> bool:
    return node.is_named and (node.type == "block" or node.type.endswith("_statement"))


def _iter_descendants(node: Node) -> Iterator[Node]:
    """Every node below *node*, pre-order."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


# ── statements ───────────────────────────────────────────────────────


def _own_logic_ops(node: Node) -> int:
    """``&&`` / ``||`` tokens in *node*'s own expressions.

    Nested statements are not entered; their operators belong to them.
    """
    count = 0
    stack = list(node.children)
    while stack:
        current = stack.pop()
        if _is_statement(current):
            continue
        if current.type in _LOGICAL_OPERATORS:
            count += 1
        stack.extend(current.children)
    return count


def _nested_statements(node: Node) -> list[Node]:
    """The nearest statement nodes below *node*, in source order."""
    found: list[Node] = []
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        if _is_statement(current):
            found.append(current)
            continue
        stack.extend(reversed(current.children))
    return found


def _lower_optional(node: Optional[Node]) -> Optional[Statement]:
    return _lower(node) if node is not None else None


def _alternative(node: Node) -> Optional[Node]:
    alt = node.child_by_field_name("alternative")
    if alt is not None and alt.type == "else_clause":
        alt = next((c for c in alt.named_children if _is_statement(c)), None)
    return alt


def _switch_section(section: Node) -> SwitchSection:
    labels: list[SwitchLabel] = []
    statements: list[Statement] = []
    for child in section.children:
        if child.type in _CASE_LABELS:
            labels.append(SwitchLabel(_line(child)))
        elif child.type in _DEFAULT_LABELS:
            labels.append(SwitchLabel(_line(child), is_default=True))
        elif _is_statement(child):
            statements.append(_lower(child))
    return SwitchSection(tuple(labels), tuple(statements))


def _switch(node: Node) -> Switch:
    body = node.child_by_field_name("body")
    if body is None:
        body = next((c for c in node.named_children if c.type == "switch_body"), None)
    # Stacked labels (``case 2: case 3:``) come out of the grammar as
    # label-only sections; they belong to the next section with statements.
    sections: list[SwitchSection] = []
    pending: tuple[SwitchLabel, ...] = ()
    for child in body.named_children if body is not None else ():
        if child.type != "switch_section":
            continue
        section = _switch_section(child)
        if not section.statements:
            pending += section.labels
            continue
        sections.append(SwitchSection(pending + section.labels, section.statements))
        pending = ()
    if pending:
        sections.append(SwitchSection(pending, ()))
    return Switch(_line(node), tuple(sections), _own_logic_ops(node))


def _lower(node: Node) -> Statement:
    line = _line(node)
    kind = node.type

    if kind == "block":
        return Block(line, tuple(_lower(c) for c in node.named_children if _is_statement(c)))

    if kind == "if_statement":
        return If(
            line,
            _lower_optional(node.child_by_field_name("consequence")),
            _lower_optional(_alternative(node)),
            _own_logic_ops(node),
        )

    if kind in ("while_statement", "for_statement", "foreach_statement", "do_statement"):
        body = _lower_optional(node.child_by_field_name("body"))
        loop_type = {
            "while_statement": While,
            "for_statement": For,
            "foreach_statement": ForEach,
            "do_statement": DoWhile,
        }[kind]
        return loop_type(line, body, _own_logic_ops(node))

    if kind == "switch_statement":
        return _switch(node)

    if kind == "return_statement":
        return Return(line, _own_logic_ops(node))
    if kind == "throw_statement":
        return Throw(line, _own_logic_ops(node))
    if kind == "break_statement":
        return Break(line)
    if kind == "continue_statement":
        return Continue(line)

    return Other(
        line,
        kind.removesuffix("_statement"),
        tuple(_lower(c) for c in _nested_statements(node)),
        _own_logic_ops(node),
    )


def _method_body(node: Node) -> Optional[tuple[Statement, ...]]:
    """Lowered body; ``=> expr`` becomes a single Return, ``;`` has none."""
    body = node.child_by_field_name("body")
    if body is None:
        body = next(
            (c for c in node.named_children if c.type in ("block", "arrow_expression_clause")),
            None,
        )
    if body is None:
        return None
    if body.type == "arrow_expression_clause":
        return (Return(_line(body), _own_logic_ops(body)),)
    lowered = _lower(body)
    return lowered.statements if isinstance(lowered, Block) else (lowered,)


# ── literals ─────────────────────────────────────────────────────────


def _literal_value(node: Node) -> Union[int, float, None]:
    text = _text(node).replace("_", "")
    try:
        if node.type == "integer_literal":
            text = text.rstrip(_INTEGER_SUFFIXES)
            if text[:2].lower() == "0x":
                return int(text[2:], 16)
            if text[:2].lower() == "0b":
                return int(text[2:], 2)
            return int(text)
        return float(text.rstrip(_REAL_SUFFIXES))
    except ValueError:
        return None


def _is_exempt(node: Node) -> bool:
    ancestor = node.parent
    for _ in range(_EXEMPT_DEPTH):
        if ancestor is None:
            return False
        if ancestor.type in _EXEMPT_ANCESTORS:
            return True
        if ancestor.type in ("local_declaration_statement", "field_declaration") and any(
            c.type == "modifier" and _text(c) == "const" for c in ancestor.children
        ):
            return True
        ancestor = ancestor.parent
    return False


def _numeric_literals(node: Node) -> tuple[NumericLiteral, ...]:
    return tuple(
        NumericLiteral(_line(n), _text(n), _literal_value(n))
        for n in _iter_descendants(node)
        if n.type in _NUMERIC_LITERALS and not _is_exempt(n)
    )


def _string_value(node: Node) -> str:
    text = _text(node)
    if node.type == "verbatim_string_literal":
        return text[2:-1]
    if node.type == "raw_string_literal":
        return text.strip('"')
    return text[1:-1]


# ── file-level collection ────────────────────────────────────────────


def _parameter_count(node: Node) -> int:
    params = node.child_by_field_name("parameters")
    if params is None:
        return 0
    return sum(1 for c in params.named_children if c.type in ("parameter", "parameter_array"))


def _method(node: Node) -> MethodUnit:
    name = node.child_by_field_name("name")
    return MethodUnit(
        name=_text(name) if name is not None else "<anonymous>",
        parameter_count=_parameter_count(node),
        body=_method_body(node),
        line=_line(node),
        end_line=node.end_point[0] + 1,
        numeric_literals=_numeric_literals(node),
    )


def parse(text: str, path: str = "<source>") -> SourceUnit:
    """Parse C# *text* into a ``SourceUnit``."""
    tree = Parser(_language()).parse(text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        _logger.warning("%s: syntax errors found, analysis is best effort", path)

    methods: list[MethodUnit] = []
    comments: list[Comment] = []
    strings: list[StringLiteral] = []
    classes = properties = fields = 0
    for node in _iter_descendants(root):
        kind = node.type
        if kind == "method_declaration":
            methods.append(_method(node))
        elif kind == "class_declaration":
            classes += 1
        elif kind == "property_declaration":
            properties += 1
        elif kind == "field_declaration":
            fields += 1
        elif kind == "comment":
            comments.append(
                Comment(_line(node), _text(node), node.end_point[0] - node.start_point[0] + 1)
            )
        elif kind in _STRING_LITERALS:
            strings.append(StringLiteral(_line(node), _string_value(node)))

    _logger.debug("%s: %d methods", path, len(methods))
    return SourceUnit(
        path=path,
        language=Language.CSHARP,
        line_count=len(text.splitlines()),
        methods=tuple(methods),
        class_count=classes,
        property_count=properties,
        field_count=fields,
        comments=tuple(comments),
        string_literals=tuple(strings),
    )
