"""Literal scans: magic numbers per method, duplicate strings per file."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from method_audit.model.source import MethodUnit, SourceUnit

# Integers too common to be worth naming (loop starts, flags, increments).
_ALLOWED_INTEGERS = frozenset({0, 1})

# A string literal is a duplicate once it appears more than this many times.
DUPLICATE_STRING_LIMIT = 2


@dataclass(frozen=True, slots=True)
class MagicNumber:
    line: int
    text: str

    def to_dict(self) -> dict:
        return {"line": self.line, "value": self.text}


def magic_numbers(method: MethodUnit) -> list[MagicNumber]:
    """Numeric literals in *method* that should be named constants.

    The tree provider has already dropped literals in exempt positions
    (const declarations, variable initialisers, parameters, case labels,
    enum members, attribute arguments).
    """
    found: list[MagicNumber] = []
    for literal in method.numeric_literals:
        if isinstance(literal.value, int) and literal.value in _ALLOWED_INTEGERS:
            continue
        found.append(MagicNumber(literal.line, literal.text))
    return found


def duplicate_strings(unit: SourceUnit) -> dict[str, int]:
    """Non-blank string values used more than ``DUPLICATE_STRING_LIMIT`` times."""
    counts = Counter(
        lit.value for lit in unit.string_literals if lit.value and not lit.value.isspace()
    )
    return {
        text: n
        for text, n in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        if n > DUPLICATE_STRING_LIMIT
    }
