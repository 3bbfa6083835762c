"""Source units: what a tree provider hands to the analyzers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from method_audit.model import Language
from method_audit.model.tree import Statement


@dataclass(frozen=True, slots=True)
class NumericLiteral:
    """A numeric literal the provider did not exempt from the magic-number scan."""

    line: int
    text: str
    value: Union[int, float, None] = None


@dataclass(frozen=True, slots=True)
class StringLiteral:
    line: int
    value: str


@dataclass(frozen=True, slots=True)
class Comment:
    line: int
    text: str
    line_count: int = 1


@dataclass(frozen=True, slots=True)
class MethodUnit:
    """One discovered method.

    ``body`` is ``None`` for abstract, interface or partial declarations;
    analyzers treat such methods as vacuous rather than as errors.
    """

    name: str
    parameter_count: int = 0
    body: Optional[tuple[Statement, ...]] = None
    line: int = 1
    end_line: int = 1
    numeric_literals: tuple[NumericLiteral, ...] = ()

    @property
    def line_count(self) -> int:
        return self.end_line - self.line + 1


@dataclass(frozen=True, slots=True)
class SourceUnit:
    path: str
    language: Language
    line_count: int = 0
    methods: tuple[MethodUnit, ...] = ()
    class_count: int = 0
    property_count: int = 0
    field_count: int = 0
    comments: tuple[Comment, ...] = ()
    string_literals: tuple[StringLiteral, ...] = ()
