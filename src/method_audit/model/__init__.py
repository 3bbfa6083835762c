"""Enums shared across the analyzers, policy and report layers."""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Source languages a tree provider exists for."""

    CSHARP = "csharp"
    PYTHON = "python"


class Check(str, Enum):
    """Selectable checks, one per analyzer or scan."""

    DEAD_CODE = "dead-code"
    DEPTH = "depth"
    COMPLEXITY = "complexity"
    LENGTH = "length"
    PARAMS = "params"
    MAGIC = "magic"
    PENDING = "pending"
    DUPLICATES = "duplicates"
    FILE_STATS = "file-stats"
    NAMES = "names"


ALL_CHECKS: frozenset[Check] = frozenset(Check)


class ComplexityBand(str, Enum):
    """Severity band derived from a complexity total."""

    EASY = "easy"
    MODERATE = "moderate"
    COMPLEX = "complex"
    CRITICAL = "critical"


class NestingBand(str, Enum):
    OK = "ok"
    RESTRUCTURE = "restructure"


class ParameterBand(str, Enum):
    OK = "ok"
    MODERATE = "moderate"
    HIGH = "high"
    EXCESSIVE = "excessive"
