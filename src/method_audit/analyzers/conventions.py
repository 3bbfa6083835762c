"""Per-method convention scans: length, parameter count, generic names."""

from __future__ import annotations

from method_audit.model import Language
from method_audit.model.source import MethodUnit

# Names that say nothing about what the method does.
GENERIC_METHOD_NAMES: frozenset[str] = frozenset(
    {
        "DoStuff",
        "HandleIt",
        "ProcessData",
        "Execute",
        "Run",
        "PerformAction",
        "Manage",
        "Operate",
        "Work",
        "Handle",
        "Process",
        "Action",
        "ExecuteTask",
        "Perform",
        "Start",
        "Stop",
        "Init",
        "Setup",
        "Update",
        "Calculate",
    }
)

_FOLDED_GENERIC_NAMES = frozenset(n.lower() for n in GENERIC_METHOD_NAMES)


def method_length(method: MethodUnit) -> int:
    """Lines spanned by the declaration, signature to closing brace."""
    return method.line_count


def parameter_count(method: MethodUnit) -> int:
    return method.parameter_count


def is_generic_name(name: str, language: Language = Language.CSHARP) -> bool:
    """True when *name* is on the generic-name blacklist.

    C# names match exactly.  Python names are folded (underscores dropped,
    lower-cased) so ``do_stuff`` matches ``DoStuff``; dunder methods never
    match.
    """
    if language == Language.PYTHON:
        if name.startswith("__") and name.endswith("__"):
            return False
        return name.replace("_", "").lower() in _FOLDED_GENERIC_NAMES
    return name in GENERIC_METHOD_NAMES
