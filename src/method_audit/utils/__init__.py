"""Shared utilities for method_audit."""

from method_audit.utils.exit_codes import ExitCode
from method_audit.utils.json_norm import stable_json_dump, stable_json_dumps

__all__ = [
    "ExitCode",
    "stable_json_dump",
    "stable_json_dumps",
]
