"""Centralized exit-code contract for all CLI commands.

Code  Meaning
----  -------
  0   Success: no unreachable code, no critical method
  1   Violation: unreachable code or a critical method was found
  2   Error: usage error, missing path, invalid source, schema failure
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
