"""method_audit: per-method structural analysis for C# and Python sources."""

__all__ = [
    "__version__",
    "analyze_file",
    "analyze_path",
    "analyze_source",
    "validate_instance",
]
__version__ = "0.1.0"

# Programmatic entrypoints (library use).
from method_audit.api import (  # noqa: E402, F401
    analyze_file,
    analyze_path,
    analyze_source,
)
from method_audit.contracts.load import validate_instance  # noqa: E402, F401
