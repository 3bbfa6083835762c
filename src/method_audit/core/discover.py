"""File discovery: find analysable source files under a directory."""

from __future__ import annotations

from pathlib import Path

from method_audit.frontends import SUFFIX_LANGUAGES

# Directory basenames never descended into.
_DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        ".github",
        ".hg",
        ".svn",
        ".vs",
        ".idea",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        "bin",
        "obj",
        "dist",
        "build",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
    }
)

DEFAULT_SUFFIXES: tuple[str, ...] = tuple(SUFFIX_LANGUAGES)


def discover_source_files(
    root: Path,
    *,
    suffixes: tuple[str, ...] | None = None,
    exclude: list[str] | None = None,
) -> list[Path]:
    """Recursively find source files under *root*.

    Parameters
    ----------
    root:
        Directory to scan.
    suffixes:
        File suffixes to include.  Default: every suffix a tree provider
        exists for (``.cs``, ``.py``).
    exclude:
        Directory basenames to skip.  Merged with built-in defaults.

    Returns
    -------
    Sorted list of absolute ``Path`` objects.
    """
    skip = _DEFAULT_EXCLUDES | set(exclude or [])
    wanted = {s.lower() for s in (suffixes or DEFAULT_SUFFIXES)}

    results: list[Path] = []
    for p in root.rglob("*"):
        if p.suffix.lower() not in wanted:
            continue
        # Skip any path whose parents include an excluded directory.
        if any(part in skip for part in p.relative_to(root).parts[:-1]):
            continue
        if p.is_file():
            results.append(p.resolve())

    return sorted(set(results))
