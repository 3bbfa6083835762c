"""Tests for method_audit.api: programmatic engine entrypoints.

Validates the public API surface that backends/services use
without CLI coupling.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from method_audit import analyze_file, analyze_path, analyze_source, validate_instance
from method_audit.core.config import Thresholds
from method_audit.frontends import InvalidSourceError, UnsupportedLanguageError
from method_audit.model import Language

FIXTURES = Path(__file__).resolve().parent / "fixtures"
INVENTORY = FIXTURES / "sources" / "inventory.py"
MIXED_PROJECT = FIXTURES / "projects" / "mixed_project"


# ── analyze_source ──────────────────────────────────────────────────


class TestAnalyzeSource:
    """analyze_source parses in-memory text and runs the checks."""

    def test_python_source(self) -> None:
        report = analyze_source("def f():\n    return 1\n    f()\n", "python", filename="f.py")
        assert report.path == "f.py"
        assert report.language == Language.PYTHON
        assert report.methods[0].unreachable_lines == (3,)

    def test_language_enum_accepted(self) -> None:
        report = analyze_source("def f():\n    pass\n", Language.PYTHON)
        assert report.methods[0].name == "f"

    def test_checks_and_thresholds(self) -> None:
        report = analyze_source(
            "def f():\n    for a in b:\n        for c in a:\n            pass\n",
            "python",
            checks=["depth"],
            thresholds=Thresholds(nesting_depth=2),
        )
        method = report.methods[0]
        assert method.nesting_depth == 2
        assert method.nesting_band.value == "restructure"
        assert method.complexity is None

    def test_unsupported_language(self) -> None:
        with pytest.raises(UnsupportedLanguageError):
            analyze_source("x", "cobol")

    def test_invalid_source(self) -> None:
        with pytest.raises(InvalidSourceError):
            analyze_source("def (:", "python")

    def test_unknown_check(self) -> None:
        with pytest.raises(ValueError, match="unknown check"):
            analyze_source("x = 1\n", "python", checks=["speed"])


# ── analyze_file ────────────────────────────────────────────────────


class TestAnalyzeFile:
    def test_fixture(self) -> None:
        report = analyze_file(INVENTORY)
        assert [m.name for m in report.methods] == ["restock", "describe"]

    def test_string_path(self) -> None:
        assert analyze_file(str(INVENTORY)).language == Language.PYTHON


# ── analyze_path ────────────────────────────────────────────────────


class TestAnalyzePath:
    """analyze_path produces a schema-valid report dict."""

    def test_returns_report_and_dict(self) -> None:
        report, d = analyze_path(MIXED_PROJECT, ci_mode=True)
        assert d == report.to_dict()
        validate_instance(d)

    def test_ci_mode_fixes_timestamp(self) -> None:
        _, d = analyze_path(MIXED_PROJECT, ci_mode=True)
        assert d["run"]["created_at"] == "2000-01-01T00:00:00+00:00"
        assert d["run"]["run_id"].startswith("ci-")

    def test_deterministic_across_runs(self) -> None:
        _, a = analyze_path(MIXED_PROJECT, ci_mode=True)
        _, b = analyze_path(MIXED_PROJECT, ci_mode=True)
        assert a == b, "Two ci_mode reports must be identical"

    def test_run_id_follows_content(self, tmp_path: Path) -> None:
        target = tmp_path / "m.py"
        target.write_text("def f():\n    pass\n", encoding="utf-8")
        _, first = analyze_path(target, ci_mode=True)
        target.write_text("def g():\n    pass\n", encoding="utf-8")
        _, second = analyze_path(target, ci_mode=True)
        assert first["run"]["run_id"] != second["run"]["run_id"]

    def test_run_id_ignores_excluded_files(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "vendor").mkdir()
        (tmp_path / "src" / "m.py").write_text("def f():\n    pass\n", encoding="utf-8")
        vendored = tmp_path / "vendor" / "lib.py"
        vendored.write_text("def g():\n    pass\n", encoding="utf-8")
        _, first = analyze_path(tmp_path, ci_mode=True, exclude=["vendor"])
        vendored.write_text("def h():\n    pass\n", encoding="utf-8")
        _, second = analyze_path(tmp_path, ci_mode=True, exclude=["vendor"])
        assert first["run"]["run_id"] == second["run"]["run_id"]

    def test_non_ci_mode_uses_fresh_ids(self) -> None:
        _, a = analyze_path(INVENTORY)
        _, b = analyze_path(INVENTORY)
        assert a["run"]["run_id"] != b["run"]["run_id"]

    def test_nonexistent_root_raises(self) -> None:
        with pytest.raises(FileNotFoundError, match="does not exist"):
            analyze_path("/nonexistent/path/xyz")
