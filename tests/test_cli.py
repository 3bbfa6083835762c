"""CLI tests: argument routing, output modes and the exit-code contract.

Exit codes:
  0  no unreachable code and no critical method
  1  violations found (or ``validate`` found a schema violation)
  2  usage error, missing path, invalid source or config
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from method_audit import __version__
from method_audit.__main__ import main

FIXTURES = Path(__file__).resolve().parent / "fixtures"
BILLING = FIXTURES / "sources" / "Billing.cs"
INVENTORY = FIXTURES / "sources" / "inventory.py"
MIXED_PROJECT = FIXTURES / "projects" / "mixed_project"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    """Keep the caller's config and deterministic flags out of the tests."""
    monkeypatch.delenv("METHOD_AUDIT_CONFIG", raising=False)
    monkeypatch.delenv("METHOD_AUDIT_DETERMINISTIC", raising=False)
    monkeypatch.chdir(tmp_path)


# ── analysis (default positional mode) ──────────────────────────────


class TestAnalyze:
    def test_clean_file_exits_zero(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("COLUMNS", "200")
        assert main([str(INVENTORY)]) == 0
        out = capsys.readouterr().out
        assert "restock" in out
        assert "Summary" in out
        assert "files: 1" in out

    def test_violation_exits_one(self) -> None:
        pytest.importorskip("tree_sitter_c_sharp")
        assert main([str(BILLING), "--json"]) == 1

    def test_json_output(self, capsys) -> None:
        assert main([str(INVENTORY), "--json", "--ci"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["schema_version"] == "method_audit_report_v1"
        assert data["run"]["created_at"] == "2000-01-01T00:00:00+00:00"
        assert data["run"]["run_id"].startswith("ci-")
        methods = data["files"][0]["methods"]
        assert methods["restock"]["complexity"]["total"] == 4

    def test_checks_flag_limits_output(self, capsys) -> None:
        assert main([str(INVENTORY), "--json", "--checks", "depth"]) == 0
        data = json.loads(capsys.readouterr().out)
        method = data["files"][0]["methods"]["restock"]
        assert set(method) == {"name", "line", "nesting"}
        assert data["run"]["config"]["checks"] == ["depth"]

    def test_flags_before_path(self, capsys) -> None:
        assert main(["--checks", "complexity", str(INVENTORY), "--json"]) == 0
        assert json.loads(capsys.readouterr().out)["run"]["config"]["checks"] == ["complexity"]

    def test_unknown_check_exits_two(self, capsys) -> None:
        assert main([str(INVENTORY), "--checks", "speed"]) == 2
        assert "unknown check" in capsys.readouterr().err

    def test_missing_path_exits_two(self, capsys, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing")]) == 2
        assert "does not exist" in capsys.readouterr().err

    def test_invalid_single_file_exits_two(self, capsys) -> None:
        assert main([str(MIXED_PROJECT / "broken.py")]) == 2
        assert "invalid source" in capsys.readouterr().err

    def test_unsupported_suffix_exits_two(self, capsys, tmp_path: Path) -> None:
        target = tmp_path / "notes.txt"
        target.write_text("hello", encoding="utf-8")
        assert main([str(target)]) == 2
        assert "unsupported language" in capsys.readouterr().err

    def test_out_writes_report(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "reports" / "r.json"
        assert main([str(INVENTORY), "--out", str(out), "--ci"]) == 0
        assert json.loads(out.read_text(encoding="utf-8"))["summary"]["files_analyzed"] == 1

    def test_config_file_thresholds(self, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "strict.yaml"
        cfg.write_text("method_length: 2\n", encoding="utf-8")
        assert main([str(INVENTORY), "--json", "--config", str(cfg)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["run"]["config"]["thresholds"]["method_length"] == 2
        assert data["files"][0]["methods"]["restock"]["too_long"] is True

    def test_bad_config_exits_two(self, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("nesting_depth: deep\n", encoding="utf-8")
        assert main([str(INVENTORY), "--config", str(cfg)]) == 2
        assert "non-negative integer" in capsys.readouterr().err

    def test_directory_with_bad_file_still_reports(self, capsys) -> None:
        pytest.importorskip("tree_sitter_c_sharp")
        assert main([str(MIXED_PROJECT), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["files_failed"] == 1
        assert [e["path"] for e in data["errors"]] == ["broken.py"]

    def test_deterministic_env(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("METHOD_AUDIT_DETERMINISTIC", "1")
        assert main([str(INVENTORY), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["run"]["created_at"] == "2000-01-01T00:00:00+00:00"


# ── subcommands ─────────────────────────────────────────────────────


class TestInitConfig:
    def test_writes_default(self, tmp_path: Path, capsys) -> None:
        assert main(["init-config"]) == 0
        assert (tmp_path / "method_audit.yaml").is_file()
        assert "wrote" in capsys.readouterr().out

    def test_refuses_existing_without_force(self, tmp_path: Path, capsys) -> None:
        target = tmp_path / "cfg.yaml"
        target.write_text("{}", encoding="utf-8")
        assert main(["init-config", "--path", str(target)]) == 2
        assert "--force" in capsys.readouterr().err
        assert main(["init-config", "--path", str(target), "--force"]) == 0

    def test_written_config_is_picked_up(self, tmp_path: Path, capsys) -> None:
        assert main(["init-config"]) == 0
        capsys.readouterr()
        assert main([str(INVENTORY), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["run"]["config"]["thresholds"] == {"method_length": 15, "nesting_depth": 3}


class TestValidate:
    def test_valid_report(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "r.json"
        assert main([str(INVENTORY), "--out", str(out), "--json"]) == 0
        capsys.readouterr()
        assert main(["validate", str(out)]) == 0
        assert capsys.readouterr().out.strip() == "OK"

    def test_schema_violation_exits_one(self, tmp_path: Path, capsys) -> None:
        out = tmp_path / "r.json"
        assert main([str(INVENTORY), "--out", str(out), "--json"]) == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        del data["summary"]
        out.write_text(json.dumps(data), encoding="utf-8")
        capsys.readouterr()
        assert main(["validate", str(out)]) == 1
        assert capsys.readouterr().err.startswith("FAIL:")

    def test_missing_file_exits_two(self, tmp_path: Path, capsys) -> None:
        assert main(["validate", str(tmp_path / "none.json")]) == 2
        assert capsys.readouterr().err.startswith("ERROR:")


class TestUsage:
    def test_no_arguments(self, capsys) -> None:
        assert main([]) == 2
        assert "provide a path" in capsys.readouterr().err

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_copied_tree_keeps_relative_paths(self, tmp_path: Path, capsys) -> None:
        work = tmp_path / "repo"
        shutil.copytree(MIXED_PROJECT / "tools", work / "tools")
        assert main([str(work), "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [f["path"] for f in data["files"]] == ["tools/report.py"]
