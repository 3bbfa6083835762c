"""CLI entry-point for method_audit.

Usage:
    python -m method_audit <path>
    python -m method_audit <path> --json
    python -m method_audit <path> --checks dead-code,depth,complexity
    python -m method_audit <path> --out report.json --ci
    python -m method_audit validate <report.json>
    python -m method_audit init-config [--path method_audit.yaml] [--force]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import jsonschema

from method_audit import __version__
from method_audit.api import analyze_path as _api_analyze_path
from method_audit.api import deterministic_requested
from method_audit.contracts.load import validate_file
from method_audit.core.config import (
    DEFAULT_CONFIG_NAME,
    ConfigError,
    load_thresholds,
    write_default_config,
)
from method_audit.frontends import SourceError
from method_audit.model import Check
from method_audit.policy.bands import exit_code_from_reports
from method_audit.reports.console import render_report
from method_audit.utils.exit_codes import ExitCode
from method_audit.utils.json_norm import stable_json_dump, stable_json_dumps

_KNOWN_COMMANDS = {"validate", "init-config"}

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _add_analysis_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--checks",
        default=None,
        metavar="NAMES",
        help=(
            "Comma-separated checks to run (default: all). "
            f"Choose from: {', '.join(c.value for c in Check)}."
        ),
    )
    p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the JSON report to stdout instead of tables.",
    )
    p.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Also write the JSON report to this file.",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Threshold config file (default: ./{DEFAULT_CONFIG_NAME} when present).",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="DIR",
        help="Directory name to skip during discovery (repeatable).",
    )
    p.add_argument(
        "--ci",
        "--deterministic",
        dest="ci_mode",
        action="store_true",
        default=False,
        help="Enable deterministic output (stable run id and timestamp).",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Log progress at DEBUG level.",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="method-audit",
        description="Per-method structural analysis: dead code, loop depth, complexity.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    sub = p.add_subparsers(dest="command")

    # ── validate subcommand ──────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Validate a JSON report against the bundled schema.",
    )
    val_p.add_argument("instance", type=Path, help="Path to the JSON report to validate.")

    # ── init-config subcommand ───────────────────────────────────────
    init_p = sub.add_parser(
        "init-config",
        help="Write a config file holding the default thresholds.",
    )
    init_p.add_argument(
        "--path",
        type=Path,
        default=Path(DEFAULT_CONFIG_NAME),
        help=f"Where to write the file (default: ./{DEFAULT_CONFIG_NAME}).",
    )
    init_p.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite an existing file.",
    )

    p.set_defaults(command=None)
    return p


def _build_default_parser() -> argparse.ArgumentParser:
    """Parser for default positional mode.

    Argparse subparsers greedily consume the first positional token, which
    would make ``method-audit <path> --json`` treat ``<path>`` as a command.
    This parser is used when the first positional token is *not* a known
    subcommand.
    """
    p = argparse.ArgumentParser(
        prog="method-audit",
        description="Per-method structural analysis: dead code, loop depth, complexity.",
    )
    p.add_argument(
        "path",
        type=Path,
        help="Source file (.cs, .py) or directory to analyse.",
    )
    _add_analysis_arguments(p)
    p.set_defaults(command=None)
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


def _handle_validate(args: argparse.Namespace) -> int:
    # Exit code contract:
    #   1 = schema violation
    #   2 = unreadable file / not JSON / wrong schema_version
    try:
        validate_file(args.instance)
    except jsonschema.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("OK")
    return ExitCode.SUCCESS


def _handle_init_config(args: argparse.Namespace) -> int:
    try:
        path = write_default_config(args.path, overwrite=args.force)
    except ConfigError as e:
        print(f"error: {e} (use --force to overwrite)", file=sys.stderr)
        return ExitCode.ERROR
    except OSError as e:
        print(f"error: cannot write {args.path}: {e.strerror}", file=sys.stderr)
        return ExitCode.ERROR
    print(f"wrote {path}")
    return ExitCode.SUCCESS


def _handle_analyze(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    ci_mode = bool(args.ci_mode) or deterministic_requested()

    target: Path = args.path
    if not target.exists():
        print(f"error: path does not exist: {target}", file=sys.stderr)
        return ExitCode.ERROR

    try:
        thresholds = load_thresholds(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    checks = args.checks.split(",") if args.checks else None
    try:
        report, report_dict = _api_analyze_path(
            target,
            checks=checks,
            thresholds=thresholds,
            ci_mode=ci_mode,
            exclude=args.exclude,
        )
    except SourceError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except jsonschema.ValidationError as e:
        print(f"error: report failed schema validation: {e.message}", file=sys.stderr)
        return ExitCode.ERROR
    except ValueError as e:
        # unknown --checks entry
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(
            stable_json_dumps(report_dict, ci_mode=ci_mode),
            encoding="utf-8",
        )

    if args.json_out:
        stable_json_dump(report_dict, sys.stdout, ci_mode=ci_mode, indent=2)
    else:
        render_report(report)

    return exit_code_from_reports(report.files)


def main(argv: list[str] | None = None) -> int:
    """Entry-point; returns an exit code (0 = clean, 1 = violations, 2 = error)."""
    effective_argv = list(argv) if argv is not None else sys.argv[1:]

    first_positional = next(
        (a for a in effective_argv if not a.startswith("-")), None
    )
    if first_positional and first_positional not in _KNOWN_COMMANDS:
        args = _build_default_parser().parse_args(effective_argv)
    else:
        args = _build_parser().parse_args(effective_argv)

    if args.command == "validate":
        return _handle_validate(args)

    if args.command == "init-config":
        return _handle_init_config(args)

    if getattr(args, "path", None) is None:
        print("error: please provide a path or use a subcommand.", file=sys.stderr)
        return ExitCode.ERROR

    return _handle_analyze(args)


if __name__ == "__main__":
    raise SystemExit(main())
