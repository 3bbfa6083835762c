"""Load and validate JSON instances against the bundled schemas.

Usage::

    from method_audit.contracts.load import validate_instance, validate_file

    validate_instance(report.to_dict(), "analysis_report.schema.json")
    validate_file(Path("report.json"), "analysis_report.schema.json")
"""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

SCHEMA_DIR = "data/schemas"
REPORT_SCHEMA = "analysis_report.schema.json"


def _schema_path(name: str) -> Path:
    """Resolve a bundled schema.

    Priority:
    1. ``src/method_audit/data/schemas/`` relative to this file
    2. pip-installed package data via importlib.resources
    """
    canonical = Path(__file__).resolve().parents[1] / SCHEMA_DIR / name
    if canonical.exists():
        return canonical

    with resources.as_file(resources.files("method_audit") / SCHEMA_DIR / name) as p:
        return p


def load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema by filename."""
    path = _schema_path(name)
    return json.loads(path.read_text(encoding="utf-8"))


def validate_instance(instance: Any, schema_name: str = REPORT_SCHEMA) -> None:
    """Validate *instance* against the named schema.

    Raises ``jsonschema.ValidationError`` on failure.
    """
    schema = load_schema(schema_name)
    jsonschema.validate(instance=instance, schema=schema)


def validate_file(instance_path: Path, schema_name: str = REPORT_SCHEMA) -> None:
    """Load a JSON file and validate it against the named schema."""
    instance = json.loads(instance_path.read_text(encoding="utf-8"))

    # Readable error before the generic jsonschema traceback.
    if schema_name == REPORT_SCHEMA and isinstance(instance, dict):
        sv = instance.get("schema_version")
        if sv != "method_audit_report_v1":
            raise ValueError(
                f"{instance_path}: expected schema_version='method_audit_report_v1', got {sv!r}"
            )

    validate_instance(instance, schema_name)
