"""Threshold configuration, loaded from YAML.

Lookup order for the config file:
    1. an explicit path (``--config``)
    2. ``$METHOD_AUDIT_CONFIG``
    3. ``method_audit.yaml`` in the working directory

No file at all is not an error: the defaults apply.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "method_audit.yaml"
CONFIG_ENV = "METHOD_AUDIT_CONFIG"

_DEFAULT_CONFIG_TEXT = """\
# method-audit thresholds (presentation only; the analyzers never read them)

# Methods spanning more lines than this are reported as too long.
method_length: {method_length}

# Loop nesting at or above this depth is flagged for restructuring.
nesting_depth: {nesting_depth}
"""


class ConfigError(ValueError):
    """A config file exists but cannot be used."""


@dataclass(frozen=True)
class Thresholds:
    method_length: int = 15
    nesting_depth: int = 3

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: str = "<config>") -> "Thresholds":
        known = {f.name for f in fields(cls)}
        values: dict[str, int] = {}
        for key, value in data.items():
            if key not in known:
                _logger.warning("%s: unknown config key %r ignored", source, key)
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ConfigError(
                    f"{source}: {key} must be a non-negative integer, got {value!r}"
                )
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path) -> "Thresholds":
        """Load thresholds from a YAML file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as exc:
            raise ConfigError(f"{path}: cannot read config ({exc.strerror})") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: invalid YAML ({exc})") from exc
        if not isinstance(data, Mapping):
            raise ConfigError(f"{path}: expected a mapping at top level")
        return cls.from_mapping(data, source=str(path))

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def find_config(
    explicit: Optional[Path] = None,
    *,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Return the config file to use, or None when defaults apply.

    An explicit or environment-supplied path that does not exist is an error;
    a missing ``method_audit.yaml`` in the working directory is not.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"{explicit}: config file not found")
        return explicit

    env = os.environ if env is None else env
    from_env = env.get(CONFIG_ENV)
    if from_env:
        path = Path(from_env)
        if not path.is_file():
            raise ConfigError(f"{path}: config file not found (from ${CONFIG_ENV})")
        return path

    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def load_thresholds(
    explicit: Optional[Path] = None,
    *,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Thresholds:
    path = find_config(explicit, cwd=cwd, env=env)
    if path is None:
        return Thresholds()
    _logger.debug("loading thresholds from %s", path)
    return Thresholds.from_yaml(path)


def write_default_config(path: Path, *, overwrite: bool = False) -> Path:
    """Write a config file holding the default thresholds."""
    if path.exists() and not overwrite:
        raise ConfigError(f"{path}: already exists")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_DEFAULT_CONFIG_TEXT.format(**Thresholds().to_dict()), encoding="utf-8")
    return path
