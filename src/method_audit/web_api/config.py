"""
Configuration settings for the API.

Every field can be overridden by an environment variable of the same name
prefixed with ``METHOD_AUDIT_API_`` (``METHOD_AUDIT_API_PORT=9000``).
"""
import logging
import os
from dataclasses import dataclass, field, fields
from typing import List

_logger = logging.getLogger(__name__)

ENV_PREFIX = "METHOD_AUDIT_API_"

_TRUE_VALUES = ("true", "1", "yes", "on")


@dataclass
class Settings:
    """API Configuration"""

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Largest source text accepted by POST /analyze
    MAX_SOURCE_BYTES: int = 1_000_000

    # POST /analyze/path reads the server's filesystem; off unless enabled
    ALLOW_PATH_ANALYSIS: bool = False

    def __post_init__(self):
        for f in fields(self):
            raw = os.getenv(ENV_PREFIX + f.name)
            if raw is None:
                continue
            current = getattr(self, f.name)
            if isinstance(current, bool):
                value = raw.strip().lower() in _TRUE_VALUES
            elif isinstance(current, int):
                try:
                    value = int(raw)
                except ValueError:
                    _logger.warning("ignoring non-integer %s%s=%r", ENV_PREFIX, f.name, raw)
                    continue
            elif isinstance(current, list):
                value = [item.strip() for item in raw.split(",") if item.strip()]
            else:
                value = raw
            setattr(self, f.name, value)


# Global settings instance
settings = Settings()
