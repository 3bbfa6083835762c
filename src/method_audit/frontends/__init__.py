"""Tree providers: turn source text into a ``SourceUnit``.

Two providers ship with the package:

    - ``frontends.csharp``: C# via tree-sitter
    - ``frontends.python``: Python via the standard-library ``ast``

Both are imported lazily so that analysing one language never requires the
other's parser to load.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from method_audit.frontends.errors import (
    InvalidSourceError,
    SourceError,
    UnsupportedLanguageError,
)
from method_audit.model import Language
from method_audit.model.source import SourceUnit

_logger = logging.getLogger(__name__)

SUFFIX_LANGUAGES: dict[str, Language] = {
    ".cs": Language.CSHARP,
    ".py": Language.PYTHON,
}


def language_for(path: Union[str, Path]) -> Language:
    """Language of *path*, decided by its suffix."""
    suffix = Path(path).suffix.lower()
    try:
        return SUFFIX_LANGUAGES[suffix]
    except KeyError:
        raise UnsupportedLanguageError(suffix or str(path)) from None


def parse_source(
    text: str,
    language: Union[Language, str],
    path: str = "<source>",
) -> SourceUnit:
    """Parse *text* with the provider for *language*.

    Raises ``InvalidSourceError`` when the provider rejects the text and
    ``UnsupportedLanguageError`` for an unknown language name.
    """
    try:
        lang = Language(language)
    except ValueError:
        raise UnsupportedLanguageError(str(language)) from None

    if lang == Language.CSHARP:
        from method_audit.frontends import csharp

        return csharp.parse(text, path)

    from method_audit.frontends import python

    return python.parse(text, path)


def load_source(path: Union[str, Path]) -> SourceUnit:
    """Read *path* from disk and parse it with the provider for its suffix."""
    p = Path(path)
    language = language_for(p)
    try:
        # utf-8-sig drops the BOM many C# editors write.
        text = p.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidSourceError(str(p), f"not UTF-8: {exc.reason}") from exc
    except OSError as exc:
        raise InvalidSourceError(str(p), exc.strerror or str(exc)) from exc
    _logger.debug("parsing %s as %s", p, language.value)
    return parse_source(text, language, str(p))


__all__ = [
    "InvalidSourceError",
    "SUFFIX_LANGUAGES",
    "SourceError",
    "UnsupportedLanguageError",
    "language_for",
    "load_source",
    "parse_source",
]
