"""Errors raised by tree providers before any analyzer runs."""

from __future__ import annotations


class SourceError(ValueError):
    """Base class for source files the tool cannot turn into a statement tree."""


class InvalidSourceError(SourceError):
    """The file could not be read or parsed."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: invalid source ({detail})")


class UnsupportedLanguageError(SourceError):
    """No tree provider exists for the requested language or file suffix."""

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"unsupported language: {what!r}")
