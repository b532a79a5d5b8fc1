"""
restscan exception hierarchy.

Per-file errors are raised by the parser and reader and caught by the
extraction pipeline, which records them as file outcomes. They never abort
a multi-file run.
"""

from __future__ import annotations


class RestscanError(Exception):
    """Base exception for all restscan errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigurationError(RestscanError):
    """Invalid settings or command-line combination."""


class SourceReadError(RestscanError):
    """A source file could not be read or decoded."""


class ParseFailure(RestscanError):
    """The parser produced a syntax tree with errors; the file is abandoned."""
