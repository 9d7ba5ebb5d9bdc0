"""Error definitions for the ExeTranslate patcher."""

from __future__ import annotations


class ExeTranslateError(Exception):
    """Base exception for all custom errors."""


class UnsupportedExecutableError(ExeTranslateError):
    """Raised when the input is not a PE image or its sections are unusable."""


class TranslationTableError(ExeTranslateError):
    """Raised when the translation table cannot be opened or read."""


class OverwriteRefusedError(ExeTranslateError):
    """Raised when attempting to overwrite an output without consent."""


class ConfigurationError(ExeTranslateError):
    """Raised when configuration sources are unreadable or invalid."""
