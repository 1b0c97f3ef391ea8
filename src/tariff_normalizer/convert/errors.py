"""Typed exceptions for source converters."""

from __future__ import annotations


class ConverterError(RuntimeError):
    """Base converter failure."""


class SourceFormatError(ConverterError):
    """Source file is missing, unreadable, or not in the expected layout."""
