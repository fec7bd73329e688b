"""
Exception hierarchy for QuarryReader.
"""

from __future__ import annotations


class QuarryReaderError(Exception):
    """Base exception for QuarryReader errors."""

    pass


class ParseError(QuarryReaderError):
    """Raised when markup cannot be parsed into a document tree."""

    pass


class ConfigError(QuarryReaderError):
    """Raised when a configuration file or pattern vocabulary is invalid."""

    pass
