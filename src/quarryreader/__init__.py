"""
QuarryReader - Readability-style main content extraction.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config, ReadabilityConfig
from .exceptions import ConfigError, ParseError, QuarryReaderError
from .extractor import Document, ExtractResult, ReadabilityExtractor, new_document

__all__ = [
    "__version__",
    "Config",
    "ConfigError",
    "Document",
    "ExtractResult",
    "ParseError",
    "QuarryReaderError",
    "ReadabilityConfig",
    "ReadabilityExtractor",
    "new_document",
]
