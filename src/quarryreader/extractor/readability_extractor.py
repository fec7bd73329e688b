"""
Asynchronous adapter running a readability Document off the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog

from quarryreader.config.config import ReadabilityConfig
from quarryreader.exceptions import ParseError

from .document import Document
from .models import ExtractResult
from .protocols import Extractor

logger = structlog.get_logger(__name__)


class ReadabilityExtractor(Extractor):
    """Extractor wrapping :class:`Document` for asyncio callers."""

    name = "readability"

    def __init__(self, config: Optional[ReadabilityConfig] = None, *, session_logger: Any = None) -> None:
        self.config = config or ReadabilityConfig()
        self.session_logger = session_logger

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract content using the readability heuristics.

        Args:
            html: HTML content to extract from
            url: Optional URL for context

        Returns:
            ExtractResult with extracted content; empty when the input is
            blank or cannot be parsed
        """
        if not html.strip():
            logger.warning("Empty HTML", url=url)
            return self._empty_result(url)

        # CPU-bound, keep it off the event loop
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._extract_sync, html, url)
        except ParseError as e:
            logger.warning("Readability extraction failed", url=url, error=str(e))
            return self._empty_result(url)

    def _extract_sync(self, html: str, url: str | None) -> ExtractResult:
        document = Document(html, self.config, logger=self.session_logger)
        return document.extract(url)

    @staticmethod
    def _empty_result(url: str | None) -> ExtractResult:
        return ExtractResult(url=url, text="", html="", title=None, relaxation_level=None, attempts=0)
