"""
Seams of the extraction engine: markup parsing and asyncio extraction.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup

from .models import ExtractResult


@runtime_checkable
class TreeProvider(Protocol):
    """Parses markup into a mutable, queryable document tree."""

    def parse(self, text: str) -> BeautifulSoup:
        """Parse ``text``, raising :class:`ParseError` on unparseable input."""
        ...


@runtime_checkable
class Extractor(Protocol):
    """Asynchronous markup-to-article strategy."""

    name: str

    async def extract(self, html: str, *, url: str | None = None) -> ExtractResult:
        """Extract the main article from a page.

        Args:
            html: Raw page markup
            url: Where the page came from, echoed into the result

        Returns:
            ExtractResult carrying the article text, cleaned fragment and
            how far the heuristics had to be relaxed
        """
        ...
