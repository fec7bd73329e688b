"""
Extraction session: one Document per input, run through the full pipeline
and progressively relaxed until its output is long enough.
"""

from __future__ import annotations

import time
from typing import Any, Optional

from bs4 import BeautifulSoup

from quarryreader.config.config import ReadabilityConfig
from quarryreader.exceptions import ParseError
from quarryreader.observability import histogram, increment, null_logger

from .assembler import assemble_article
from .candidates import (
    CandidateMap,
    remove_unlikely_candidates,
    score_paragraphs,
    select_best_candidate,
    strip_non_content,
    transform_misused_divs,
)
from .models import Candidate, ExtractResult, RelaxationLevel, SanitizedArticle
from .preprocess import normalize_html
from .protocols import TreeProvider
from .sanitizer import Sanitizer
from .tree import EMPTY_BODY, SoupTreeProvider, ensure_body


class Document:
    """
    Readability extraction over a single HTML document.

    The configuration is copied on construction and may be tuned through
    ``document.config`` until the first call to :meth:`content`. The retry
    loop mutates that copy as it relaxes, so its values afterwards describe
    the last run rather than the caller's settings.

    Args:
        raw_html: Markup to extract from
        config: Flags and thresholds; defaults to :class:`ReadabilityConfig`
        logger: structlog-style logger; defaults to a silent one
        tree_provider: Parser used for the document and the article fragment

    Raises:
        ParseError: If the markup cannot be parsed
    """

    def __init__(
        self,
        raw_html: str,
        config: Optional[ReadabilityConfig] = None,
        *,
        logger: Any = None,
        tree_provider: Optional[TreeProvider] = None,
    ) -> None:
        if not isinstance(raw_html, str):
            raise ParseError(f"Expected markup as str, got {type(raw_html).__name__}")

        self.input = raw_html
        self.config = (config or ReadabilityConfig()).model_copy(deep=True)
        self.logger = (logger or null_logger()).bind(component="Document")
        self.tree_provider = tree_provider or SoupTreeProvider(self.config.parser)

        self.candidates = CandidateMap()
        self.best_candidate: Optional[Candidate] = None
        self.relaxation_level: Optional[RelaxationLevel] = None
        self.attempts = 0

        self._title = ""
        self._result: Optional[SanitizedArticle] = None
        self.soup = self._initialize_html(raw_html, capture_title=True)

    def _initialize_html(self, raw_html: str, capture_title: bool = False) -> BeautifulSoup:
        soup = self.tree_provider.parse(normalize_html(raw_html))

        if capture_title and soup.title is not None:
            self._title = soup.title.get_text(strip=True)

        # nothing to wrap in a body, like from a redirect or an empty string
        if ensure_body(soup) is None:
            self.logger.info("Document has no body, using an empty one")
            soup = self.tree_provider.parse(EMPTY_BODY)

        return soup

    def content(self) -> str:
        """Cleaned article fragment, computed once and memoized."""
        return self._extract().html

    def text(self) -> str:
        """Plain text of the cleaned article."""
        return self._extract().text

    def title(self) -> str:
        return self._title

    def extract(self, url: Optional[str] = None) -> ExtractResult:
        result = self._extract()
        return ExtractResult(
            url=url,
            text=result.text,
            html=result.html,
            title=self._title or None,
            relaxation_level=self.relaxation_level,
            attempts=self.attempts,
        )

    def _extract(self) -> SanitizedArticle:
        if self._result is None:
            self._result = self._run_with_retries()
        return self._result

    def _run_with_retries(self) -> SanitizedArticle:
        start = time.perf_counter()
        increment("documents_extracted")

        while True:
            self.relaxation_level = RelaxationLevel.from_config(self.config)
            self.attempts += 1
            increment("extraction_attempts", labels={"level": self.relaxation_level.value})

            result = self._run_pipeline()
            length = len(result.text.strip())

            if length >= self.config.retry_length or not self._relax():
                break

            self.logger.info(
                "Article too short, relaxing",
                length=length,
                retry_length=self.config.retry_length,
                level=RelaxationLevel.from_config(self.config).value,
            )
            self.soup = self._initialize_html(self.input)

        duration = time.perf_counter() - start
        histogram("extraction_duration_seconds", duration)
        self.logger.debug(
            "Extraction finished",
            attempts=self.attempts,
            level=self.relaxation_level.value,
            length=len(result.text),
            duration=duration,
        )
        return result

    def _relax(self) -> bool:
        """Switch off the next heuristic in relaxation order; False once none is left."""
        if self.config.remove_unlikely_candidates:
            self.config.remove_unlikely_candidates = False
        elif self.config.weight_classes:
            self.config.weight_classes = False
        elif self.config.clean_conditionally:
            self.config.clean_conditionally = False
        else:
            return False
        return True

    def _run_pipeline(self) -> SanitizedArticle:
        patterns = self.config.patterns.compile()

        strip_non_content(self.soup)
        if self.config.remove_unlikely_candidates:
            remove_unlikely_candidates(self.soup, self.config, patterns, self.logger)

        transform_misused_divs(self.soup, self.config, patterns, self.logger)
        self.candidates = score_paragraphs(self.soup, self.config, patterns)
        self.best_candidate = select_best_candidate(self.soup, self.candidates)
        self.logger.debug(
            "Selected best candidate",
            node=self.best_candidate.node.name,
            score=self.best_candidate.score,
            candidates=len(self.candidates),
        )

        article = assemble_article(self.best_candidate, self.candidates, patterns, self.logger)
        sanitizer = Sanitizer(self.config, patterns, self.candidates, self.tree_provider, self.logger)
        return sanitizer.sanitize(article, self._title)


def new_document(raw_html: str, *, logger: Any = None, **overrides: Any) -> Document:
    """Create a :class:`Document`, overriding individual config fields by keyword."""
    config = ReadabilityConfig(**overrides)
    return Document(raw_html, config, logger=logger)
