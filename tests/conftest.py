"""
Shared fixtures for the QuarryReader test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from bs4 import BeautifulSoup

from quarryreader.config import CompiledPatterns, PatternSet, ReadabilityConfig
from quarryreader.extractor import CandidateMap, Sanitizer, SoupTreeProvider
from quarryreader.observability import null_logger

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def config() -> ReadabilityConfig:
    """Default readability configuration."""
    return ReadabilityConfig()


@pytest.fixture
def patterns() -> CompiledPatterns:
    """Default heuristic vocabulary, compiled."""
    return PatternSet().compile()


@pytest.fixture
def logger():
    """Silent structlog logger."""
    return null_logger()


@pytest.fixture
def make_soup() -> Callable[[str], BeautifulSoup]:
    """Parse markup the way the extraction engine does."""

    def _make(markup: str) -> BeautifulSoup:
        return SoupTreeProvider().parse(markup)

    return _make


@pytest.fixture
def make_sanitizer(config: ReadabilityConfig, patterns: CompiledPatterns, logger) -> Callable[..., Sanitizer]:
    """Build a Sanitizer with config overrides and an empty candidate map."""

    def _make(**overrides) -> Sanitizer:
        session_config = config.model_copy(update=overrides)
        return Sanitizer(session_config, patterns, CandidateMap(), SoupTreeProvider(), logger)

    return _make


@pytest.fixture
def fixture_html() -> Callable[[str], str]:
    """Read an HTML fixture file by name."""

    def _read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _read
