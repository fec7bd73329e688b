"""
Data models for extraction sessions and their results.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from bs4 import Tag

if TYPE_CHECKING:
    from quarryreader.config.config import ReadabilityConfig


@dataclass(slots=True)
class Candidate:
    """A container element considered as the article root."""

    node: Tag
    score: float = 0.0


class RelaxationLevel(str, Enum):
    """Strictness states walked by the retry loop, strictest first."""

    STRICT = "strict"
    RELAX_UNLIKELY = "relax_unlikely"
    RELAX_WEIGHT = "relax_weight"
    RELAX_CONDITIONAL = "relax_conditional"

    @classmethod
    def from_config(cls, config: ReadabilityConfig) -> RelaxationLevel:
        if config.remove_unlikely_candidates:
            return cls.STRICT
        if config.weight_classes:
            return cls.RELAX_UNLIKELY
        if config.clean_conditionally:
            return cls.RELAX_WEIGHT
        return cls.RELAX_CONDITIONAL


@dataclass(slots=True, frozen=True)
class SanitizedArticle:
    """Output of one sanitizing pass."""

    html: str
    text: str


@dataclass(slots=True, frozen=True)
class ExtractResult:
    """Result of HTML content extraction."""

    url: str | None
    text: str
    html: str
    title: str | None
    relaxation_level: RelaxationLevel | None
    attempts: int

    def __post_init__(self) -> None:
        """Validate the result."""
        if self.attempts < 0:
            raise ValueError("attempts must be non-negative")
