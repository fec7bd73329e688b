"""
Sanitizing pass over the assembled article fragment.

Removes boilerplate headings, interactive elements, empty paragraphs and
(optionally) conditionally-judged tables/lists/divs, then flattens every tag
outside the whitelist and normalizes whitespace.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup, Tag

from quarryreader.config.config import CompiledPatterns, ReadabilityConfig
from quarryreader.observability import increment

from .candidates import CandidateMap
from .heuristics import class_weight, link_density
from .models import SanitizedArticle
from .protocols import TreeProvider
from .tree import (
    describe,
    element_parent,
    inner_html,
    live_elements,
    remove_node,
    replace_with_text,
    splice_out,
    text_of,
)

HEADER_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
INTERACTIVE_TAGS = ["form", "object", "iframe", "embed"]
CONDITIONAL_TAGS = ["table", "ul", "div"]
LIST_TAGS = ("ul", "ol")

# Block-level tags collapsed into their own text, padded so words stay apart
REPLACE_WITH_WHITESPACE = frozenset(
    ["br", "hr", *HEADER_TAGS, "dl", "dd", "ol", "li", "ul", "address", "blockquote", "center"]
)

HEADER_LINK_DENSITY = 0.33
LIST_ITEM_BIAS = 100

NBSP_PATTERN = re.compile(r"(?:&nbsp;|\xa0)+")
HORIZONTAL_WHITESPACE_PATTERN = re.compile(r"[ \t\v]+")
NEWLINE_PATTERN = re.compile(r"(?: ?[\r\n\f] ?)+")


def normalize_whitespace(text: str) -> str:
    text = NBSP_PATTERN.sub(" ", text)
    text = HORIZONTAL_WHITESPACE_PATTERN.sub(" ", text)
    text = NEWLINE_PATTERN.sub("\n", text)
    return text.strip()


class Sanitizer:
    """Cleans one article fragment using the session's flags and candidate scores."""

    def __init__(
        self,
        config: ReadabilityConfig,
        patterns: CompiledPatterns,
        candidates: CandidateMap,
        tree_provider: TreeProvider,
        logger: Any,
    ) -> None:
        self.config = config
        self.patterns = patterns
        self.candidates = candidates
        self.tree_provider = tree_provider
        self.logger = logger

    def sanitize(self, article: str, title: str = "") -> SanitizedArticle:
        doc = self.tree_provider.parse(article)

        self.clean_headers(doc)
        self._remove_all(doc, INTERACTIVE_TAGS, "interactive")

        if self.config.remove_empty_nodes:
            for paragraph in live_elements(doc, "p"):
                if not inner_html(paragraph).strip():
                    self._remove(paragraph, "empty")

        self.clean_conditionally(doc)

        short_circuit = self.flatten(doc)
        if short_circuit is not None:
            text = normalize_whitespace(short_circuit)
            return SanitizedArticle(html=text, text=text)

        text = normalize_whitespace(text_of(doc))
        self.inject_title(doc, title)
        return SanitizedArticle(html=normalize_whitespace(doc.decode()), text=text)

    def clean_headers(self, doc: BeautifulSoup) -> None:
        """Drop headings that read like boilerplate ("Related Stories" and such)."""
        # scored on the heading's own class/id and links, not its container's
        for header in live_elements(doc, HEADER_TAGS):
            weight = class_weight(header, self.patterns, self.config.weight_classes)
            if weight < 0 or link_density(header) > HEADER_LINK_DENSITY:
                self._remove(header, "header")

    def clean_conditionally(self, doc: BeautifulSoup) -> None:
        if not self.config.clean_conditionally:
            return

        for node in live_elements(doc, CONDITIONAL_TAGS):
            weight = class_weight(node, self.patterns, self.config.weight_classes)
            content_score = self.candidates.score_of(node)

            if weight + content_score < 0:
                self._remove(node, "conditional")
                self.logger.debug(
                    "Conditionally cleaned", node=describe(node), weight=weight, content_score=content_score
                )
                continue

            text = text_of(node)
            if text.count(",") >= 10:
                continue

            reason = self._boilerplate_reason(node, text, weight)
            if reason:
                self._remove(node, "conditional")
                self.logger.debug(
                    "Conditionally cleaned",
                    node=describe(node),
                    weight=weight,
                    content_score=content_score,
                    reason=reason,
                )

    def _boilerplate_reason(self, node: Tag, text: str, weight: int) -> Optional[str]:
        counts: Dict[str, int] = {
            "p": len(node.find_all("p")),
            "img": len(node.find_all("img")),
            "li": len(node.find_all("li")) - LIST_ITEM_BIAS,
            "embed": len(node.find_all("embed")),
            "input": len(node.find_all("input")),
        }
        content_length = len(text.strip())
        density = link_density(node)

        if counts["img"] > counts["p"]:
            return "too many images"
        if counts["li"] > counts["p"] and node.name not in LIST_TAGS:
            return "more <li>s than <p>s"
        if counts["input"] > counts["p"] // 3:
            return "less than 3x <p>s than <input>s"
        if content_length < self.config.min_text_length and (counts["img"] == 0 or counts["img"] > 2):
            return "too short content length without a single image"
        if weight < 25 and density > 0.2:
            return f"too many links for its weight ({weight})"
        if weight >= 25 and density > 0.5:
            return f"too many links for its weight ({weight})"
        if (counts["embed"] == 1 and content_length < 75) or counts["embed"] > 1:
            return "<embed>s with too short a content length, or too many <embed>s"
        return None

    def flatten(self, doc: BeautifulSoup) -> Optional[str]:
        """
        Apply the whitelist to every element.

        Whitelisted tags lose their attributes, whitespace-set tags turn into
        padded text, and anything else is replaced by its children. Returns
        the text of the first root-level element that is not whitelisted, which
        ends the walk, else None.
        """
        whitelist = set(self.config.whitelist_tags)
        replace_with_whitespace = REPLACE_WITH_WHITESPACE - whitelist

        for node in doc.find_all(True):
            if node.name in whitelist:
                node.attrs = {}
            elif element_parent(node) is None:
                return text_of(node)
            elif node.name in replace_with_whitespace:
                replace_with_text(node, f"\n{text_of(node)}\n")
            else:
                splice_out(node)
        return None

    def inject_title(self, doc: BeautifulSoup, title: str) -> None:
        head = doc.new_tag("head")
        title_tag = doc.new_tag("title")
        title_tag.string = title
        head.append(title_tag)
        doc.insert(0, head)

    def _remove_all(self, doc: BeautifulSoup, names: list[str], reason: str) -> None:
        for node in live_elements(doc, names):
            self._remove(node, reason)

    def _remove(self, node: Tag, reason: str) -> None:
        if remove_node(node):
            increment("nodes_removed", labels={"reason": reason})
