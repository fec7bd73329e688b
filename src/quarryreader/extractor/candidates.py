"""
Candidate filtering, structure normalization, scoring and selection.

These passes run in order over one parsed document and mutate it in place:

1. ``strip_non_content`` drops script and style elements.
2. ``remove_unlikely_candidates`` removes containers whose class/id reads like
   navigation, comments or ads.
3. ``transform_misused_divs`` relabels block containers that only hold inline
   content as paragraphs.
4. ``score_paragraphs`` credits every paragraph's parent and grandparent.
5. ``select_best_candidate`` picks the article root.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from quarryreader.config.config import CompiledPatterns, ReadabilityConfig
from quarryreader.observability import increment

from .heuristics import class_weight, link_density, probe
from .models import Candidate
from .tree import describe, element_parent, inner_html, is_attached, live_elements, remove_node, text_of

NON_CONTENT_TAGS = ["script", "style"]
SCORED_TAGS = ["p", "td"]


class CandidateMap:
    """
    Candidates keyed by node identity.

    Each entry keeps its node alive, so ``id(node)`` cannot be reused while
    the entry exists. Reads only return candidates whose node is still
    attached to ``root``; removed subtrees silently drop out.
    """

    def __init__(self, root: Optional[Tag] = None) -> None:
        self.root = root
        self._candidates: Dict[int, Candidate] = {}

    def _is_live(self, candidate: Candidate) -> bool:
        return self.root is None or is_attached(candidate.node, self.root)

    def get(self, node: Tag) -> Optional[Candidate]:
        candidate = self._candidates.get(id(node))
        if candidate is None or candidate.node is not node or not self._is_live(candidate):
            return None
        return candidate

    def score_of(self, node: Tag) -> float:
        candidate = self.get(node)
        return candidate.score if candidate else 0.0

    def add(self, candidate: Candidate) -> Candidate:
        self._candidates[id(candidate.node)] = candidate
        return candidate

    def __contains__(self, node: object) -> bool:
        return isinstance(node, Tag) and self.get(node) is not None

    def __iter__(self) -> Iterator[Candidate]:
        for candidate in list(self._candidates.values()):
            if self._is_live(candidate):
                yield candidate

    def __len__(self) -> int:
        return sum(1 for _ in self)


def strip_non_content(soup: BeautifulSoup) -> None:
    for node in soup.find_all(NON_CONTENT_TAGS):
        remove_node(node)


def remove_unlikely_candidates(
    soup: BeautifulSoup, config: ReadabilityConfig, patterns: CompiledPatterns, logger: Any
) -> int:
    """Remove elements whose class/id marks them as boilerplate; returns the count."""
    removed = 0
    for node in live_elements(soup):
        if node.name in ("html", "body"):
            continue

        value = probe(node)
        if patterns.blacklist.search(value):
            reason = "blacklist"
        elif (
            patterns.unlikely_candidates.search(value)
            and not patterns.maybe_candidate.search(value)
            and node.name not in config.unlikely_exempt_tags
        ):
            reason = "unlikely"
        else:
            continue

        if remove_node(node):
            removed += 1
            increment("nodes_removed", labels={"reason": reason})
            logger.debug("Removing unlikely candidate", node=describe(node), probe=value, reason=reason)

    return removed


def transform_misused_divs(
    soup: BeautifulSoup, config: ReadabilityConfig, patterns: CompiledPatterns, logger: Any
) -> int:
    """Relabel containers without block-level children as paragraphs."""
    altered = 0
    for node in live_elements(soup, config.div_to_p_tags):
        if patterns.div_to_p_elements.search(inner_html(node)):
            continue
        logger.debug("Altering container to p", node=describe(node))
        node.name = "p"
        altered += 1
    return altered


def score_node(node: Tag, config: ReadabilityConfig, patterns: CompiledPatterns) -> Candidate:
    """Initial candidate score from class weight and tag type."""
    score = class_weight(node, patterns, config.weight_classes)
    if node.name == "div":
        score += 5
    elif node.name in ("blockquote", "form"):
        score = 3
    elif node.name == "th":
        score -= 5
    return Candidate(node, float(score))


def content_score(text: str) -> float:
    """One point, plus one per comma-separated chunk, plus up to three for length."""
    score = 1.0
    score += text.count(",") + 1
    score += min(len(text) // 100, 3)
    return score


def score_paragraphs(
    soup: BeautifulSoup, config: ReadabilityConfig, patterns: CompiledPatterns
) -> CandidateMap:
    candidates = CandidateMap(soup)

    for paragraph in live_elements(soup, SCORED_TAGS):
        text = text_of(paragraph)

        # paragraphs below the minimum contribute nothing
        if len(text) < config.min_text_length:
            continue

        parent = element_parent(paragraph)
        if parent is None:
            continue
        grandparent = element_parent(parent)

        parent_candidate = candidates.get(parent) or candidates.add(score_node(parent, config, patterns))
        grandparent_candidate = None
        if grandparent is not None:
            grandparent_candidate = candidates.get(grandparent) or candidates.add(
                score_node(grandparent, config, patterns)
            )

        score = content_score(text)
        parent_candidate.score += score
        if grandparent_candidate is not None:
            grandparent_candidate.score += score / 2.0

    # Good content has a small link density and is mostly unaffected here
    for candidate in candidates:
        candidate.score *= 1 - link_density(candidate.node)

    return candidates


def select_best_candidate(soup: BeautifulSoup, candidates: CandidateMap) -> Candidate:
    """Highest-scoring candidate, first one wins ties; falls back to ``body``."""
    best: Optional[Candidate] = None
    for candidate in candidates:
        if best is None or best.score < candidate.score:
            best = candidate

    if best is None:
        body = soup.find("body")
        best = Candidate(body if isinstance(body, Tag) else soup, 0.0)

    return best
