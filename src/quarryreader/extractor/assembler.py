"""
Assemble the article fragment from the best candidate and its siblings.
"""

from __future__ import annotations

from typing import Any, List

from bs4 import Tag

from quarryreader.config.config import CompiledPatterns

from .candidates import CandidateMap
from .heuristics import link_density
from .models import Candidate
from .tree import describe, element_children, inner_html, text_of

MIN_SIBLING_THRESHOLD = 10.0
SIBLING_SCORE_RATIO = 0.2
LONG_PARAGRAPH_LENGTH = 80


def sibling_threshold(best: Candidate) -> float:
    return max(MIN_SIBLING_THRESHOLD, best.score * SIBLING_SCORE_RATIO)


def article_elements(best: Candidate) -> List[Tag]:
    """The best candidate together with its element siblings, in document order."""
    parent = best.node.parent
    if parent is None:
        return [best.node]
    return element_children(parent)


def paragraph_qualifies(node: Tag, patterns: CompiledPatterns) -> bool:
    """Long paragraphs with few links, or short link-free sentences."""
    density = link_density(node)
    content = text_of(node)
    if len(content) >= LONG_PARAGRAPH_LENGTH:
        return density < 0.25
    return density == 0 and bool(patterns.sentence_end.search(content))


def assemble_article(
    best: Candidate, candidates: CandidateMap, patterns: CompiledPatterns, logger: Any
) -> str:
    """Serialize the qualifying elements into a single ``<div>`` fragment."""
    threshold = sibling_threshold(best)
    parts = ["<div>"]

    for node in article_elements(best):
        if node is best.node:
            include = True
        else:
            candidate = candidates.get(node)
            include = candidate is not None and candidate.score >= threshold
            if not include and node.name == "p":
                include = paragraph_qualifies(node, patterns)

        if not include:
            continue

        tag = node.name if node.name == "p" else "div"
        parts.append(f"<{tag}>{inner_html(node)}</{tag}>")
        logger.debug("Appending node to article", node=describe(node), is_best=node is best.node)

    parts.append("</div>")
    return "".join(parts)
