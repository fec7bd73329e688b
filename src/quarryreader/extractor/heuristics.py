"""
Shared scoring signals: class weight and link density.
"""

from __future__ import annotations

from bs4 import Tag

from quarryreader.config.config import CompiledPatterns

from .tree import class_and_id, text_of

CLASS_WEIGHT = 25


def class_weight(node: Tag, patterns: CompiledPatterns, enabled: bool = True) -> int:
    """Score the class and id attributes against the negative/positive vocabulary."""
    weight = 0
    if not enabled:
        return weight

    for value in class_and_id(node):
        if not value:
            continue
        if patterns.negative.search(value):
            weight -= CLASS_WEIGHT
        if patterns.positive.search(value):
            weight += CLASS_WEIGHT

    return weight


def link_density(node: Tag) -> float:
    """Ratio of anchor text to all text; 0 for an element without text."""
    text_length = len(text_of(node))
    if text_length == 0:
        return 0.0
    link_length = sum(len(text_of(anchor)) for anchor in node.find_all("a"))
    return link_length / text_length


def probe(node: Tag) -> str:
    """Class and id concatenated, as matched by the unlikely-candidate filter."""
    css_class, node_id = class_and_id(node)
    return css_class + node_id
