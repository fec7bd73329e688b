"""
Tree provider and node primitives on top of BeautifulSoup.

The extraction passes only touch the document through the helpers in this
module, so the parser backend stays swappable.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, FeatureNotFound, NavigableString, Tag
from bs4.element import PreformattedString
from bs4.builder import ParserRejectedMarkup

from quarryreader.exceptions import ConfigError, ParseError

EMPTY_BODY = "<body></body>"

# Top-level elements that stay outside a synthesized body
HEAD_TAGS = frozenset(["head", "title", "meta", "link", "base"])


class SoupTreeProvider:
    """BeautifulSoup-backed :class:`TreeProvider`."""

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    def parse(self, text: str) -> BeautifulSoup:
        if not isinstance(text, str):
            raise ParseError(f"Expected markup as str, got {type(text).__name__}")
        try:
            return BeautifulSoup(text, self.parser)
        except FeatureNotFound as e:
            raise ConfigError(f"Unknown BeautifulSoup parser {self.parser!r}") from e
        except (ParserRejectedMarkup, AssertionError) as e:
            raise ParseError(f"Unable to parse markup: {e}") from e


def text_of(node: Tag) -> str:
    return node.get_text()


def inner_html(node: Tag) -> str:
    return node.decode_contents()


def class_and_id(node: Tag) -> tuple[str, str]:
    """Return the class and id attribute values, empty when absent."""
    css_class = node.get("class") or ""
    if isinstance(css_class, list):
        css_class = " ".join(css_class)
    node_id = node.get("id") or ""
    if isinstance(node_id, list):
        node_id = " ".join(node_id)
    return css_class, node_id


def describe(node: Tag) -> str:
    css_class, node_id = class_and_id(node)
    return f"{node.name}#{node_id}.{css_class}"


def element_parent(node: Tag) -> Optional[Tag]:
    """Parent element, or None at the top of the tree (the soup object is not an element)."""
    parent = node.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def element_children(node: Tag) -> List[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


def is_attached(node: Tag, root: Tag) -> bool:
    """True while ``node`` is still reachable from ``root``."""
    if node is root:
        return True
    return any(parent is root for parent in node.parents)


def live_elements(root: Tag, names: object = True) -> Iterator[Tag]:
    """Snapshot of matching elements, skipping those detached by earlier edits."""
    for node in root.find_all(names):
        if is_attached(node, root):
            yield node


def remove_node(node: Tag) -> bool:
    """Detach ``node`` and its subtree; a parentless node is left alone."""
    if node.parent is None:
        return False
    node.extract()
    return True


def replace_with_text(node: Tag, text: str) -> None:
    node.replace_with(NavigableString(text))


def splice_out(node: Tag) -> None:
    """Replace ``node`` with its own children, in place."""
    node.unwrap()


def ensure_body(soup: BeautifulSoup) -> Optional[Tag]:
    """
    Return the document's ``body``, creating one when the markup omits it.

    ``html.parser`` does not synthesize the implied body of an HTML5 page, so
    the top-level content (inside ``html`` when present) is moved into a new
    ``body``. Head elements, doctypes and other declarations stay where they
    are. Returns None, leaving the tree untouched, when there is nothing to
    wrap.
    """
    body = soup.find("body")
    if isinstance(body, Tag):
        return body

    container = soup.find("html")
    if not isinstance(container, Tag):
        container = soup

    content = [
        child
        for child in container.contents
        if not isinstance(child, PreformattedString)
        and not (isinstance(child, Tag) and child.name in HEAD_TAGS)
    ]
    if not any(isinstance(child, Tag) or child.strip() for child in content):
        return None

    body = soup.new_tag("body")
    for child in content:
        body.append(child.extract())
    container.append(body)
    return body
