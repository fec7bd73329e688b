"""
Unit tests for the tree provider and node primitives.
"""

import pytest

from quarryreader.exceptions import ParseError
from quarryreader.extractor.tree import SoupTreeProvider, element_children, ensure_body


class TestEnsureBody:
    """Test cases for synthesizing an omitted body."""

    def test_existing_body_is_returned(self, make_soup):
        soup = make_soup("<html><body><p>x</p></body></html>")
        assert ensure_body(soup) is soup.body

    def test_content_inside_html_is_wrapped(self, make_soup):
        soup = make_soup(
            "<!DOCTYPE html><html><head><title>T</title></head>"
            '<div id="post"><p>text</p></div>tail</html>'
        )

        body = ensure_body(soup)

        assert body is not None
        assert body.parent is soup.html
        assert soup.head.parent is soup.html
        assert [child.get("id") for child in element_children(body)] == ["post"]
        assert body.get_text() == "texttail"
        assert str(soup).startswith("<!DOCTYPE html>")

    def test_bare_fragment_is_wrapped(self, make_soup):
        soup = make_soup("<p>one</p><p>two</p>")

        body = ensure_body(soup)

        assert soup.find("body") is body
        assert len(body.find_all("p")) == 2

    def test_top_level_head_elements_stay_outside(self, make_soup):
        soup = make_soup("<title>T</title><p>x</p>")

        body = ensure_body(soup)

        assert soup.title.parent is soup
        assert body.find("title") is None
        assert body.p is not None

    @pytest.mark.parametrize(
        "markup",
        ["", "   \n  ", "<html><head><title>Nothing</title></head></html>"],
    )
    def test_nothing_to_wrap(self, make_soup, markup):
        soup = make_soup(markup)

        assert ensure_body(soup) is None
        assert soup.find("body") is None


class TestSoupTreeProvider:
    """Test cases for SoupTreeProvider."""

    def test_rejects_non_string(self):
        with pytest.raises(ParseError):
            SoupTreeProvider().parse(b"<p>x</p>")

    def test_fragments_are_not_wrapped(self):
        soup = SoupTreeProvider().parse("<div><p>x</p></div>")
        assert soup.find("body") is None
