"""
Textual normalization applied to raw markup before every parse.
"""

from __future__ import annotations

import re

# Two or more <br> tags, optionally separated by whitespace
REPLACE_BRS_PATTERN = re.compile(r"(<br[^>]*>[ \n\r\t]*){2,}", re.IGNORECASE)
REPLACE_FONTS_PATTERN = re.compile(r"<(/?)font[^>]*>", re.IGNORECASE)
COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)


def normalize_html(raw: str) -> str:
    """
    Normalize raw markup so the parser sees cleaner structure.

    Stacked line breaks become a paragraph boundary, legacy ``<font>`` tags
    become ``<span>``, and comment blocks are cut out of the text.

    Examples:
        >>> normalize_html("a<br><br>b")
        'a</p><p>b'

        >>> normalize_html('<font color="red">x</font>')
        '<span>x</span>'
    """
    text = REPLACE_BRS_PATTERN.sub("</p><p>", raw)
    text = REPLACE_FONTS_PATTERN.sub(r"<\1span>", text)
    return COMMENT_PATTERN.sub("", text)
