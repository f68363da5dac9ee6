"""Whitespace rules shared by deserialization and round-trip normalization."""

from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from .rules import BLOCK_TAGS

# HTML whitespace only; U+00A0 (&nbsp;) is content.
HTML_WHITESPACE = " \t\n\r\f"
_WS_RE = re.compile(r"[ \t\n\r\f]+")

# Elements rendered on their own line; whitespace touching them is layout.
BLOCK_LEVEL_TAGS = frozenset(BLOCK_TAGS) | {
    "address", "article", "aside", "body", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "form", "head", "header", "hr", "html",
    "img", "main", "nav", "section", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr",
}


def collapse_ws(text: str) -> str:
    """Collapse whitespace runs into a single space."""
    return _WS_RE.sub(" ", text)


def in_preformatted(el: PageElement) -> bool:
    return el.find_parent("pre") is not None


def is_formatting_whitespace(string: NavigableString) -> bool:
    """True for a whitespace-only string that only lays out the source markup.

    Inside ``<pre>`` whitespace is always content. Elsewhere it is layout when
    it sits at the start or end of a block-level parent, or next to a
    block-level sibling. Between two inline neighbours it separates words and
    is kept.
    """
    text = str(string)
    if text.strip(HTML_WHITESPACE):
        return False
    if not text:
        return True
    if in_preformatted(string):
        return False
    parent = string.parent
    return (
        _is_block_boundary(_neighbour(string, "previous_sibling"), parent)
        or _is_block_boundary(_neighbour(string, "next_sibling"), parent)
    )


def _neighbour(el: PageElement, direction: str) -> Optional[PageElement]:
    # Comments and other non-text strings are invisible to layout.
    sibling = getattr(el, direction)
    while isinstance(sibling, PreformattedString):
        sibling = getattr(sibling, direction)
    return sibling


def _is_block_boundary(sibling: Optional[PageElement], parent: Optional[Tag]) -> bool:
    if sibling is None:
        return parent is None or isinstance(parent, BeautifulSoup) or parent.name in BLOCK_LEVEL_TAGS
    return isinstance(sibling, Tag) and sibling.name in BLOCK_LEVEL_TAGS
