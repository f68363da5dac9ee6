"""Round-trip verification: markup -> model -> markup must match the input."""

from __future__ import annotations

from dataclasses import dataclass
import difflib
import re
from typing import Optional

from bs4 import BeautifulSoup, NavigableString
from bs4.element import PreformattedString

from .serializer import Serializer
from .whitespace import collapse_ws, in_preformatted, is_formatting_whitespace

_TAG_BOUNDARY_RE = re.compile(r">(?=<)")


@dataclass
class VerifyResult:
    passed: bool
    diff_report: str
    expected: str = ""
    actual: str = ""


def normalize_markup(markup: str, parser: str = "html.parser") -> str:
    """Normalize markup so equivalent fragments compare equal.

    Comments are removed, layout whitespace next to block-level elements is
    dropped, and whitespace runs outside ``<pre>`` collapse to one space. The
    same whitespace rules as ``Serializer.deserialize`` apply, so whitespace
    that separates inline words is compared rather than hidden.
    Attributes and tag structure are left alone.
    """
    soup = BeautifulSoup(markup, parser)
    for string in [node for node in soup.descendants if isinstance(node, NavigableString)]:
        if isinstance(string, PreformattedString):
            string.extract()
            continue
        if in_preformatted(string):
            continue
        if is_formatting_whitespace(string):
            string.extract()
            continue
        text = str(string)
        collapsed = collapse_ws(text)
        if collapsed != text:
            string.replace_with(NavigableString(collapsed))
    return str(soup).strip()


def verify_roundtrip(
    serializer: Serializer,
    markup: str,
    expected: Optional[str] = None,
) -> VerifyResult:
    """Check that serialize(deserialize(markup)) is equivalent to ``expected``.

    ``expected`` defaults to ``markup`` itself. Both sides go through
    normalize_markup before comparison.
    """
    parser = serializer.config.parser
    generated = serializer.serialize(serializer.deserialize(markup))
    want = normalize_markup(markup if expected is None else expected, parser=parser)
    got = normalize_markup(generated, parser=parser)
    if want == got:
        return VerifyResult(passed=True, diff_report="", expected=want, actual=got)

    diff = difflib.unified_diff(
        _split_tags(want),
        _split_tags(got),
        fromfile="expected",
        tofile="roundtrip",
        lineterm="",
    )
    return VerifyResult(passed=False, diff_report="\n".join(diff), expected=want, actual=got)


def is_stable(serializer: Serializer, markup: str) -> bool:
    """True if a second deserialize/serialize pass changes nothing."""
    first = serializer.serialize(serializer.deserialize(markup))
    second = serializer.serialize(serializer.deserialize(first))
    return first == second


def _split_tags(markup: str) -> list[str]:
    return _TAG_BOUNDARY_RE.sub(">\n", markup).splitlines()
