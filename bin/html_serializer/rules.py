"""Tag vocabularies and the default HTML rule set."""

from __future__ import annotations

import html as html_module
from typing import Optional

from bs4 import NavigableString, Tag

from .chain import NextFn, Rule, RuleChain
from .model import Block, Inline, Mark, ModelNode, Text

BLOCK_TAGS = {
    "p": "paragraph",
    "li": "list-item",
    "ul": "bulleted-list",
    "ol": "numbered-list",
    "blockquote": "quote",
    "pre": "code",
    "h1": "heading-one",
    "h2": "heading-two",
    "h3": "heading-three",
    "h4": "heading-four",
    "h5": "heading-five",
    "h6": "heading-six",
}

MARK_TAGS = {
    "strong": "bold",
    "em": "italic",
    "u": "underline",
    "s": "strikethrough",
    "code": "code",
}

BLOCK_TYPES = {block_type: tag for tag, block_type in BLOCK_TAGS.items()}
MARK_TYPES = {mark_type: tag for tag, mark_type in MARK_TAGS.items()}

# Block tags whose class attribute is kept in data["className"].
CLASS_NAME_TAGS = frozenset({"p", "ul", "ol", "h1", "h2", "h3", "h4", "h5", "h6"})


def _tag_name(el) -> str:
    if isinstance(el, Tag):
        return (el.name or "").lower()
    return ""


def _class_name(el: Tag) -> Optional[str]:
    value = el.get("class")
    if not value:
        return None
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def _is_blank_string(el) -> bool:
    return isinstance(el, NavigableString) and not str(el).strip()


def _escape_attr(value) -> str:
    return html_module.escape(str(value), quote=True)


# ---------------------------------------------------------------------------
# special cases
# ---------------------------------------------------------------------------


def deserialize_code_block(el, next: NextFn):
    """Route ``<pre><code>...</code></pre>`` into the inner code element."""
    if _tag_name(el) != "pre":
        return None

    significant = [child for child in el.contents if not _is_blank_string(child)]
    children = el.contents
    if len(significant) == 1 and _tag_name(significant[0]) == "code":
        children = significant[0].contents

    return Block(type="code", nodes=next(children))


def deserialize_image(el, next: NextFn):
    if _tag_name(el) != "img":
        return None
    return Block(type="image", data={"src": el.get("src")})


def deserialize_link(el, next: NextFn):
    if _tag_name(el) != "a":
        return None
    return Inline(type="link", data={"href": el.get("href")}, nodes=next(el.contents))


# ---------------------------------------------------------------------------
# generic, table driven
# ---------------------------------------------------------------------------


def deserialize_block(el, next: NextFn):
    tag = _tag_name(el)
    block_type = BLOCK_TAGS.get(tag)
    if block_type is None:
        return None

    data = {}
    if tag in CLASS_NAME_TAGS:
        class_name = _class_name(el)
        if class_name:
            data["className"] = class_name
    return Block(type=block_type, data=data, nodes=next(el.contents))


def serialize_block(node: ModelNode, children: str) -> Optional[str]:
    if not isinstance(node, Block):
        return None
    tag = BLOCK_TYPES.get(node.type)
    if tag is None:
        return None

    if tag == "pre":
        # Line breaks inside preformatted text stay literal.
        body = children.replace("<br>", "\n")
        return f"<pre><code>{body}</code></pre>"

    attrs = ""
    class_name = node.data.get("className")
    if tag in CLASS_NAME_TAGS and class_name:
        attrs = f' class="{_escape_attr(class_name)}"'
    return f"<{tag}{attrs}>{children}</{tag}>"


def deserialize_mark(el, next: NextFn):
    mark_type = MARK_TAGS.get(_tag_name(el))
    if mark_type is None:
        return None
    return Mark(type=mark_type, nodes=next(el.contents))


def serialize_mark(node: ModelNode, children: str) -> Optional[str]:
    if not isinstance(node, Mark):
        return None
    tag = MARK_TYPES.get(node.type)
    if tag is None:
        return None
    return f"<{tag}>{children}</{tag}>"


# ---------------------------------------------------------------------------
# text
# ---------------------------------------------------------------------------


def deserialize_text(el, next: NextFn):
    if _tag_name(el) == "br":
        return Text(text="\n")
    return None


def serialize_text(node: ModelNode, children: str) -> Optional[str]:
    if not isinstance(node, Text):
        return None
    lines = children.split("\n")
    return "<br>".join(html_module.escape(line, quote=False) for line in lines)


TEXT_RULE = Rule(deserialize=deserialize_text, serialize=serialize_text, name="text")

RULES = RuleChain([
    # Specific rules first: the generic block rule would otherwise claim <pre>.
    Rule(deserialize=deserialize_code_block, name="code-block"),
    Rule(deserialize=deserialize_image, name="image"),
    Rule(deserialize=deserialize_link, name="link"),
    Rule(deserialize=deserialize_block, serialize=serialize_block, name="block"),
    Rule(deserialize=deserialize_mark, serialize=serialize_mark, name="mark"),
])
