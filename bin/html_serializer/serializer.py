"""Convert between HTML markup and the rich-text document model.

``Serializer.deserialize`` walks a BeautifulSoup tree top-down and asks the
rule chain to turn each element into model nodes. Rules decide which children
to recurse into through the ``next`` callback they receive. Mark rules are
flattened: their mark type ends up on every text leaf below them.

``Serializer.serialize`` walks the model bottom-up, rendering children before
asking the rule chain to render the parent. Nodes no rule renders are left out
of the output.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from bs4 import BeautifulSoup, NavigableString
from bs4.element import PageElement, PreformattedString

from .chain import Rule, RuleChain
from .config import Config
from .errors import MalformedInputError
from .model import Block, Document, Inline, Mark, ModelNode, Text, node_from_dict
from .rules import RULES, TEXT_RULE
from .whitespace import collapse_ws, in_preformatted, is_formatting_whitespace

logger = logging.getLogger(__name__)

Markup = Union[str, bytes, PageElement]


class Serializer:
    def __init__(
        self,
        rules: Union[RuleChain, Iterable[Rule]] = RULES,
        config: Optional[Config] = None,
    ) -> None:
        if not isinstance(rules, RuleChain):
            rules = RuleChain(rules)
        self.chain = rules + [TEXT_RULE]
        self.config = config if config is not None else Config()

    # -----------------------------------------------------------------------
    # markup -> model
    # -----------------------------------------------------------------------

    def deserialize(self, markup: Markup) -> Document:
        """Deserialize markup into a Document."""
        if isinstance(markup, (str, bytes)) and not markup.strip():
            top_level = []
        else:
            root = self._parse(markup)
            top_level = list(root.contents) if isinstance(root, BeautifulSoup) else [root]

        try:
            nodes = self._deserialize_elements(top_level, depth=1)
        except RecursionError as exc:
            raise MalformedInputError("markup nesting exhausted the interpreter stack") from exc

        blocks = self._wrap_top_level(nodes)
        if not blocks:
            blocks = [Block(type=self.config.default_block)]
        return Document(nodes=blocks)

    def _parse(self, markup: Markup) -> PageElement:
        if isinstance(markup, PageElement):
            return markup
        if isinstance(markup, bytes):
            markup = markup.decode("utf-8")
        if not isinstance(markup, str):
            raise MalformedInputError(f"cannot deserialize {type(markup).__name__}")
        return BeautifulSoup(markup, self.config.parser)

    def _deserialize_elements(self, elements: Iterable[PageElement], depth: int) -> list[ModelNode]:
        if depth > self.config.max_depth:
            raise MalformedInputError(f"markup nesting exceeds max depth {self.config.max_depth}")

        nodes: list[ModelNode] = []
        for el in elements:
            if not isinstance(el, PageElement):
                raise MalformedInputError(f"not a markup node: {el!r}")
            if _is_cruft(el):
                continue
            nodes.extend(self._deserialize_element(el, depth))
        return nodes

    def _deserialize_element(self, el: PageElement, depth: int) -> list[ModelNode]:
        def next(children: Any) -> list[ModelNode]:
            if children is None:
                return []
            if isinstance(children, PageElement) and not isinstance(children, BeautifulSoup):
                return self._deserialize_elements([children], depth + 1)
            if isinstance(children, (str, bytes, dict)) or not hasattr(children, "__iter__"):
                raise MalformedInputError(f"next() called with invalid children: {children!r}")
            return self._deserialize_elements(list(children), depth + 1)

        matched = self.chain.deserialize(el, next)
        if matched is not None:
            if any(isinstance(node, Document) for node in matched):
                raise MalformedInputError(f"rule returned a document for <{getattr(el, 'name', None)}>")
            return self._resolve_marks(matched)

        if isinstance(el, NavigableString):
            text = str(el)
            if not in_preformatted(el):
                text = collapse_ws(text)
            return [Text(text=text)]

        if self.config.unknown_elements == "unwrap":
            logger.debug(f"Unwrapping unrecognized element <{el.name}>")
            return next(el.contents)

        logger.debug(f"Dropping unrecognized element <{el.name}>")
        return []

    def _resolve_marks(self, nodes: list[ModelNode]) -> list[ModelNode]:
        resolved: list[ModelNode] = []
        for node in nodes:
            if isinstance(node, Mark):
                resolved.extend(_flatten_mark(node))
            else:
                resolved.append(node)
        return resolved

    def _wrap_top_level(self, nodes: list[ModelNode]) -> list[Block]:
        blocks: list[Block] = []
        wrapper: Optional[Block] = None
        for node in nodes:
            if isinstance(node, Block):
                blocks.append(node)
                wrapper = None
                continue
            if wrapper is None:
                wrapper = Block(type=self.config.default_block)
                blocks.append(wrapper)
            wrapper.nodes.append(node)
        return blocks

    # -----------------------------------------------------------------------
    # model -> markup
    # -----------------------------------------------------------------------

    def serialize(self, document: Union[Document, list, dict]) -> str:
        """Serialize a Document (or its dict form, or a list of blocks) to markup."""
        if isinstance(document, dict):
            document = node_from_dict(document)
        if isinstance(document, list):
            document = Document(nodes=document)
        if not isinstance(document, Document):
            raise MalformedInputError(f"expected a document, got {type(document).__name__}")

        parts = []
        try:
            for node in document.nodes:
                parts.append(self.serialize_node(node))
        except RecursionError as exc:
            raise MalformedInputError("document nesting exhausted the interpreter stack") from exc
        return "".join(parts)

    def serialize_node(self, node: ModelNode, depth: int = 1) -> str:
        if depth > self.config.max_depth:
            raise MalformedInputError(f"document nesting exceeds max depth {self.config.max_depth}")
        if isinstance(node, Document):
            raise MalformedInputError("document nodes cannot be nested")

        if isinstance(node, Text):
            return self._serialize_leaf(node)

        if not isinstance(node, (Block, Inline, Mark)):
            raise MalformedInputError(f"not a model node: {node!r}")

        parts = []
        for child in node.nodes:
            parts.append(self.serialize_node(child, depth + 1))
        children = "".join(parts)

        rendered = self.chain.serialize(node, children)
        if rendered is None:
            logger.debug(f"No serializer for {node.object} {node.type!r}; omitting it")
            return ""
        return rendered

    def _serialize_leaf(self, leaf: Text) -> str:
        rendered = self.chain.serialize(leaf, leaf.text)
        if rendered is None:
            logger.debug("No serializer for text leaf; omitting it")
            return ""

        for mark_type in leaf.marks:
            wrapped = self.chain.serialize(Mark(type=mark_type), rendered)
            if wrapped is None:
                logger.debug(f"No serializer for mark {mark_type!r}; leaving text unwrapped")
                continue
            rendered = wrapped
        return rendered


def _is_cruft(el: PageElement) -> bool:
    if isinstance(el, PreformattedString):
        return True
    if isinstance(el, NavigableString):
        return is_formatting_whitespace(el)
    return False


def _flatten_mark(mark: Mark) -> list[ModelNode]:
    flattened: list[ModelNode] = []
    for child in mark.nodes:
        if isinstance(child, Mark):
            flattened.extend(_apply_mark(node, mark.type) for node in _flatten_mark(child))
        else:
            flattened.append(_apply_mark(child, mark.type))
    return flattened


def _apply_mark(node: ModelNode, mark_type: str) -> ModelNode:
    if isinstance(node, Text):
        node.add_mark(mark_type)
    elif isinstance(node, (Block, Inline)):
        for child in node.nodes:
            _apply_mark(child, mark_type)
    return node
