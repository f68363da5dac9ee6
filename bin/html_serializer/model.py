"""Rich-text document model: document, block, inline, mark and text nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from .errors import MalformedInputError


@dataclass
class Text:
    """Text leaf with its attached mark types, innermost wrapper first."""

    text: str = ""
    marks: tuple[str, ...] = ()

    object: ClassVar[str] = "text"

    def add_mark(self, mark_type: str) -> None:
        if mark_type not in self.marks:
            self.marks = self.marks + (mark_type,)


@dataclass
class Mark:
    """Formatting wrapper produced by a rule.

    Marks only live between a rule returning one and the serializer flattening
    it onto the text leaves below it.
    """

    type: str
    data: dict = field(default_factory=dict)
    nodes: list["ModelNode"] = field(default_factory=list)

    object: ClassVar[str] = "mark"


@dataclass
class Inline:
    type: str
    data: dict = field(default_factory=dict)
    nodes: list["ModelNode"] = field(default_factory=list)

    object: ClassVar[str] = "inline"


@dataclass
class Block:
    type: str
    data: dict = field(default_factory=dict)
    nodes: list["ModelNode"] = field(default_factory=list)

    object: ClassVar[str] = "block"


@dataclass
class Document:
    nodes: list[Block] = field(default_factory=list)
    data: dict = field(default_factory=dict)

    object: ClassVar[str] = "document"


ModelNode = Union[Document, Block, Inline, Mark, Text]

MODEL_NODE_TYPES = (Document, Block, Inline, Mark, Text)


def node_to_dict(node: ModelNode) -> dict[str, Any]:
    """Convert a model node into plain JSON/YAML friendly data."""
    if isinstance(node, Text):
        return {"object": "text", "text": node.text, "marks": list(node.marks)}

    if isinstance(node, Document):
        return {
            "object": "document",
            "data": dict(node.data),
            "nodes": [node_to_dict(child) for child in node.nodes],
        }

    if isinstance(node, (Block, Inline, Mark)):
        return {
            "object": node.object,
            "type": node.type,
            "data": dict(node.data),
            "nodes": [node_to_dict(child) for child in node.nodes],
        }

    raise MalformedInputError(f"not a model node: {node!r}")


def node_from_dict(data: Any) -> ModelNode:
    """Build a model node from its dict form.

    Accepts the ``{"object": "value", "document": {...}}`` wrapper used by
    editor state dumps, and marks written either as strings or as
    ``{"type": ...}`` objects. Nesting deep enough to exhaust the interpreter
    stack raises MalformedInputError like any other invalid model.
    """
    try:
        return _node_from_dict(data)
    except RecursionError as exc:
        raise MalformedInputError("model nesting exhausted the interpreter stack") from exc


def _node_from_dict(data: Any) -> ModelNode:
    if not isinstance(data, dict):
        raise MalformedInputError(f"expected a mapping, got {type(data).__name__}")

    kind = data.get("object")
    if kind == "value":
        return _node_from_dict(data.get("document"))

    if kind == "text":
        return Text(text=str(data.get("text", "")), marks=_marks_from_dict(data.get("marks")))

    nodes = data.get("nodes", [])
    if not isinstance(nodes, list):
        raise MalformedInputError(f"'nodes' must be a list in {kind} node")
    node_data = data.get("data") or {}
    if not isinstance(node_data, dict):
        raise MalformedInputError(f"'data' must be a mapping in {kind} node")

    if kind == "document":
        children = [_node_from_dict(child) for child in nodes]
        for child in children:
            if isinstance(child, Document):
                raise MalformedInputError("document nodes cannot be nested")
        return Document(nodes=children, data=dict(node_data))

    if kind in ("block", "inline", "mark"):
        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise MalformedInputError(f"{kind} node is missing its 'type'")
        children = [_node_from_dict(child) for child in nodes]
        for child in children:
            if isinstance(child, Document):
                raise MalformedInputError("document nodes cannot be nested")
        cls = {"block": Block, "inline": Inline, "mark": Mark}[kind]
        return cls(type=node_type, data=dict(node_data), nodes=children)

    raise MalformedInputError(f"unknown node object: {kind!r}")


def _marks_from_dict(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise MalformedInputError("'marks' must be a list")

    marks: list[str] = []
    for item in raw:
        mark_type = item.get("type") if isinstance(item, dict) else item
        if not isinstance(mark_type, str) or not mark_type:
            raise MalformedInputError(f"invalid mark: {item!r}")
        if mark_type not in marks:
            marks.append(mark_type)
    return tuple(marks)
