import json

import pytest

from html_serializer import (
    Block,
    Document,
    Inline,
    MalformedInputError,
    Text,
    node_from_dict,
    node_to_dict,
)


def _sample_document() -> Document:
    return Document(nodes=[
        Block(type="paragraph", data={"className": "lead"}, nodes=[
            Text("see "),
            Inline(type="link", data={"href": "y"}, nodes=[Text("here", marks=("bold",))]),
        ]),
        Block(type="image", data={"src": "x.png"}),
    ])


def test_node_to_dict_shape():
    data = node_to_dict(_sample_document())
    assert data == {
        "object": "document",
        "data": {},
        "nodes": [
            {
                "object": "block",
                "type": "paragraph",
                "data": {"className": "lead"},
                "nodes": [
                    {"object": "text", "text": "see ", "marks": []},
                    {
                        "object": "inline",
                        "type": "link",
                        "data": {"href": "y"},
                        "nodes": [{"object": "text", "text": "here", "marks": ["bold"]}],
                    },
                ],
            },
            {"object": "block", "type": "image", "data": {"src": "x.png"}, "nodes": []},
        ],
    }
    json.dumps(data)


def test_node_from_dict_rebuilds_nodes():
    document = _sample_document()
    assert node_from_dict(json.loads(json.dumps(node_to_dict(document)))) == document


def test_node_from_dict_accepts_value_wrapper_and_mark_objects():
    data = {
        "object": "value",
        "document": {
            "object": "document",
            "nodes": [{
                "object": "block",
                "type": "paragraph",
                "nodes": [{"object": "text", "text": "x", "marks": [{"type": "bold"}, "bold", "italic"]}],
            }],
        },
    }
    assert node_from_dict(data) == Document(nodes=[
        Block(type="paragraph", nodes=[Text("x", marks=("bold", "italic"))]),
    ])


@pytest.mark.parametrize(
    "data",
    [
        "not a mapping",
        {"object": "widget"},
        {"object": "block", "nodes": []},
        {"object": "block", "type": "paragraph", "nodes": "x"},
        {"object": "block", "type": "paragraph", "data": ["x"]},
        {"object": "text", "text": "x", "marks": "bold"},
        {"object": "text", "text": "x", "marks": [3]},
        {"object": "block", "type": "quote", "nodes": [{"object": "document", "nodes": []}]},
    ],
)
def test_node_from_dict_rejects_malformed_data(data):
    with pytest.raises(MalformedInputError):
        node_from_dict(data)


def test_node_from_dict_rejects_nesting_beyond_the_stack():
    data = {"object": "text", "text": "x"}
    for _ in range(5000):
        data = {"object": "block", "type": "quote", "nodes": [data]}
    with pytest.raises(MalformedInputError, match="interpreter stack"):
        node_from_dict({"object": "document", "nodes": [data]})


def test_text_add_mark_keeps_order_without_duplicates():
    leaf = Text("x")
    leaf.add_mark("italic")
    leaf.add_mark("bold")
    leaf.add_mark("italic")
    assert leaf.marks == ("italic", "bold")


def test_object_tags():
    assert [cls.object for cls in (Document, Block, Inline, Text)] == ["document", "block", "inline", "text"]
