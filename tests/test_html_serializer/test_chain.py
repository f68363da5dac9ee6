import pytest
from bs4 import BeautifulSoup

from html_serializer import Block, MalformedInputError, Rule, RuleChain, Text
from html_serializer.rules import (
    RULES,
    deserialize_block,
    deserialize_code_block,
    deserialize_mark,
)
from html_serializer.serializer import Serializer


def _el(markup: str):
    soup = BeautifulSoup(markup, "html.parser")
    return soup.contents[0]


def _no_children(children):
    return []


def test_first_matching_rule_wins():
    chain = RuleChain([
        Rule(deserialize=lambda el, next: Block(type="first"), name="first"),
        Rule(deserialize=lambda el, next: Block(type="second"), name="second"),
    ])
    assert chain.deserialize(_el("<p>x</p>"), _no_children) == [Block(type="first")]


def test_rules_returning_none_are_skipped():
    chain = RuleChain([
        Rule(deserialize=lambda el, next: None),
        Rule(serialize=lambda node, children: "<never/>"),
        Rule(deserialize=lambda el, next: Block(type="hit")),
    ])
    assert chain.deserialize(_el("<p>x</p>"), _no_children) == [Block(type="hit")]


def test_no_match_returns_none():
    chain = RuleChain([Rule(deserialize=deserialize_block)])
    assert chain.deserialize(_el("<span>x</span>"), _no_children) is None
    assert chain.serialize(Block(type="paragraph"), "") is None


def test_empty_list_is_a_match():
    chain = RuleChain([
        Rule(deserialize=lambda el, next: []),
        Rule(deserialize=lambda el, next: Block(type="unreachable")),
    ])
    assert chain.deserialize(_el("<p>x</p>"), _no_children) == []


def test_serialize_dispatch_in_order():
    chain = RuleChain([
        Rule(serialize=lambda node, children: None),
        Rule(serialize=lambda node, children: f"<a>{children}</a>"),
        Rule(serialize=lambda node, children: f"<b>{children}</b>"),
    ])
    assert chain.serialize(Block(type="paragraph"), "x") == "<a>x</a>"


def test_invalid_deserialize_value_raises():
    chain = RuleChain([Rule(deserialize=lambda el, next: "oops", name="bad")])
    with pytest.raises(MalformedInputError, match="bad"):
        chain.deserialize(_el("<p>x</p>"), _no_children)


def test_invalid_serialize_value_raises():
    chain = RuleChain([Rule(serialize=lambda node, children: 42, name="bad")])
    with pytest.raises(MalformedInputError):
        chain.serialize(Block(type="paragraph"), "")


def test_chain_is_immutable():
    chain = RuleChain([Rule(deserialize=deserialize_block)])
    extended = chain + [Rule(deserialize=deserialize_mark)]
    assert len(chain) == 1
    assert len(extended) == 2
    assert extended.extend([]).rules == extended.rules
    assert isinstance(chain.rules, tuple)


def test_non_rule_rejected():
    with pytest.raises(TypeError):
        RuleChain([lambda el, next: None])


def test_default_rule_order_puts_specific_rules_first():
    names = [rule.name for rule in RULES]
    assert names.index("code-block") < names.index("block")
    assert names.index("image") < names.index("block")
    assert names.index("link") < names.index("mark")


def test_generic_block_rule_before_code_block_keeps_code_mark():
    """Reordering the chain changes what <pre><code> becomes."""
    generic_first = RuleChain([
        Rule(deserialize=deserialize_block),
        Rule(deserialize=deserialize_code_block),
        Rule(deserialize=deserialize_mark),
    ])
    doc = Serializer(generic_first).deserialize("<pre><code>text</code></pre>")
    assert doc.nodes == [Block(type="code", nodes=[Text("text", marks=("code",))])]

    doc = Serializer(RULES).deserialize("<pre><code>text</code></pre>")
    assert doc.nodes == [Block(type="code", nodes=[Text("text")])]
