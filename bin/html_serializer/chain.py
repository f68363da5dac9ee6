"""Ordered rule chain with first-match-wins dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from bs4.element import PageElement

from .errors import MalformedInputError
from .model import MODEL_NODE_TYPES, ModelNode

# next(children) -> deserialized nodes of those children
NextFn = Callable[[Any], list[ModelNode]]
DeserializeFn = Callable[[PageElement, NextFn], Any]
SerializeFn = Callable[[ModelNode, str], Optional[str]]


@dataclass(frozen=True)
class Rule:
    """A pair of optional transforms tried against a single node.

    ``deserialize(el, next)`` returns a model node, a list of model nodes, or
    ``None`` when the rule does not apply. An empty list claims the element
    and emits nothing.

    ``serialize(node, children)`` returns the rendered markup or ``None``.
    """

    deserialize: Optional[DeserializeFn] = None
    serialize: Optional[SerializeFn] = None
    name: str = ""


class RuleChain:
    """Immutable, ordered sequence of rules."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules = tuple(rules)
        for rule in self._rules:
            if not isinstance(rule, Rule):
                raise TypeError(f"expected Rule, got {type(rule).__name__}")

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __add__(self, other: Iterable[Rule]) -> "RuleChain":
        return RuleChain(self._rules + tuple(other))

    def extend(self, rules: Iterable[Rule]) -> "RuleChain":
        return self + rules

    def deserialize(self, el: PageElement, next: NextFn) -> Optional[list[ModelNode]]:
        """Return the first rule result as a node list, or None if no rule matched."""
        for rule in self._rules:
            if rule.deserialize is None:
                continue
            ret = rule.deserialize(el, next)
            if ret is None:
                continue
            return _as_node_list(ret, rule)
        return None

    def serialize(self, node: ModelNode, children: str) -> Optional[str]:
        """Return the first rule rendering of ``node``, or None if no rule matched."""
        for rule in self._rules:
            if rule.serialize is None:
                continue
            ret = rule.serialize(node, children)
            if ret is None:
                continue
            if not isinstance(ret, str):
                raise MalformedInputError(
                    f"rule {rule.name or rule!r} returned {type(ret).__name__} from serialize"
                )
            return ret
        return None


def _as_node_list(ret: Any, rule: Rule) -> list[ModelNode]:
    if isinstance(ret, MODEL_NODE_TYPES):
        return [ret]
    if isinstance(ret, list) and all(isinstance(item, MODEL_NODE_TYPES) for item in ret):
        return ret
    raise MalformedInputError(
        f"rule {rule.name or rule!r} returned an invalid deserialized value: {ret!r}"
    )
