"""HTML <-> rich-text document model serialization package."""

from .chain import Rule, RuleChain
from .config import Config, load_config
from .errors import MalformedInputError, SerializerError
from .model import Block, Document, Inline, Mark, Text, node_from_dict, node_to_dict
from .normalize import VerifyResult, is_stable, normalize_markup, verify_roundtrip
from .rules import BLOCK_TAGS, MARK_TAGS, RULES, TEXT_RULE
from .serializer import Serializer

__all__ = [
    "BLOCK_TAGS",
    "Block",
    "Config",
    "Document",
    "Inline",
    "MARK_TAGS",
    "MalformedInputError",
    "Mark",
    "RULES",
    "Rule",
    "RuleChain",
    "Serializer",
    "SerializerError",
    "TEXT_RULE",
    "Text",
    "VerifyResult",
    "is_stable",
    "load_config",
    "node_from_dict",
    "node_to_dict",
    "normalize_markup",
    "verify_roundtrip",
]
