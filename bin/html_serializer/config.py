"""Centralized configuration management."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

UNKNOWN_ELEMENT_POLICIES = ("drop", "unwrap")

# Environment variable -> (Config field, built-in default)
_FALLBACKS = {
    "HTML_SERIALIZER_DEFAULT_BLOCK": ("default_block", "paragraph"),
    "HTML_SERIALIZER_MAX_DEPTH": ("max_depth", 128),
    "HTML_SERIALIZER_UNKNOWN_ELEMENTS": ("unknown_elements", "drop"),
    "HTML_SERIALIZER_PARSER": ("parser", "html.parser"),
}


@dataclass
class Config:
    """Serializer settings

    Fields left as None fall back to their environment variable, then to the
    built-in default. Values passed explicitly always win.
    """
    default_block: Optional[str] = None  # Block type wrapping top-level text and inlines (default "paragraph")
    max_depth: Optional[int] = None  # Deepest element/node nesting walked before giving up (default 128)
    unknown_elements: Optional[str] = None  # "drop" the subtree or "unwrap" to its children (default "drop")
    parser: Optional[str] = None  # BeautifulSoup tree builder (default "html.parser")
    use_env: bool = True

    def __post_init__(self):
        for env_name, (field_name, default) in _FALLBACKS.items():
            if getattr(self, field_name) is not None:
                continue
            value = os.environ.get(env_name) if self.use_env else None
            setattr(self, field_name, value or default)

        try:
            self.max_depth = int(self.max_depth)
        except (TypeError, ValueError):
            raise ValueError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")

        self.unknown_elements = str(self.unknown_elements).strip().lower()
        if self.unknown_elements not in UNKNOWN_ELEMENT_POLICIES:
            raise ValueError(
                f"unknown_elements must be one of {', '.join(UNKNOWN_ELEMENT_POLICIES)}, "
                f"got {self.unknown_elements!r}"
            )
        if not self.default_block:
            raise ValueError("default_block must not be empty")


def load_config(path: Optional[Path] = None, use_env: bool = True) -> Config:
    """Load a Config from a YAML file; missing keys keep their defaults."""
    if path is None:
        return Config(use_env=use_env)

    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file must contain a mapping: {path}")

    known = {f.name for f in fields(Config)} - {"use_env"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
    return Config(use_env=use_env, **data)
