#!/usr/bin/env python3
"""HTML <-> document model CLI.

Unified entry point for deserialize, serialize, and verify subcommands.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml

from html_serializer import (
    MalformedInputError,
    Serializer,
    load_config,
    node_from_dict,
    node_to_dict,
    verify_roundtrip,
)

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert HTML markup to a rich-text document model and back",
    )
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # --- deserialize ---
    de = sub.add_parser("deserialize", help="Convert an HTML file to a document model")
    de.add_argument("input_html", type=Path, help="Input HTML file")
    de.add_argument("-o", "--output", type=Path, help="Output model file")
    de.add_argument(
        "--format",
        choices=("json", "yaml"),
        default=None,
        help="Output format (default: from --output suffix, else json)",
    )

    # --- serialize ---
    se = sub.add_parser("serialize", help="Convert a document model file to HTML")
    se.add_argument("input_model", type=Path, help="Input model file (.json, .yaml, .yml)")
    se.add_argument("-o", "--output", type=Path, help="Output HTML file")

    # --- verify ---
    verify = sub.add_parser("verify", help="Check that an HTML file survives a round trip")
    verify.add_argument("input_html", type=Path, help="Input HTML file")
    verify.add_argument("--show-diff", action="store_true", help="Print diff when verification fails")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _output_format(args: argparse.Namespace) -> str:
    if args.format:
        return args.format
    if args.output is not None and args.output.suffix.lower() in _YAML_SUFFIXES:
        return "yaml"
    return "json"


def _dump_model(data: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, allow_unicode=True, default_flow_style=False, sort_keys=False)
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def _load_model(path: Path):
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def _write_or_print(output: Optional[Path], text: str, label: str) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        print(f"[{label}] wrote: {output}")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def _run_deserialize(args: argparse.Namespace, serializer: Serializer) -> int:
    if not args.input_html.exists():
        print(f"Error: input file not found: {args.input_html}", file=sys.stderr)
        return 2

    markup = args.input_html.read_text(encoding="utf-8")
    document = serializer.deserialize(markup)
    logger.debug(f"Deserialized {len(document.nodes)} top-level blocks from {args.input_html}")
    _write_or_print(args.output, _dump_model(node_to_dict(document), _output_format(args)), "deserialize")
    return 0


def _run_serialize(args: argparse.Namespace, serializer: Serializer) -> int:
    if not args.input_model.exists():
        print(f"Error: input file not found: {args.input_model}", file=sys.stderr)
        return 2

    try:
        data = _load_model(args.input_model)
    except (json.JSONDecodeError, yaml.YAMLError, RecursionError) as e:
        print(f"Error: cannot parse model file {args.input_model}: {e}", file=sys.stderr)
        return 2

    markup = serializer.serialize(node_from_dict(data))
    _write_or_print(args.output, markup + "\n", "serialize")
    return 0


def _run_verify(args: argparse.Namespace, serializer: Serializer) -> int:
    if not args.input_html.exists():
        print(f"Error: input file not found: {args.input_html}", file=sys.stderr)
        return 2

    markup = args.input_html.read_text(encoding="utf-8")
    result = verify_roundtrip(serializer, markup)
    if result.passed:
        print("[verify] passed")
        return 0
    print("[verify] failed")
    if args.show_diff:
        print(result.diff_report)
    return 1


# ---------------------------------------------------------------------------
# main dispatch
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: invalid config {args.config}: {e}", file=sys.stderr)
        return 2
    serializer = Serializer(config=config)

    handlers = {
        "deserialize": _run_deserialize,
        "serialize": _run_serialize,
        "verify": _run_verify,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, serializer)
    except MalformedInputError as e:
        print(f"Error: malformed input: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
