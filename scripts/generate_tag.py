#!/usr/bin/env python3
"""
Generate a 3D-printable tag from a JSON description.

Usage:
    python scripts/generate_tag.py --config tag.json --output out
    python scripts/generate_tag.py --text "**Hello World**" --placement bottom
    python scripts/generate_tag.py --config tag.json --format glb --parts combined
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from keytag import ConfigError, GenerationError, TagConfig, check_config, generate, load_config
from keytag.config import TextAlign, TextPlacement
from keytag.contracts import PART_NAMES
from keytag.export import FILE_TYPES, export_parts, summarize, write_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a parametric tag (plate, border, label, keychain loop)"
    )
    parser.add_argument("--config", default=None, help="Path to a JSON tag description")
    parser.add_argument("--text", default=None, help="Label message (enables the label)")
    parser.add_argument(
        "--placement",
        default=None,
        choices=[p.value for p in TextPlacement],
        help="Label placement override",
    )
    parser.add_argument(
        "--align",
        default=None,
        choices=[a.value for a in TextAlign],
        help="Label alignment override",
    )
    parser.add_argument("--output", default="output", help="Output directory")
    parser.add_argument("--name", default="tag", help="File name prefix")
    parser.add_argument(
        "--format", default="stl", choices=list(FILE_TYPES), help="Mesh file format (default: stl)"
    )
    parser.add_argument(
        "--parts",
        nargs="+",
        default=None,
        choices=list(PART_NAMES),
        help="Only export these parts (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")
    return parser


def _apply_overrides(config: TagConfig, args: argparse.Namespace) -> TagConfig:
    base = config.base
    if args.text is not None:
        base = replace(base, has_text=True, text_message=args.text.replace("\\n", "\n"))
    if args.placement is not None:
        base = replace(base, text_placement=TextPlacement(args.placement))
    if args.align is not None:
        base = replace(base, text_align=TextAlign(args.align))
    return replace(config, base=base)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else TagConfig()
        config = check_config(_apply_overrides(config, args))
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        result = generate(config)
    except GenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    written = export_parts(result, args.output, args.name, args.format, args.parts)
    summary_path = Path(args.output) / f"{args.name}_summary.json"
    summary = summarize(result)
    write_json(summary_path, summary)

    print(f"\nTag: {args.name}")
    if result.lines:
        print(f"Label lines: {len(result.lines)}")
        for line in result.lines:
            print(f"  | {line}")
    for part, info in summary["parts"].items():
        x, y, z = info["extents_mm"]
        marker = "*" if part in written else " "
        print(f" {marker} {part}: {x:.1f} x {y:.1f} x {z:.1f} mm ({info['faces']} faces)")
    print(f"\nFiles: {len(written)} exported to {args.output}/")
    print(f"Summary: {summary_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
