"""CLI helper that summarises a decoded bead pattern."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Sequence, TypedDict

from .pattern import Pattern, color_totals
from .pattern_loader import load_pattern_file


class ColorRecord(TypedDict):
    """Physical bead total for one color."""

    color: str
    beads: int


class PatternPayload(TypedDict):
    """Structured summary of a pattern."""

    name: str
    rows: int
    columns: int
    bead_runs: int
    total_beads: int
    colors: list[ColorRecord]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed command-line arguments for the pattern summary CLI."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "pattern",
        type=Path,
        help="Pattern markup file or image with an embedded pattern",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the summary as a JSON object",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def build_pattern_payload(pattern: Pattern) -> PatternPayload:
    """Collect the structured summary for ``pattern``."""

    return PatternPayload(
        name=pattern.name,
        rows=pattern.rows,
        columns=pattern.columns,
        bead_runs=pattern.bead_count,
        total_beads=pattern.total_beads,
        colors=[
            ColorRecord(color=color, beads=total)
            for color, total in color_totals(pattern).items()
        ],
    )


def render_pattern(pattern: Pattern) -> List[str]:
    """Return human-readable summary lines for ``pattern``."""

    payload = build_pattern_payload(pattern)
    lines = [
        f"Pattern: {payload['name'] or '<unnamed>'}",
        f"Grid: {payload['columns']} columns x {payload['rows']} rows",
        f"Bead runs: {payload['bead_runs']} ({payload['total_beads']} beads)",
    ]
    if payload["colors"]:
        lines.append("")
        lines.append("Colors:")
        width = max(len(record["color"]) for record in payload["colors"])
        for record in payload["colors"]:
            lines.append(f"  {record['color']:<{width}}  {record['beads']}")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))

    pattern = asyncio.run(load_pattern_file(args.pattern))
    if pattern is None:
        print(f"unable to decode pattern: {args.pattern}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(build_pattern_payload(pattern), indent=2))
    else:
        print("\n".join(render_pattern(pattern)))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())


__all__ = [
    "ColorRecord",
    "PatternPayload",
    "build_pattern_payload",
    "main",
    "parse_args",
    "render_pattern",
]
