#!/usr/bin/env python3
"""CLI tool to parse JotChord charts and export to JSON or text.

Usage:
    python examples/parse_chart.py <input_file> [-o output_file]

Examples:
    python examples/parse_chart.py charts/amazing_grace.txt --pretty
    python examples/parse_chart.py charts/amazing_grace.txt --format text
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from jotchord import Chord, Measure, Section, Song, display_name, parse_song, serialize_song


def chord_to_dict(chord: Chord, key: str, letters: bool) -> dict[str, Any]:
    """Convert a Chord to a JSON-serializable dict, omitting unset modifiers."""
    result: dict[str, Any] = {"number": chord.number}
    if letters:
        result["name"] = display_name(chord, key, nashville=False)

    for name in ("beats", "push", "walk", "modulation", "ending", "inline_comment"):
        value = getattr(chord, name)
        if value is not None:
            result[name] = value
    for name in ("accent", "diamond", "tie", "fermata", "is_rest"):
        if getattr(chord, name):
            result[name] = True

    if chord.annotation is not None:
        result["note_value"] = chord.annotation.name
    if chord.in_parentheses:
        result["group"] = chord.parentheses_group_id
    return result


def measure_to_dict(measure: Measure, key: str, letters: bool) -> dict[str, Any]:
    """Convert a Measure to a JSON-serializable dict."""
    if measure.navigation_marker is not None:
        return {
            "type": "marker",
            "kind": measure.navigation_marker.kind,
            "label": measure.navigation_marker.label,
        }

    if measure.is_repeat:
        data: dict[str, Any] = {"type": "repeat", "count": measure.repeat_count}
    elif measure.chords:
        data = {
            "type": "split_bar" if measure.is_split_bar else "measure",
            "raw": measure.raw_text,
            "chords": [chord_to_dict(chord, key, letters) for chord in measure.chords],
        }
    else:
        data = {"type": "empty"}

    if measure.meter_change:
        data["meter"] = measure.meter_change
    if measure.comment:
        data["comment"] = measure.comment
    return data


def section_to_dict(section: Section, key: str, letters: bool) -> dict[str, Any]:
    """Convert a Section to a JSON-serializable dict, one entry per source line."""
    lines = []
    for line in section.measure_lines:
        line_data: dict[str, Any] = {
            "measures": [measure_to_dict(m, key, letters) for m in line.measures],
        }
        if line.is_repeat:
            line_data["repeat"] = line.repeat_multiplier or 2
        lines.append(line_data)
    return {"name": section.name, "lines": lines}


def song_to_dict(song: Song, letters: bool = False) -> dict[str, Any]:
    """Convert a Song to a JSON-serializable dict."""
    metadata = song.metadata
    return {
        "metadata": {
            "title": metadata.title,
            "key": metadata.key,
            "tempo": metadata.tempo,
            "meter": metadata.time_signature,
            "style": metadata.style,
            "feel": metadata.feel,
            "custom": dict(metadata.custom_properties),
        },
        "sections": [section_to_dict(s, metadata.key, letters) for s in song.sections],
    }


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Parse a JotChord chart and export to JSON or text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s chart.txt
  %(prog)s chart.txt -o chart.json --pretty --letters
  %(prog)s chart.txt --format text --one-bar-per-chord
        """,
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Input chart file to parse",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--format",
        choices=("json", "text"),
        default="json",
        help="Output format: JSON structure or canonical chart text",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output",
    )
    parser.add_argument(
        "--letters",
        action="store_true",
        help="Add letter chord names in the chart's key to JSON output",
    )
    parser.add_argument(
        "--one-bar-per-chord",
        action="store_true",
        help="Put every plain chord in its own measure",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log skipped notation to stderr",
    )

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    song = parse_song(args.input.read_text(), one_bar_per_chord=args.one_bar_per_chord)

    if args.format == "text":
        output = serialize_song(song, canonical=True) + "\n"
    else:
        data = song_to_dict(song, letters=args.letters)
        indent = 2 if args.pretty else None
        output = json.dumps(data, indent=indent, ensure_ascii=False)

    if args.output:
        args.output.write_text(output)
        print(f"Wrote output to {args.output}")
    else:
        print(output, end="" if output.endswith("\n") else "\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
