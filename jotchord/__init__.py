"""JotChord library for parsing and writing shorthand chord charts.

This library parses JotChord text (sections, Nashville-number or letter
chords, beat dots, ties, repeats, endings and navigation markers) into
structured songs, writes them back to text, and converts chord names
between Nashville numbers and letter names.

Examples
--------
>>> from jotchord import parse, serialize

>>> # Parse a chart
>>> result = parse("Key: G\\n\\nV1:\\n  1 4 | 5... 1")
>>> result.metadata.key
'G'
>>> [m.raw_text for m in result.sections[0].measures]
['1 4', '5... 1']

>>> # Write it back
>>> print(serialize(result.sections))
V1:
    1 4 | 5... 1

>>> # Convert chord names
>>> from jotchord import nashville_to_chord, chord_to_nashville
>>> nashville_to_chord("2-", "G")
'Am'
>>> chord_to_nashville("F", "C")
'4'
"""

from jotchord.converter import chord_to_nashville, display_name, nashville_to_chord
from jotchord.jot_parser import (
    expand_group,
    is_split_bar_token,
    parse,
    parse_chord_token,
    parse_song,
    serialize,
    serialize_song,
    tokenize_line,
)
from jotchord.models import (
    Chord,
    Measure,
    MeasureLine,
    NavigationMarker,
    NoteAnnotation,
    ParseResult,
    Section,
    Song,
    SongMetadata,
)

__all__ = [
    "Chord",
    "Measure",
    "MeasureLine",
    "NavigationMarker",
    "NoteAnnotation",
    "ParseResult",
    "Section",
    "Song",
    "SongMetadata",
    "chord_to_nashville",
    "display_name",
    "expand_group",
    "is_split_bar_token",
    "nashville_to_chord",
    "parse",
    "parse_chord_token",
    "parse_song",
    "serialize",
    "serialize_song",
    "tokenize_line",
]
