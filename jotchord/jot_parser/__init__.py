"""JotChord chart parser.

This module parses plain-text JotChord charts (Nashville numbers or letter
chords with rhythm and articulation marks) into immutable section, measure
and chord models, and serializes them back to text.
"""

from jotchord.jot_parser.chord_token import parse_chord_token
from jotchord.jot_parser.groups import GroupExpansion, expand_group, is_split_bar_token
from jotchord.jot_parser.ids import IdFactory, SequentialIds, uuid_ids
from jotchord.jot_parser.measures import LineTokens, tokenize_line
from jotchord.jot_parser.navigation import match_navigation_marker
from jotchord.jot_parser.parser import parse, parse_sections, parse_song
from jotchord.jot_parser.serializer import (
    chord_to_text,
    line_to_text,
    measure_to_text,
    serialize,
    serialize_metadata,
    serialize_song,
)

__all__ = [
    "GroupExpansion",
    "IdFactory",
    "LineTokens",
    "SequentialIds",
    "chord_to_text",
    "expand_group",
    "is_split_bar_token",
    "line_to_text",
    "match_navigation_marker",
    "measure_to_text",
    "parse",
    "parse_chord_token",
    "parse_sections",
    "parse_song",
    "serialize",
    "serialize_metadata",
    "serialize_song",
    "tokenize_line",
    "uuid_ids",
]
