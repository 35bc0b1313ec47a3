"""Main JotChord document parser.

This module provides the parse() function that walks a chart line by line,
collecting metadata, sections, comments, navigation markers and measure
lines into a :class:`~jotchord.models.ParseResult`.
"""

from __future__ import annotations

import itertools
import logging
import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from functools import reduce
from typing import Iterator

from jotchord.jot_parser.ids import IdFactory, SequentialIds
from jotchord.jot_parser.measures import tokenize_line
from jotchord.jot_parser.navigation import match_navigation_marker
from jotchord.models import (
    DEFAULT_SECTION,
    Measure,
    MeasureLine,
    ParseResult,
    Section,
    Song,
    SongMetadata,
)

logger = logging.getLogger(__name__)

# Metadata keys (lower-cased) mapped to SongMetadata fields
METADATA_FIELDS: dict[str, str] = {
    "title": "title",
    "key": "key",
    "meter": "time_signature",
    "style": "style",
    "feel": "feel",
}

TEMPO_RE = re.compile(r"(\d+)")


@dataclass(frozen=True)
class _ParseContext:
    """Per-call settings and id sources, shared by every line."""

    nashville_mode: bool
    ids: IdFactory
    group_ids: Iterator[int]
    one_bar_per_chord: bool


@dataclass(frozen=True)
class _ParserState:
    """Document state threaded through the line fold."""

    sections: tuple[Section, ...] = ()
    metadata: SongMetadata = field(default_factory=SongMetadata)
    in_block_comment: bool = False
    comment_parts: tuple[str, ...] = ()


def preprocess(text: str) -> list[str]:
    """Normalize line endings and split text into stripped lines.

    Examples
    --------
    >>> preprocess("V1:\\r\\n  1 4\\r\\n")
    ['V1:', '1 4', '']
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line.strip() for line in text.split("\n")]


def apply_metadata(metadata: SongMetadata, line: str) -> SongMetadata | None:
    """Apply a "Key: value" metadata line.

    Parameters
    ----------
    metadata : SongMetadata
        Metadata collected so far.
    line : str
        A stripped line containing a colon that is not its last character.

    Returns
    -------
    SongMetadata | None
        Updated metadata, or None when the key is not a metadata key.

    Examples
    --------
    >>> apply_metadata(SongMetadata(), "Tempo: 120 bpm").tempo
    120
    >>> apply_metadata(SongMetadata(), "$Artist: Jane Doe").custom_properties["Artist"]
    'Jane Doe'
    >>> apply_metadata(SongMetadata(), "1 4 //note: soft") is None
    True
    """
    key, _, value = line.partition(":")
    key = key.strip()
    value = value.strip()

    if key.startswith("$") and len(key) > 1:
        return metadata.with_property(key[1:], value)

    name = key.lower()
    if name == "tempo":
        tempo = TEMPO_RE.search(value)
        if tempo is None:
            return metadata
        return replace(metadata, tempo=int(tempo.group(1)))

    if name in METADATA_FIELDS:
        return replace(metadata, **{METADATA_FIELDS[name]: value})

    return None


def _open_section(state: _ParserState, name: str, context: _ParseContext) -> _ParserState:
    section = Section(id=context.ids("section"), name=name)
    return replace(state, sections=state.sections + (section,))


def _append_line(
    state: _ParserState,
    line: MeasureLine,
    context: _ParseContext,
    *,
    create_section: bool = True,
) -> _ParserState:
    if not state.sections:
        if not create_section:
            logger.debug("Dropped %r outside any section", line.measures[0].comment)
            return state
        state = _open_section(state, DEFAULT_SECTION, context)
    current = state.sections[-1].with_line(line)
    return replace(state, sections=state.sections[:-1] + (current,))


def _append_comment(state: _ParserState, text: str, context: _ParseContext) -> _ParserState:
    if not text:
        return state
    measure = Measure(id=context.ids("measure"), comment=text)
    line = MeasureLine(id=context.ids("line"), measures=(measure,))
    return _append_line(state, line, context, create_section=False)


def _continue_block_comment(state: _ParserState, line: str, context: _ParseContext) -> _ParserState:
    if "*/" not in line:
        parts = state.comment_parts + ((line,) if line else ())
        return replace(state, comment_parts=parts)

    closing = line[: line.index("*/")].strip()
    parts = state.comment_parts + ((closing,) if closing else ())
    state = replace(state, in_block_comment=False, comment_parts=())
    return _append_comment(state, " ".join(parts), context)


def _start_block_comment(state: _ParserState, line: str, context: _ParseContext) -> _ParserState:
    content = line[2:]
    if "*/" in content:
        return _append_comment(state, content[: content.index("*/")].strip(), context)
    content = content.strip()
    return replace(state, in_block_comment=True, comment_parts=(content,) if content else ())


def _consume_line(state: _ParserState, line: str, context: _ParseContext) -> _ParserState:
    """Advance the parser state by one stripped source line."""
    if state.in_block_comment:
        return _continue_block_comment(state, line, context)

    if line.startswith("/*"):
        return _start_block_comment(state, line, context)

    if not line:
        return state

    if line.startswith("//"):
        return _append_comment(state, line[2:].strip(), context)

    marker = match_navigation_marker(line)
    if marker is not None:
        measure = Measure(id=context.ids("measure"), raw_text=line, navigation_marker=marker)
        return _append_line(state, MeasureLine(id=context.ids("line"), measures=(measure,)), context)

    if ":" in line and not line.endswith(":"):
        metadata = apply_metadata(state.metadata, line)
        if metadata is not None:
            return replace(state, metadata=metadata)

    if line.endswith(":"):
        return _open_section(state, line[:-1].strip(), context)

    tokens = tokenize_line(
        line,
        nashville_mode=context.nashville_mode,
        ids=context.ids,
        group_ids=context.group_ids,
        one_bar_per_chord=context.one_bar_per_chord,
    )
    measure_line = MeasureLine(
        id=context.ids("line"),
        measures=tokens.measures,
        is_repeat=tokens.is_repeat,
        repeat_multiplier=tokens.repeat_multiplier,
    )
    return _append_line(state, measure_line, context)


def parse(
    text: str,
    nashville_mode: bool = True,
    *,
    id_factory: IdFactory | None = None,
    one_bar_per_chord: bool = False,
) -> ParseResult:
    """Parse a JotChord chart into sections and metadata.

    This is the main entry point for chart parsing. It never raises for
    string input; malformed notation degrades to literal chord text or is
    skipped.

    Parameters
    ----------
    text : str
        The raw chart text.
    nashville_mode : bool
        Display hint stored on every chord.
    id_factory : IdFactory | None
        Factory for section, line and measure ids. A fresh
        :class:`SequentialIds` is used when None, so equal input gives equal
        output.
    one_bar_per_chord : bool
        Emit one measure per plain chord token.

    Returns
    -------
    ParseResult
        Parsed sections (never empty) and metadata.

    Examples
    --------
    >>> text = '''Title: My Song
    ... Key: G
    ...
    ... V1:
    ...   1 4 5 1
    ... '''
    >>> result = parse(text)
    >>> result.metadata.title, result.metadata.key
    ('My Song', 'G')
    >>> result.sections[0].name
    'V1'
    """
    context = _ParseContext(
        nashville_mode=nashville_mode,
        ids=id_factory if id_factory is not None else SequentialIds(),
        group_ids=itertools.count(1),
        one_bar_per_chord=one_bar_per_chord,
    )
    state = reduce(
        lambda current, line: _consume_line(current, line, context),
        preprocess(text),
        _ParserState(),
    )

    if state.in_block_comment:
        # An unterminated block comment still counts as a comment
        state = _append_comment(state, " ".join(state.comment_parts), context)

    sections = state.sections
    if not sections:
        sections = (Section(id=context.ids("section"), name=DEFAULT_SECTION),)

    return ParseResult(sections=sections, metadata=state.metadata)


def parse_sections(text: str, nashville_mode: bool = True) -> tuple[Section, ...]:
    """Parse a chart and return only its sections."""
    return parse(text, nashville_mode).sections


def parse_song(
    text: str,
    nashville_mode: bool = True,
    *,
    song_id: str | None = None,
    id_factory: IdFactory | None = None,
    one_bar_per_chord: bool = False,
    now: datetime | None = None,
) -> Song:
    """Parse a chart into a complete :class:`~jotchord.models.Song`.

    Parameters
    ----------
    text : str
        The raw chart text.
    nashville_mode : bool
        Display hint stored on every chord.
    song_id : str | None
        Chart id; a random UUID hex string when None.
    id_factory : IdFactory | None
        Factory for section, line and measure ids.
    one_bar_per_chord : bool
        Emit one measure per plain chord token.
    now : datetime | None
        Timestamp for ``created_at``/``updated_at``; current UTC time when None.

    Returns
    -------
    Song
        The song aggregate.
    """
    result = parse(
        text,
        nashville_mode,
        id_factory=id_factory,
        one_bar_per_chord=one_bar_per_chord,
    )
    timestamp = now if now is not None else datetime.now(timezone.utc)
    return Song(
        id=song_id if song_id is not None else uuid.uuid4().hex,
        metadata=result.metadata,
        sections=result.sections,
        created_at=timestamp,
        updated_at=timestamp,
    )
