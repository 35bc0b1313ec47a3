"""Serialization of parsed charts back to JotChord text.

The serializer is the inverse of the parser up to cosmetics: spacing and the
exact tie spelling may change, but re-parsing the output yields the same
chords with the same modifiers.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from jotchord.jot_parser.groups import is_split_bar_token
from jotchord.jot_parser.tokenizer import has_whitespace, split_compact
from jotchord.models import (
    Chord,
    Measure,
    MeasureLine,
    Section,
    Song,
    SongMetadata,
)

INDENT = "    "


def chord_to_text(chord: Chord) -> str:
    """Render one chord with its modifiers.

    Modifiers are written in the reverse of the order the chord token
    parser strips them, so the text parses back to the same chord.

    Parameters
    ----------
    chord : Chord
        The chord to render.

    Returns
    -------
    str
        The chord token text (without tie-group or ending wrappers).

    Examples
    --------
    >>> chord_to_text(Chord(number="1", beats=3, accent=True))
    '1...!'
    >>> chord_to_text(Chord(number="4", diamond=True, push="early"))
    '<4><'
    """
    if chord.number in ("*", "%"):
        return chord.number

    number = chord.number[:-1] if chord.is_underscore_tie else chord.number
    text = f"<{number}>" if chord.diamond else number
    if chord.beats:
        text += "." * chord.beats
    if chord.annotation is not None:
        text += chord.annotation.value
    if chord.push == "early":
        text += "<"
    elif chord.push == "late":
        text += ">"
    if chord.accent:
        text += "!"
    if chord.fermata:
        text += "~"
    if chord.tie:
        text += "="
    if chord.walk == "down":
        text += "@wd"
    elif chord.walk == "up":
        text += "@wu"
    if chord.modulation:
        text += f"mod{chord.modulation:+d}"
    if chord.inline_comment:
        text += f"/*{chord.inline_comment}*/"
    return text


def _is_plain(chord: Chord) -> bool:
    return not chord.in_parentheses and not chord.is_underscore_tie


def _chord_runs(chords: Sequence[Chord]) -> list[list[Chord]]:
    """Group chords into runs that render as one token.

    A run is a parenthesised group, an underscore tie, or an ending followed
    by the plain chords after it.
    """
    runs: list[list[Chord]] = []
    for chord in chords:
        if runs and chord.ending is None:
            run = runs[-1]
            previous = run[-1]
            same_parentheses = (
                chord.in_parentheses
                and previous.in_parentheses
                and chord.parentheses_group_id == previous.parentheses_group_id
            )
            same_underscores = chord.is_underscore_tie and previous.is_underscore_tie
            open_ending = (
                run[0].ending is not None
                and _is_plain(chord)
                and all(_is_plain(member) for member in run)
            )
            if same_parentheses or same_underscores or open_ending:
                run.append(chord)
                continue
        runs.append([chord])
    return runs


def _guard_interior(inner: str) -> str:
    """Keep a single chord from being split as a compact run ("1sus4")."""
    if not has_whitespace(inner) and len(split_compact(inner)) > 1:
        return inner + " "
    return inner


def _run_to_text(run: list[Chord]) -> str:
    texts = [chord_to_text(chord) for chord in run]
    if run[0].in_parentheses:
        text = "(" + _guard_interior(" ".join(texts)) + ")"
    elif run[0].is_underscore_tie:
        # A lone underscore chord still needs its underscore
        text = "_".join(texts) if len(texts) > 1 else texts[0] + "_"
    else:
        text = " ".join(texts)

    if run[0].ending is not None:
        if not is_split_bar_token(text):
            text = _guard_interior(text)
        text = f"{run[0].ending}[{text}]"
    return text


def measure_to_text(measure: Measure) -> str:
    """Render a measure from its structure, ignoring ``raw_text``.

    Comments are not included; they belong at the end of the line.

    Examples
    --------
    >>> measure_to_text(Measure(id="m", chords=(Chord(number="1"), Chord(number="4"))))
    '1 4'
    >>> measure_to_text(Measure(id="m", is_repeat=True, repeat_count=2))
    '%%'
    """
    if measure.navigation_marker is not None:
        return measure.navigation_marker.label

    if measure.is_repeat:
        body = "%" * (measure.repeat_count or 2)
    else:
        body = " ".join(_run_to_text(run) for run in _chord_runs(measure.chords))
        bracketed = all(_is_plain(chord) and chord.ending is None for chord in measure.chords)
        if measure.is_split_bar and bracketed and measure.chords:
            body = "[" + _guard_interior(body) + "]"

    if measure.meter_change:
        body = f"[{measure.meter_change}] {body}".rstrip()
    return body


def _measure_body(measure: Measure, canonical: bool) -> str:
    if canonical or not measure.raw_text:
        return measure_to_text(measure)
    # Meter tokens are consumed while tokenizing, so raw_text never has one
    if measure.meter_change:
        return f"[{measure.meter_change}] {measure.raw_text}"
    return measure.raw_text


def line_to_text(line: MeasureLine, *, canonical: bool = False) -> str:
    """Render one measure line, including repeat bars and its comment.

    Parameters
    ----------
    line : MeasureLine
        The line to render.
    canonical : bool
        Render from structure even where ``raw_text`` is available.

    Returns
    -------
    str
        The line text without indentation.
    """
    parts: list[str] = []
    for measure in line.measures:
        body = _measure_body(measure, canonical)
        if not body:
            continue
        if measure.show_pipe_before and parts:
            parts.append("|")
        parts.append(body)
    text = " ".join(parts)

    if line.is_repeat:
        text = f"||: {text} :||"
        if line.repeat_multiplier is not None:
            text += f"{{{line.repeat_multiplier}}}"

    comments = [measure.comment for measure in line.measures if measure.comment]
    if comments:
        comment = "; ".join(comments)
        text = f"{text} //{comment}" if text else f"//{comment}"
    return text


def _section_lines(section: Section) -> Iterable[MeasureLine]:
    if section.measure_lines:
        return section.measure_lines
    # Without line structure, write one measure per line
    return [MeasureLine(id=measure.id, measures=(measure,)) for measure in section.measures]


def section_to_text(section: Section, *, canonical: bool = False) -> str:
    """Render a section header followed by its indented lines."""
    lines = [f"{section.name}:"]
    for measure_line in _section_lines(section):
        text = line_to_text(measure_line, canonical=canonical)
        if text:
            lines.append(INDENT + text)
    return "\n".join(lines)


def serialize_metadata(metadata: SongMetadata) -> str:
    """Render metadata as "Key: value" lines.

    Examples
    --------
    >>> print(serialize_metadata(SongMetadata(title="My Song", key="G", tempo=120)))
    Title: My Song
    Key: G
    Tempo: 120
    """
    if metadata == SongMetadata():
        return ""

    lines = []
    if metadata.title:
        lines.append(f"Title: {metadata.title}")
    lines.append(f"Key: {metadata.key}")
    if metadata.tempo is not None:
        lines.append(f"Tempo: {metadata.tempo}")
    if metadata.time_signature:
        lines.append(f"Meter: {metadata.time_signature}")
    if metadata.style:
        lines.append(f"Style: {metadata.style}")
    if metadata.feel:
        lines.append(f"Feel: {metadata.feel}")
    for name, value in metadata.custom_properties.items():
        lines.append(f"${name}: {value}")
    return "\n".join(lines)


def _is_blank(sections: Sequence[Section]) -> bool:
    return all(
        all(measure.is_empty and not measure.raw_text for measure in section.measures)
        for section in sections
    ) and all(section.is_default for section in sections)


def serialize(
    sections: Sequence[Section],
    *,
    metadata: SongMetadata | None = None,
    canonical: bool = False,
) -> str:
    """Convert sections (and optional metadata) back to JotChord text.

    Parameters
    ----------
    sections : Sequence[Section]
        The sections to render.
    metadata : SongMetadata | None
        Metadata written as a header block when given.
    canonical : bool
        Render every measure from its chords instead of its ``raw_text``.

    Returns
    -------
    str
        The chart text. An empty chart renders as "".

    Examples
    --------
    >>> from jotchord.jot_parser.parser import parse
    >>> print(serialize(parse("||: 1 4 5 1 :||{4}").sections))
    Section:
        ||: 1 4 5 1 :||{4}
    """
    blocks: list[str] = []
    if metadata is not None:
        header = serialize_metadata(metadata)
        if header:
            blocks.append(header)
    if sections and not _is_blank(sections):
        blocks.extend(section_to_text(section, canonical=canonical) for section in sections)
    return "\n\n".join(blocks)


def serialize_song(song: Song, *, canonical: bool = False) -> str:
    """Render a song with its metadata header."""
    return serialize(song.sections, metadata=song.metadata, canonical=canonical)
