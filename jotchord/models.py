"""Data models for parsed JotChord charts.

This module defines the song document produced by the parser: chords,
measures, measure lines, sections, metadata and the song aggregate.
All models are immutable; use ``dataclasses.replace`` to derive variants.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Literal, Mapping

NoteValue = Literal["w", "h", "q", "e", "s", "t"]
PushKind = Literal["early", "late"]
WalkKind = Literal["down", "up"]
NavigationKind = Literal[
    "segno",
    "coda",
    "ds",
    "ds-al-fine",
    "ds-al-coda",
    "dc",
    "dc-al-fine",
    "dc-al-coda",
    "fine",
    "to-coda",
]

# Default section name for measure lines that appear before any header
DEFAULT_SECTION = "Section"

# Key assumed when a chart carries no Key: line
DEFAULT_KEY = "C"

NOTE_VALUE_NAMES: dict[str, str] = {
    "w": "whole",
    "h": "half",
    "q": "quarter",
    "e": "eighth",
    "s": "sixteenth",
    "t": "thirty-second",
}

NAVIGATION_LABELS: dict[str, str] = {
    "segno": "§",
    "coda": "⊕",
    "ds": "D.S.",
    "ds-al-fine": "D.S. al Fine",
    "ds-al-coda": "D.S. al Coda",
    "dc": "D.C.",
    "dc-al-fine": "D.C. al Fine",
    "dc-al-coda": "D.C. al Coda",
    "fine": "Fine",
    "to-coda": "To Coda",
}


@dataclass(frozen=True)
class NoteAnnotation:
    """A note-duration symbol drawn above a chord.

    Parameters
    ----------
    value : NoteValue
        Note value letter: w, h, q, e, s or t (whole to thirty-second).
    dotted : bool
        Whether the note value is dotted.
    triplet : bool
        Whether the note value is part of a triplet.
    """

    value: NoteValue
    dotted: bool = False
    triplet: bool = False

    @property
    def name(self) -> str:
        """Return the long name of the note value (e.g. "quarter")."""
        return NOTE_VALUE_NAMES[self.value]


@dataclass(frozen=True)
class Chord:
    """A single chord with its rhythmic and expressive modifiers.

    Parameters
    ----------
    number : str
        Scale degree with optional accidental and quality (e.g. "1", "#5-",
        "b7sus4"), a letter chord name, or a sentinel: "*" (separator),
        "%" (repeat previous chord), "X"/"x" (rest).
    nashville_mode : bool
        Whether the chart was parsed in Nashville mode (display hint only).
    beats : int | None
        Number of beat ticks ("1..." is three beats).
    accent : bool
        Accent mark ("!").
    diamond : bool
        Diamond / let-ring notation ("<1>").
    push : PushKind | None
        Anticipation ("<" early) or delay (">" late).
    tie : bool
        Tie to the next chord ("=").
    fermata : bool
        Fermata ("~").
    walk : WalkKind | None
        Walk down ("@wd") or walk up ("@wu").
    modulation : int | None
        Modulation in signed semitones ("mod+2").
    ending : int | None
        Repeat ending number, set on the first chord of an ending group.
    is_rest : bool
        No-chord / rest marker.
    inline_comment : str | None
        Inline comment ("1/*text*/").
    annotation : NoteAnnotation | None
        Note value drawn above the chord ("1q").
    in_parentheses : bool
        Whether the chord belongs to a parenthesised tie group.
    parentheses_group_id : int | None
        Identifier of the parenthesised group the chord belongs to.

    Examples
    --------
    >>> chord = Chord(number="4", beats=2, accent=True)
    >>> chord.number, chord.beats
    ('4', 2)
    """

    number: str
    nashville_mode: bool = True
    beats: int | None = None
    accent: bool = False
    diamond: bool = False
    push: PushKind | None = None
    tie: bool = False
    fermata: bool = False
    walk: WalkKind | None = None
    modulation: int | None = None
    ending: int | None = None
    is_rest: bool = False
    inline_comment: str | None = None
    annotation: NoteAnnotation | None = None
    in_parentheses: bool = False
    parentheses_group_id: int | None = None

    @property
    def is_separator(self) -> bool:
        """Return True for the visual separator sentinel ("*")."""
        return self.number == "*"

    @property
    def is_repeat_previous(self) -> bool:
        """Return True for the single-chord repeat sentinel ("%")."""
        return self.number == "%"

    @property
    def is_underscore_tie(self) -> bool:
        """Return True when the chord came from an underscore tie ("1_4")."""
        return self.number.endswith("_")


@dataclass(frozen=True)
class NavigationMarker:
    """A musical-form directive such as segno, coda, D.S. or Fine.

    Parameters
    ----------
    kind : NavigationKind
        The marker type.
    text : str
        The marker as written in the source.
    """

    kind: NavigationKind
    text: str = ""

    @property
    def is_symbol(self) -> bool:
        """Segno and coda render as large symbols, the rest as labelled boxes."""
        return self.kind in ("segno", "coda")

    @property
    def label(self) -> str:
        """Return the display label for the marker."""
        return NAVIGATION_LABELS[self.kind]


@dataclass(frozen=True)
class Measure:
    """One rhythmic slot of a chart.

    A measure carries either chords or a navigation marker, never both.

    Parameters
    ----------
    id : str
        Measure identifier, unique within one parse.
    chords : tuple[Chord, ...]
        Chords in reading order.
    raw_text : str
        The source text the measure was parsed from.
    comment : str | None
        Trailing comment text.
    is_split_bar : bool
        Whether the measure came from a tie token.
    show_pipe_before : bool
        Whether an explicit "|" preceded the measure in the source.
    meter_change : str | None
        Inline time signature change (e.g. "3/8").
    is_repeat : bool
        Whether this is a multi-measure repeat ("%%").
    repeat_count : int | None
        Number of measures repeated.
    navigation_marker : NavigationMarker | None
        Marker for marker-only measures.
    """

    id: str
    chords: tuple[Chord, ...] = ()
    raw_text: str = ""
    comment: str | None = None
    is_split_bar: bool = False
    show_pipe_before: bool = False
    meter_change: str | None = None
    is_repeat: bool = False
    repeat_count: int | None = None
    navigation_marker: NavigationMarker | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when the measure holds no chords, marker, repeat or comment."""
        return (
            not self.chords
            and self.navigation_marker is None
            and not self.is_repeat
            and self.comment is None
        )


@dataclass(frozen=True)
class MeasureLine:
    """Measures that originated from one physical source line.

    Parameters
    ----------
    id : str
        Line identifier, unique within one parse.
    measures : tuple[Measure, ...]
        The measures of the line.
    is_repeat : bool
        Whether the line was wrapped in "||: ... :||".
    repeat_multiplier : int | None
        Repeat count from "||: ... :||{N}".
    """

    id: str
    measures: tuple[Measure, ...] = ()
    is_repeat: bool = False
    repeat_multiplier: int | None = None


@dataclass(frozen=True)
class Section:
    """A named block of the chart (verse, chorus, ...).

    Parameters
    ----------
    id : str
        Section identifier, unique within one parse.
    name : str
        Section name without its trailing colon.
    measures : tuple[Measure, ...]
        All measures of the section in order.
    measure_lines : tuple[MeasureLine, ...]
        The same measures grouped by source line.
    """

    id: str
    name: str = DEFAULT_SECTION
    measures: tuple[Measure, ...] = ()
    measure_lines: tuple[MeasureLine, ...] = ()

    @property
    def is_default(self) -> bool:
        """Return True for the implicit section renderers hide."""
        return self.name == DEFAULT_SECTION

    def with_line(self, line: MeasureLine) -> Section:
        """Return a copy with ``line`` appended to both measure views."""
        return replace(
            self,
            measures=self.measures + line.measures,
            measure_lines=self.measure_lines + (line,),
        )


def _frozen_properties(properties: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(properties or {}))


@dataclass(frozen=True)
class SongMetadata:
    """Chart-level metadata.

    Parameters
    ----------
    title : str
        Song title.
    key : str
        Tonal key used for Nashville/letter conversion.
    tempo : int | None
        Tempo in BPM.
    time_signature : str | None
        Time signature (e.g. "4/4").
    style : str | None
        Style description (e.g. "Bossa nova").
    feel : str | None
        Feel description (e.g. "Swing").
    custom_properties : Mapping[str, str]
        Properties from "$Name: value" lines, keyed without the "$".
    """

    title: str = ""
    key: str = DEFAULT_KEY
    tempo: int | None = None
    time_signature: str | None = None
    style: str | None = None
    feel: str | None = None
    custom_properties: Mapping[str, str] = field(default_factory=_frozen_properties, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "custom_properties", _frozen_properties(self.custom_properties))

    def with_property(self, name: str, value: str) -> SongMetadata:
        """Return a copy with one custom property set."""
        properties = dict(self.custom_properties)
        properties[name] = value
        return replace(self, custom_properties=properties)


@dataclass(frozen=True)
class ParseResult:
    """Output of a full document parse.

    Parameters
    ----------
    sections : tuple[Section, ...]
        Parsed sections; never empty.
    metadata : SongMetadata
        Metadata collected from the document.
    """

    sections: tuple[Section, ...]
    metadata: SongMetadata = field(default_factory=SongMetadata)


@dataclass(frozen=True)
class Song:
    """Complete chart document.

    Parameters
    ----------
    id : str
        Chart identifier used by the chart store.
    metadata : SongMetadata
        Chart metadata.
    sections : tuple[Section, ...]
        Chart sections in order.
    created_at : datetime
        Creation timestamp.
    updated_at : datetime
        Last modification timestamp.
    """

    id: str
    metadata: SongMetadata
    sections: tuple[Section, ...]
    created_at: datetime
    updated_at: datetime
