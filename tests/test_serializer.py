"""Tests for serializing charts back to JotChord text."""

import pytest

from jotchord.jot_parser.parser import parse, parse_song
from jotchord.jot_parser.serializer import (
    chord_to_text,
    measure_to_text,
    serialize,
    serialize_metadata,
    serialize_song,
)
from jotchord.models import Chord, Measure, NoteAnnotation, SongMetadata

CHORD_FIELDS = (
    "number",
    "beats",
    "accent",
    "diamond",
    "push",
    "tie",
    "fermata",
    "walk",
    "modulation",
    "ending",
    "is_rest",
    "inline_comment",
    "annotation",
)


def flatten(text: str) -> list[tuple]:
    """Return every chord of a chart as a tuple of its attributes."""
    return [
        tuple(getattr(chord, name) for name in CHORD_FIELDS)
        for section in parse(text).sections
        for measure in section.measures
        for chord in measure.chords
    ]


class TestChordToText:
    """Rendering single chords."""

    @pytest.mark.parametrize(
        "chord,expected",
        [
            (Chord(number="1"), "1"),
            (Chord(number="1", beats=3, accent=True), "1...!"),
            (Chord(number="4", diamond=True, push="early"), "<4><"),
            (Chord(number="5", push="late", fermata=True, tie=True), "5>~="),
            (Chord(number="1", beats=1, annotation=NoteAnnotation(value="w")), "1.w"),
            (Chord(number="2-", walk="down"), "2-@wd"),
            (Chord(number="4", walk="up"), "4@wu"),
            (Chord(number="1", modulation=2), "1mod+2"),
            (Chord(number="1", modulation=-3), "1mod-3"),
            (Chord(number="1", inline_comment="soft"), "1/*soft*/"),
            (Chord(number="4_"), "4"),
            (Chord(number="*"), "*"),
            (Chord(number="%"), "%"),
        ],
    )
    def test_render(self, chord: Chord, expected: str) -> None:
        assert chord_to_text(chord) == expected


class TestMeasureToText:
    """Rendering measures from structure."""

    def test_plain(self) -> None:
        measure = Measure(id="m", chords=(Chord(number="1"), Chord(number="4")))
        assert measure_to_text(measure) == "1 4"

    def test_repeat(self) -> None:
        assert measure_to_text(Measure(id="m", is_repeat=True, repeat_count=3)) == "%%%"

    def test_bracket_split_bar(self) -> None:
        measure = Measure(
            id="m",
            chords=(Chord(number="5"), Chord(number="6")),
            is_split_bar=True,
        )
        assert measure_to_text(measure) == "[5 6]"

    def test_single_chord_split_bar_guarded(self) -> None:
        """Test a lone compact-looking chord is not split on re-parse."""
        measure = Measure(id="m", chords=(Chord(number="1sus4"),), is_split_bar=True)
        assert measure_to_text(measure) == "[1sus4 ]"

    def test_meter_prefix(self) -> None:
        measure = Measure(id="m", chords=(Chord(number="1"),), meter_change="3/8")
        assert measure_to_text(measure) == "[3/8] 1"

    def test_parenthesised_group(self) -> None:
        chords = tuple(
            Chord(number=n, in_parentheses=True, parentheses_group_id=1) for n in "14"
        )
        assert measure_to_text(Measure(id="m", chords=chords, is_split_bar=True)) == "(1 4)"

    def test_underscore_tie(self) -> None:
        chords = (Chord(number="X_", is_rest=True), Chord(number="5_"))
        assert measure_to_text(Measure(id="m", chords=chords, is_split_bar=True)) == "X_5"

    def test_ending(self) -> None:
        chords = (Chord(number="1", ending=2), Chord(number="4"), Chord(number="5"))
        assert measure_to_text(Measure(id="m", chords=chords)) == "2[1 4 5]"


class TestSerialize:
    """Whole-chart serialization."""

    def test_repeat_bar_multiplier(self) -> None:
        text = serialize(parse("||: 1 4 5 1 :||{4}").sections)
        assert text == "Section:\n    ||: 1 4 5 1 :||{4}"

    def test_sections_and_pipes(self) -> None:
        text = serialize(parse("V1:\n1 4 | 5 1\n\nChorus:\n  4").sections)
        assert text == "V1:\n    1 4 | 5 1\n\nChorus:\n    4"

    def test_raw_text_preserved(self) -> None:
        assert serialize(parse("V1:\n(3444)").sections) == "V1:\n    (3444)"

    def test_canonical_rewrites_raw_text(self) -> None:
        text = serialize(parse("V1:\n(3444)").sections, canonical=True)
        assert text == "V1:\n    (3 4 4 4)"

    def test_comments(self) -> None:
        text = serialize(parse("V1:\n// soft\n1 4 // build").sections)
        assert text == "V1:\n    //soft\n    1 4 //build"

    def test_navigation_marker_label(self) -> None:
        text = serialize(parse("V1:\nsegno").sections, canonical=True)
        assert text == "V1:\n    §"

    def test_empty_chart(self) -> None:
        assert serialize(parse("").sections) == ""
        assert serialize(()) == ""

    def test_metadata_header(self) -> None:
        text = serialize(parse("V1:\n1").sections, metadata=SongMetadata(title="T", key="G"))
        assert text == "Title: T\nKey: G\n\nV1:\n    1"


class TestSerializeMetadata:
    """Metadata header rendering."""

    def test_default_metadata_is_empty(self) -> None:
        assert serialize_metadata(SongMetadata()) == ""

    def test_all_fields(self) -> None:
        metadata = SongMetadata(
            title="My Song",
            key="G",
            tempo=120,
            time_signature="6/8",
            style="Waltz",
            feel="Straight",
        ).with_property("Artist", "Jane")
        assert serialize_metadata(metadata) == (
            "Title: My Song\nKey: G\nTempo: 120\nMeter: 6/8\n"
            "Style: Waltz\nFeel: Straight\n$Artist: Jane"
        )

    def test_key_written_without_title(self) -> None:
        assert serialize_metadata(SongMetadata(tempo=90)) == "Key: C\nTempo: 90"


class TestRoundTrip:
    """Parsing serialized output yields the same chords."""

    @pytest.mark.parametrize(
        "text",
        [
            "V1:\n1... 4! <5> 1<",
            "(1 4) [5 6] 1_4",
            "2[1 4 5]",
            "1[1 4] 2[5 1]",
            "X_5 x...",
            "1/*soft*/ 4@wd 5mod+2",
            "1.w 4q 5e< 6-~=",
            "||: 1 | 4 :||{3}",
            "1 4 %% 5",
            "[3/8] 1 2",
            "(3444) (<1><2>)",
            "1 * % 4",
            "Intro:\n1 4\nSegno\n// soft\nV1:\n5 | 1 //end\nD.S. al Coda",
        ],
    )
    def test_canonical_round_trip(self, text: str) -> None:
        """Test canonical output re-parses to the same chords."""
        canonical = serialize(parse(text).sections, canonical=True)
        assert flatten(canonical) == flatten(text)

    def test_canonical_is_stable(self) -> None:
        """Test serializing twice gives the same text."""
        first = serialize(parse("V1:\n(1 4) 2[5 1] x_3 [3/8] 1...!").sections, canonical=True)
        second = serialize(parse(first).sections, canonical=True)
        assert first == second

    def test_song_round_trip(self) -> None:
        song = parse_song("Title: T\nKey: G\nTempo: 120\n$Capo: 2\n\nV1:\n1 4\n5 1")
        again = parse_song(serialize_song(song))
        assert again.metadata == song.metadata
        assert [s.name for s in again.sections] == ["V1"]
        assert len(again.sections[0].measure_lines) == 2
