import pytest

from jotchord import Chord, chord_to_nashville, display_name, nashville_to_chord, parse_song
from jotchord.converter import quality_to_letter, quality_to_nashville
from jotchord.pitch_class import degree_to_pc, key_tonic, note_to_pc, pc_to_note, uses_flats


class TestQualityMapping:
    def test_minus_to_minor(self):
        assert quality_to_letter("-") == "m"

    def test_unicode_minus_to_minor(self):
        assert quality_to_letter("−7") == "m7"

    def test_plus_to_aug(self):
        assert quality_to_letter("+") == "aug"

    def test_other_suffix_unchanged(self):
        assert quality_to_letter("sus4") == "sus4"

    def test_minor_to_minus(self):
        assert quality_to_nashville("m7") == "-7"

    def test_min_to_minus(self):
        assert quality_to_nashville("min") == "-"

    def test_maj7_unchanged(self):
        assert quality_to_nashville("maj7") == "maj7"

    def test_minor_major_seventh(self):
        assert quality_to_nashville("mmaj7") == "-maj7"

    def test_aug_to_plus(self):
        assert quality_to_nashville("aug7") == "+7"


class TestNashvilleToChord:
    @pytest.mark.parametrize(
        "nashville,key,expected",
        [
            ("1", "G", "G"),
            ("4", "C", "F"),
            ("2-", "G", "Am"),
            ("5-7", "C", "Gm7"),
            ("4", "Bb", "Eb"),
            ("4", "F", "Bb"),
            ("7", "G", "F#"),
            ("b7", "C", "Bb"),
            ("#4", "C", "F#"),
            ("1+", "C", "Caug"),
            ("1/3", "C", "C/E"),
            ("5sus4", "D", "Asus4"),
        ],
    )
    def test_convert(self, nashville, key, expected):
        assert nashville_to_chord(nashville, key) == expected

    @pytest.mark.parametrize("text", ["X", "Am", "*", "%"])
    def test_non_nashville_unchanged(self, text):
        assert nashville_to_chord(text, "C") == text

    @pytest.mark.parametrize(
        "nashville,key,expected",
        [
            ("1", "Em", "G"),
            ("6-", "Em", "Em"),
            ("4", "Dm", "Bb"),
            ("5", "Cm", "Bb"),
            ("1", "D#m", "F#"),
            ("4", "G major", "C"),
            ("2-", "A minor", "Dm"),
        ],
    )
    def test_named_keys(self, nashville, key, expected):
        assert nashville_to_chord(nashville, key) == expected

    @pytest.mark.parametrize("key", ["Q", "", "C lydian", "m"])
    def test_unknown_key_unchanged(self, key):
        assert nashville_to_chord("2-", key) == "2-"


class TestChordToNashville:
    @pytest.mark.parametrize(
        "chord,key,expected",
        [
            ("G", "G", "1"),
            ("F", "C", "4"),
            ("Am", "G", "2-"),
            ("Em7", "C", "3-7"),
            ("Cmaj7", "C", "1maj7"),
            ("Bb", "C", "b7"),
            ("Eb", "C", "b3"),
            ("F#", "C", "#4"),
            ("Caug", "C", "1+"),
            ("C/E", "C", "1/3"),
            ("H7", "E", "57"),
        ],
    )
    def test_convert(self, chord, key, expected):
        assert chord_to_nashville(chord, key) == expected

    def test_not_a_chord_unchanged(self):
        assert chord_to_nashville("N.C.", "C") == "N.C."

    def test_minor_key(self):
        assert chord_to_nashville("C", "Cm") == "6"
        assert chord_to_nashville("Em", "Em") == "6-"

    def test_unknown_key_unchanged(self):
        assert chord_to_nashville("Am7", "Q") == "Am7"

    @pytest.mark.parametrize("nashville", ["1", "2-", "4", "5", "6-", "b7"])
    def test_inverse(self, nashville):
        assert chord_to_nashville(nashville_to_chord(nashville, "D"), "D") == nashville


class TestDisplayName:
    def test_nashville_to_letters(self):
        assert display_name(Chord(number="5-"), "D", nashville=False) == "Am"

    def test_same_notation_unchanged(self):
        assert display_name(Chord(number="5-"), "D") == "5-"

    def test_letters_to_nashville(self):
        chord = Chord(number="Am", nashville_mode=False)
        assert display_name(chord, "G", nashville=True) == "2-"

    def test_underscore_tie_kept(self):
        assert display_name(Chord(number="4_"), "C", nashville=False) == "F_"

    def test_parsed_minor_key_chart(self):
        song = parse_song("Key: Em\nV1:\n1 4 6-")
        names = [
            display_name(chord, song.metadata.key, nashville=False)
            for chord in song.sections[0].measures[0].chords
        ]
        assert names == ["G", "C", "Em"]

    @pytest.mark.parametrize("number", ["X", "x", "*", "%"])
    def test_sentinels_pass_through(self, number):
        chord = Chord(number=number, is_rest=number in ("X", "x"))
        assert display_name(chord, "C", nashville=False) == number


class TestPitchClass:
    def test_note_to_pc(self):
        assert note_to_pc("C") == 0
        assert note_to_pc("F#") == 6
        assert note_to_pc("Bb") == 10

    def test_german_h(self):
        assert note_to_pc("H") == note_to_pc("B")

    def test_unknown_note_raises(self):
        with pytest.raises(ValueError, match="Unknown note"):
            note_to_pc("Q")

    def test_pc_to_note_spelling(self):
        assert pc_to_note(1) == "C#"
        assert pc_to_note(1, flats=True) == "Db"
        assert pc_to_note(14) == "D"

    def test_flat_keys(self):
        assert uses_flats("Eb")
        assert not uses_flats("E")

    def test_degree_to_pc(self):
        assert degree_to_pc(5, "G") == 2
        assert degree_to_pc(4, "C", "#") == 6

    def test_degree_out_of_range(self):
        with pytest.raises(ValueError, match="out of range"):
            degree_to_pc(8, "C")

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("G", "G"),
            ("Bb", "Bb"),
            ("Bb major", "Bb"),
            ("Cmaj", "C"),
            ("Em", "G"),
            ("E-", "G"),
            ("Dm", "F"),
            ("Cm", "Eb"),
            ("Ebm", "Gb"),
            ("D#m", "F#"),
            ("Hm", "D"),
            (" A minor ", "C"),
        ],
    )
    def test_key_tonic(self, key, expected):
        assert key_tonic(key) == expected

    @pytest.mark.parametrize("key", ["Q", "", "Cx", "C dorian"])
    def test_key_tonic_unknown(self, key):
        assert key_tonic(key) is None
