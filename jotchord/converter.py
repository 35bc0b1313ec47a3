"""Chord notation converter between Nashville numbers and letter names.

This module converts scale-degree chords (e.g., "2-") to letter chords
(e.g., "Am" in the key of G) and back. Letter chords are read with pychord;
names pychord does not know, such as the German "H", fall back to a pattern
match on the root.
"""

from __future__ import annotations

import logging
import re

from jotchord.models import Chord
from jotchord.pitch_class import (
    degree_to_pc,
    key_tonic,
    note_to_pc,
    pc_to_note,
    uses_flats,
)

logger = logging.getLogger(__name__)

NASHVILLE_RE = re.compile(r"^([#b]?)([1-7])(.*)$")
LETTER_CHORD_RE = re.compile(r"^([A-H][#b]?)(.*?)(?:/([A-H][#b]?))?$")
MINOR_QUALITY_RE = re.compile(r"^(?:min|m(?!aj))")

# Semitones above the tonic to Nashville degree, chromatic degrees included
SEMITONES_TO_DEGREE: dict[int, str] = {
    0: "1",
    1: "b2",
    2: "2",
    3: "b3",
    4: "3",
    5: "4",
    6: "#4",
    7: "5",
    8: "b6",
    9: "6",
    10: "b7",
    11: "7",
}


def _resolve_key(key: str) -> str | None:
    tonic = key_tonic(key)
    if tonic is None:
        logger.debug("Left chord unconverted; unknown key %r", key)
    return tonic


def _degree_to_note(accidental: str, degree: int, key: str) -> str:
    pc = degree_to_pc(degree, key, accidental)
    flats = accidental == "b" or (accidental != "#" and uses_flats(key))
    return pc_to_note(pc, flats=flats)


def quality_to_letter(suffix: str) -> str:
    """Convert a Nashville quality suffix to letter-chord notation.

    Examples
    --------
    >>> quality_to_letter("-7")
    'm7'
    >>> quality_to_letter("+")
    'aug'
    """
    if suffix[:1] in ("-", "−"):
        return "m" + suffix[1:]
    if suffix.startswith("+"):
        return "aug" + suffix[1:]
    return suffix


def quality_to_nashville(suffix: str) -> str:
    """Convert a letter-chord quality to Nashville notation.

    Examples
    --------
    >>> quality_to_nashville("m7")
    '-7'
    >>> quality_to_nashville("maj7")
    'maj7'
    >>> quality_to_nashville("aug")
    '+'
    """
    if suffix.startswith("aug"):
        return "+" + suffix[3:]
    return MINOR_QUALITY_RE.sub("-", suffix)


def nashville_to_chord(nashville: str, key: str) -> str:
    """Convert a Nashville number chord to a letter chord.

    Parameters
    ----------
    nashville : str
        Chord as scale degree plus quality (e.g., "1", "2-", "b7", "5/7").
    key : str
        Key name (e.g., "G", "Bb", "Em"). Minor keys number from their
        relative major.

    Returns
    -------
    str
        The letter chord. Text that is not a Nashville number, or a key
        that is not a key name, leaves ``nashville`` unchanged.

    Examples
    --------
    >>> nashville_to_chord("1", "G")
    'G'
    >>> nashville_to_chord("2-", "G")
    'Am'
    >>> nashville_to_chord("4", "Bb")
    'Eb'
    >>> nashville_to_chord("1/3", "C")
    'C/E'
    >>> nashville_to_chord("6-", "Em")
    'Em'
    """
    tonic = _resolve_key(key)
    match = NASHVILLE_RE.match(nashville)
    if tonic is None or not match:
        return nashville

    quality, slash, bass = match.group(3).partition("/")
    text = _degree_to_note(match.group(1), int(match.group(2)), tonic) + quality_to_letter(quality)
    if slash:
        bass_match = NASHVILLE_RE.match(bass)
        if bass_match and not bass_match.group(3):
            bass = _degree_to_note(bass_match.group(1), int(bass_match.group(2)), tonic)
        text += "/" + bass
    return text


def _split_letter_chord(chord: str) -> tuple[str, str, str | None] | None:
    """Split a letter chord into root, quality and bass."""
    from pychord import Chord as PyChord

    try:
        parsed = PyChord(chord)
    except ValueError:
        match = LETTER_CHORD_RE.match(chord)
        if not match:
            return None
        logger.debug("Read %r by pattern; pychord rejected it", chord)
        return match.group(1), match.group(2), match.group(3)
    return parsed.root, str(parsed.quality), parsed.on or None


def _note_to_degree(note: str, tonic: int) -> str:
    return SEMITONES_TO_DEGREE[(note_to_pc(note) - tonic) % 12]


def chord_to_nashville(chord: str, key: str) -> str:
    """Convert a letter chord to a Nashville number chord.

    Parameters
    ----------
    chord : str
        Letter chord (e.g., "Am7", "F#dim", "C/E", "H7").
    key : str
        Key name; minor keys number from their relative major.

    Returns
    -------
    str
        The Nashville chord. Roots outside the scale use "b2", "b3", "#4",
        "b6" and "b7". Text that is not a letter chord, or a key that is not
        a key name, leaves ``chord`` unchanged.

    Examples
    --------
    >>> chord_to_nashville("Am", "G")
    '2-'
    >>> chord_to_nashville("Bb", "C")
    'b7'
    >>> chord_to_nashville("C/E", "C")
    '1/3'
    >>> chord_to_nashville("H7", "E")
    '57'
    """
    key_name = _resolve_key(key)
    if key_name is None:
        return chord
    parts = _split_letter_chord(chord)
    if parts is None:
        return chord
    tonic = note_to_pc(key_name)

    root, quality, bass = parts
    try:
        text = _note_to_degree(root, tonic) + quality_to_nashville(quality)
    except ValueError:
        return chord
    if bass:
        try:
            text += "/" + _note_to_degree(bass, tonic)
        except ValueError:
            text += "/" + bass
    return text


def display_name(chord: Chord, key: str, *, nashville: bool = True) -> str:
    """Render a parsed chord's name in Nashville or letter notation.

    Parameters
    ----------
    chord : Chord
        The chord to render.
    key : str
        Key used for conversion, such as the song's ``Key:`` value.
    nashville : bool
        Render as a Nashville number (True) or letter chord (False).

    Returns
    -------
    str
        The chord name. Separators, repeat signs and rests pass through, and
        an underscore tie keeps its trailing "_".

    Examples
    --------
    >>> display_name(Chord(number="5-"), "D", nashville=False)
    'Am'
    >>> display_name(Chord(number="4_"), "C", nashville=False)
    'F_'
    >>> display_name(Chord(number="X"), "C", nashville=False)
    'X'
    """
    if chord.is_separator or chord.is_repeat_previous or chord.is_rest:
        return chord.number

    number = chord.number[:-1] if chord.is_underscore_tie else chord.number
    if nashville == chord.nashville_mode:
        text = number
    elif nashville:
        text = chord_to_nashville(number, key)
    else:
        text = nashville_to_chord(number, key)
    return text + "_" if chord.is_underscore_tie else text
