"""Pitch class operations for key-relative chord conversion.

This module maps note names to pitch classes (0-11) and back, so scale
degrees can be turned into letter names in any key and vice versa.
"""

from __future__ import annotations

import re

# Note name to pitch class (0-11, where C=0); H is the German B
NOTE_TO_PC: dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "Fb": 4,
    "E#": 5,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
    "H": 11,
    "Cb": 11,
    "B#": 0,
}

SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")

# Major keys written with flats in their signature
FLAT_KEYS = frozenset({"F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"})

# Semitones above the tonic for scale degrees 1-7 of a major scale
MAJOR_SCALE: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)

# Tonic plus an optional mode word; "m" and "-" mark minor
KEY_RE = re.compile(
    r"^([A-H][#b]?)\s*(?:(?i:major|maj)|(?P<minor>(?i:minor|min)|m|-))?$"
)


def note_to_pc(note: str) -> int:
    """Convert a note name to pitch class (0-11).

    Parameters
    ----------
    note : str
        Note name (e.g., "C", "F#", "Bb", "H").

    Returns
    -------
    int
        Pitch class (0-11, where C=0).

    Raises
    ------
    ValueError
        If the note name is not recognized.

    Examples
    --------
    >>> note_to_pc("F#")
    6
    >>> note_to_pc("H")
    11
    """
    if note in NOTE_TO_PC:
        return NOTE_TO_PC[note]
    msg = f"Unknown note: {note}"
    raise ValueError(msg)


def uses_flats(key: str) -> bool:
    """Return True when ``key`` is spelled with flats.

    Examples
    --------
    >>> uses_flats("Bb"), uses_flats("G")
    (True, False)
    """
    return key in FLAT_KEYS


def pc_to_note(pc: int, *, flats: bool = False) -> str:
    """Convert a pitch class to a note name.

    Parameters
    ----------
    pc : int
        Pitch class; taken modulo 12.
    flats : bool
        Spell black keys with flats instead of sharps.

    Returns
    -------
    str
        The note name.

    Examples
    --------
    >>> pc_to_note(10)
    'A#'
    >>> pc_to_note(10, flats=True)
    'Bb'
    """
    names = FLAT_NAMES if flats else SHARP_NAMES
    return names[pc % 12]


def degree_to_pc(degree: int, key: str, accidental: str = "") -> int:
    """Return the pitch class of a major-scale degree in ``key``.

    Parameters
    ----------
    degree : int
        Scale degree 1-7.
    key : str
        Major key tonic (e.g. "G").
    accidental : str
        "#" raises and "b" lowers the degree by a semitone.

    Returns
    -------
    int
        Pitch class (0-11).

    Raises
    ------
    ValueError
        If the key is unknown or the degree is outside 1-7.

    Examples
    --------
    >>> degree_to_pc(5, "G")
    2
    >>> degree_to_pc(7, "C", "b")
    10
    """
    if not 1 <= degree <= 7:
        msg = f"Scale degree out of range: {degree}"
        raise ValueError(msg)
    shift = {"#": 1, "b": -1}.get(accidental, 0)
    return (note_to_pc(key) + MAJOR_SCALE[degree - 1] + shift) % 12


def key_tonic(key: str) -> str | None:
    """Return the major tonic that spells chords in ``key``.

    A minor key ("Em", "C minor", "F#-") maps to its relative major, so
    scale degrees stay major-scale degrees in every key.

    Parameters
    ----------
    key : str
        Key name such as "G", "Bb major", "Em" or "Dm".

    Returns
    -------
    str | None
        The major tonic, or None when ``key`` is not a key name.

    Examples
    --------
    >>> key_tonic("G"), key_tonic("Bb major")
    ('G', 'Bb')
    >>> key_tonic("Em"), key_tonic("Dm")
    ('G', 'F')
    >>> key_tonic("Q") is None
    True
    """
    match = KEY_RE.match(key.strip())
    if not match or match.group(1) not in NOTE_TO_PC:
        return None
    root = match.group(1)
    if match.group("minor") is None:
        return root
    pc = (NOTE_TO_PC[root] + 3) % 12
    flats = "b" in root or ("#" not in root and FLAT_NAMES[pc] in FLAT_KEYS)
    return pc_to_note(pc, flats=flats)
