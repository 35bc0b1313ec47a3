"""Tie group and ending expansion.

Tie groups pack several chords into one rhythmic slot. They are written
parenthesised "(1 4)", bracketed "[1 4]" or underscore-joined "1_4". Ending
groups "2[1 4 5]" mark the chords of a numbered repeat ending.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable

from jotchord.jot_parser.chord_token import parse_chord_token
from jotchord.jot_parser.tokenizer import (
    has_whitespace,
    scan_tokens,
    split_compact,
    split_interior,
)
from jotchord.models import Chord

logger = logging.getLogger(__name__)

ENDING_RE = re.compile(r"^(\d+)\[(.*)\]$")
METER_RE = re.compile(r"^\[(\d+/\d+)\]$")
MODULATION_TOKEN_RE = re.compile(r"^<mod([+-])(\d+)>$")

# Endings nested deeper than this are kept as literal chord text
MAX_ENDING_DEPTH = 64


@dataclass(frozen=True)
class GroupExpansion:
    """Chords produced from one token.

    Parameters
    ----------
    chords : tuple[Chord, ...]
        The chords in reading order.
    was_tie : bool
        Whether the token was a tie group (split bar).
    """

    chords: tuple[Chord, ...]
    was_tie: bool = False


def is_ending_token(token: str) -> bool:
    """Check whether a token is an ending group such as "2[1 4 5]".

    Examples
    --------
    >>> is_ending_token("2[1 4 5]")
    True
    >>> is_ending_token("[1 4 5]")
    False
    """
    return ENDING_RE.match(token) is not None


def is_meter_token(token: str) -> bool:
    """Check whether a token is an inline meter change such as "[3/8]"."""
    return METER_RE.match(token) is not None


def _is_wrapped(token: str, opening: str, closing: str) -> bool:
    return len(token) >= 2 and token.startswith(opening) and token.endswith(closing)


def is_split_bar_token(token: str) -> bool:
    """Check whether a token forms its own split-bar measure.

    Tie groups ("(1 4)", "[1 4]", "1_4") are split bars. An ending is a
    split bar only when its interior uses a tie group itself.

    Parameters
    ----------
    token : str
        The token to check.

    Returns
    -------
    bool
        True if the token should become its own measure.

    Examples
    --------
    >>> is_split_bar_token("(1 4)")
    True
    >>> is_split_bar_token("1_4")
    True
    >>> is_split_bar_token("14")
    False
    >>> is_split_bar_token("2[1 2 3]")
    False
    >>> is_split_bar_token("2[(1 2) 3]")
    True
    """
    pending = [token]
    while pending:
        piece = pending.pop()
        ending = ENDING_RE.match(piece)
        if ending:
            pending.extend(scan_tokens(ending.group(2)))
            continue
        if is_meter_token(piece):
            continue
        if "_" in piece or _is_wrapped(piece, "(", ")") or _is_wrapped(piece, "[", "]"):
            return True
    return False


def modulation_token(token: str) -> int | None:
    """Return the semitones of a standalone "<mod+N>" pseudo-token.

    Examples
    --------
    >>> modulation_token("<mod-2>")
    -2
    >>> modulation_token("<1>") is None
    True
    """
    match = MODULATION_TOKEN_RE.match(token)
    if not match:
        return None
    sign = 1 if match.group(1) == "+" else -1
    return sign * int(match.group(2))


def _parse_all(pieces: list[str], nashville_mode: bool) -> list[Chord]:
    chords = []
    for piece in pieces:
        chord = parse_chord_token(piece, nashville_mode=nashville_mode)
        if chord is None:
            logger.debug("Dropped empty chord token %r", piece)
            continue
        chords.append(chord)
    return chords


def _parse_pieces(pieces: list[str], nashville_mode: bool) -> list[Chord]:
    """Parse chord pieces, folding "<mod+N>" pieces into the chord before them."""
    chords: list[Chord] = []
    for piece in pieces:
        semitones = modulation_token(piece)
        if semitones is not None:
            if not chords:
                logger.debug("Ignored %r with no preceding chord", piece)
                continue
            chords[-1] = replace(chords[-1], modulation=semitones)
            continue

        chord = parse_chord_token(piece, nashville_mode=nashville_mode)
        if chord is None:
            logger.debug("Dropped empty chord token %r", piece)
            continue
        chords.append(chord)
    return chords


def _expand_ending(
    number: int,
    inner: str,
    group_id: int,
    nashville_mode: bool,
    next_group_id: Callable[[], int] | None,
    depth: int,
) -> GroupExpansion:
    if has_whitespace(inner) or is_split_bar_token(inner):
        pieces = scan_tokens(inner)
    else:
        pieces = split_compact(inner)

    chords: list[Chord] = []
    was_tie = False
    for piece in pieces:
        piece_group = group_id
        if next_group_id is not None and _is_wrapped(piece, "(", ")"):
            piece_group = next_group_id()
        expansion = expand_group(
            piece,
            piece_group,
            nashville_mode=nashville_mode,
            next_group_id=next_group_id,
            depth=depth + 1,
        )
        chords.extend(expansion.chords)
        was_tie = was_tie or expansion.was_tie

    # One ending marker per bracket, on the first chord only
    if chords:
        chords[0] = replace(chords[0], ending=number)
    return GroupExpansion(chords=tuple(chords), was_tie=was_tie)


def _expand_parentheses(inner: str, group_id: int, nashville_mode: bool) -> GroupExpansion:
    chords = [
        replace(chord, in_parentheses=True, parentheses_group_id=group_id)
        for chord in _parse_pieces(split_interior(inner), nashville_mode)
    ]
    return GroupExpansion(chords=tuple(chords), was_tie=True)


def _expand_underscores(token: str, nashville_mode: bool) -> GroupExpansion:
    parts = [part for part in token.split("_") if part]
    chords = [
        replace(chord, number=chord.number + "_")
        for chord in _parse_all(parts, nashville_mode)
    ]
    return GroupExpansion(chords=tuple(chords), was_tie=True)


def _diamond_run(token: str) -> list[str] | None:
    """Return the pieces of a diamond token that runs into another ("<1><2>")."""
    if not token.startswith("<"):
        return None
    pieces = split_compact(token)
    if any(piece.startswith("<") for piece in pieces[1:]):
        return pieces
    return None


def expand_group(
    token: str,
    group_id: int = 0,
    *,
    nashville_mode: bool = True,
    next_group_id: Callable[[], int] | None = None,
    depth: int = 0,
) -> GroupExpansion:
    """Expand a token into its chords.

    Parameters
    ----------
    token : str
        A single token: ending "N[...]", tie group "(...)", "[...]" or
        "a_b", or a plain chord token.
    group_id : int
        Identifier stamped on the chords of a parenthesised group.
    nashville_mode : bool
        Display hint stored on the chords.
    next_group_id : Callable[[], int] | None
        Source of fresh group ids for groups nested inside an ending. When
        None, nested groups reuse ``group_id``.
    depth : int
        How many endings enclose ``token``. Endings at
        :data:`MAX_ENDING_DEPTH` are parsed as a literal chord.

    Returns
    -------
    GroupExpansion
        The chords and whether the token was a tie group.

    Examples
    --------
    >>> [c.number for c in expand_group("3[1 4 5]").chords]
    ['1', '4', '5']
    >>> [c.ending for c in expand_group("3[1 4 5]").chords]
    [3, None, None]
    >>> expansion = expand_group("(1 4)", 7)
    >>> [c.parentheses_group_id for c in expansion.chords], expansion.was_tie
    ([7, 7], True)
    >>> [c.number for c in expand_group("1_6-").chords]
    ['1_', '6-_']
    >>> [(c.number, c.diamond) for c in expand_group("<1><2>").chords]
    [('1', True), ('2', True)]
    """
    ending = ENDING_RE.match(token)
    if ending and depth < MAX_ENDING_DEPTH:
        return _expand_ending(
            int(ending.group(1)),
            ending.group(2),
            group_id,
            nashville_mode,
            next_group_id,
            depth,
        )
    if ending:
        logger.debug("Kept ending nested %d deep as chord text", depth)
        return GroupExpansion(chords=tuple(_parse_all([token], nashville_mode)))

    if _is_wrapped(token, "(", ")"):
        return _expand_parentheses(token[1:-1], group_id, nashville_mode)

    if _is_wrapped(token, "[", "]"):
        chords = _parse_all(split_interior(token[1:-1]), nashville_mode)
        return GroupExpansion(chords=tuple(chords), was_tie=True)

    if "_" in token:
        return _expand_underscores(token, nashville_mode)

    pieces = _diamond_run(token)
    if pieces is not None:
        return GroupExpansion(chords=tuple(_parse_pieces(pieces, nashville_mode)))

    chord = parse_chord_token(token, nashville_mode=nashville_mode)
    if chord is None:
        logger.debug("Dropped empty chord token %r", token)
        return GroupExpansion(chords=())
    return GroupExpansion(chords=(chord,))
