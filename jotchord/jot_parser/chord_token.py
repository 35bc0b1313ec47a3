"""Chord token parsing.

A chord token such as "<1>!<" or "#5-...=" is parsed by peeling modifiers
off in a fixed order. Several symbols change meaning with position ("<" is a
diamond at the start but an early push at the end, "." is a beat tick only
once note values are gone), so the order of :data:`STEPS` is significant.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Callable

from jotchord.models import Chord, NoteAnnotation, NoteValue, PushKind, WalkKind

# Tokens that are complete chords by themselves
SENTINELS = frozenset({"*", "%"})

NOTE_VALUES = "whqest"

# Quality words ending in a note-value letter ("4sus" is not "4su" + sixteenth)
QUALITY_ENDINGS = ("sus", "alt")

INLINE_COMMENT_RE = re.compile(r"/\*(.*?)\*/")
MODULATION_RE = re.compile(r"mod([+-])(\d+)")
WALK_DOWN_RE = re.compile(r"@(?:walkdown|wd)")
WALK_UP_RE = re.compile(r"@(?:walkup|wu)")
DIAMOND_RE = re.compile(r"^<([^>]+)>")
TRAILING_DOTS_RE = re.compile(r"\.+$")


@dataclass(frozen=True)
class _Draft:
    """Token text still to be parsed, plus the modifiers found so far."""

    text: str
    done: bool = False
    inline_comment: str | None = None
    modulation: int | None = None
    walk: WalkKind | None = None
    diamond: bool = False
    tie: bool = False
    fermata: bool = False
    accent: bool = False
    push: PushKind | None = None
    note_value: NoteValue | None = None
    beats: int | None = None


def strip_sentinel(draft: _Draft) -> _Draft:
    """Stop parsing for the literal separator and repeat sentinels."""
    if draft.text in SENTINELS:
        return replace(draft, done=True)
    return draft


def strip_inline_comment(draft: _Draft) -> _Draft:
    """Extract a "/*...*/" comment; only the first one is kept."""
    match = INLINE_COMMENT_RE.search(draft.text)
    if not match:
        return draft
    return replace(
        draft,
        text=INLINE_COMMENT_RE.sub("", draft.text),
        inline_comment=match.group(1).strip() or None,
    )


def strip_modulation(draft: _Draft) -> _Draft:
    """Extract a signed "mod+N" / "mod-N" modulation."""
    match = MODULATION_RE.search(draft.text)
    if not match:
        return draft
    sign = 1 if match.group(1) == "+" else -1
    return replace(
        draft,
        text=MODULATION_RE.sub("", draft.text),
        modulation=sign * int(match.group(2)),
    )


def strip_walk(draft: _Draft) -> _Draft:
    """Extract a walk down ("@wd", "@walkdown") or walk up ("@wu", "@walkup")."""
    if WALK_DOWN_RE.search(draft.text):
        return replace(draft, text=WALK_DOWN_RE.sub("", draft.text), walk="down")
    if WALK_UP_RE.search(draft.text):
        return replace(draft, text=WALK_UP_RE.sub("", draft.text), walk="up")
    return draft


def strip_diamond(draft: _Draft) -> _Draft:
    """Unwrap a leading "<...>", keeping whatever follows the ">"."""
    match = DIAMOND_RE.match(draft.text)
    if not match:
        return draft
    return replace(draft, text=match.group(1) + draft.text[match.end() :], diamond=True)


def strip_tie(draft: _Draft) -> _Draft:
    if draft.text.endswith("="):
        return replace(draft, text=draft.text[:-1], tie=True)
    return draft


def strip_fermata(draft: _Draft) -> _Draft:
    if draft.text.endswith("~"):
        return replace(draft, text=draft.text[:-1], fermata=True)
    return draft


def strip_accent(draft: _Draft) -> _Draft:
    """Remove every "!" in the token."""
    if "!" in draft.text:
        return replace(draft, text=draft.text.replace("!", ""), accent=True)
    return draft


def strip_push(draft: _Draft) -> _Draft:
    """Strip a trailing "<" (early) or ">" (late) push."""
    if draft.text.endswith("<"):
        return replace(draft, text=draft.text[:-1], push="early")
    if draft.text.endswith(">"):
        return replace(draft, text=draft.text[:-1], push="late")
    return draft


def strip_note_value(draft: _Draft) -> _Draft:
    """Strip a trailing note-value letter (w, h, q, e, s, t).

    Runs before dot counting, so "1.w" is one beat with a whole-note
    annotation while "1w." keeps "1w" as the chord.
    """
    text = draft.text
    if len(text) < 2 or text[-1] not in NOTE_VALUES:
        return draft
    if text.endswith(QUALITY_ENDINGS):
        return draft
    return replace(draft, text=text[:-1], note_value=text[-1])  # type: ignore[arg-type]


def strip_beats(draft: _Draft) -> _Draft:
    """Count and strip the trailing run of beat dots."""
    match = TRAILING_DOTS_RE.search(draft.text)
    if not match:
        return draft
    return replace(draft, text=draft.text[: match.start()], beats=len(match.group(0)))


Step = Callable[[_Draft], _Draft]

STEPS: tuple[Step, ...] = (
    strip_sentinel,
    strip_inline_comment,
    strip_modulation,
    strip_walk,
    strip_diamond,
    strip_tie,
    strip_fermata,
    strip_accent,
    strip_push,
    strip_note_value,
    strip_beats,
)


def is_rest_number(number: str) -> bool:
    """Return True for rest chords ("X", "x", "X_")."""
    return number[:1] in ("X", "x")


def parse_chord_token(token: str, *, nashville_mode: bool = True) -> Chord | None:
    """Parse one chord token with all its modifiers.

    Parameters
    ----------
    token : str
        A single token without top-level whitespace (e.g. "1...", "<4>!",
        "b7-w", "X").
    nashville_mode : bool
        Display hint stored on the chord.

    Returns
    -------
    Chord | None
        The parsed chord, or None when no chord text remains after the
        modifiers are stripped.

    Examples
    --------
    >>> parse_chord_token("1...").beats
    3
    >>> chord = parse_chord_token("<1>!<")
    >>> chord.number, chord.diamond, chord.accent, chord.push
    ('1', True, True, 'early')
    >>> parse_chord_token("!=") is None
    True
    """
    draft = _Draft(text=token.strip())
    for step in STEPS:
        draft = step(draft)
        if draft.done:
            break

    number = draft.text.strip()
    if not number:
        return None

    return Chord(
        number=number,
        nashville_mode=nashville_mode,
        beats=draft.beats or None,
        accent=draft.accent,
        diamond=draft.diamond,
        push=draft.push,
        tie=draft.tie,
        fermata=draft.fermata,
        walk=draft.walk,
        modulation=draft.modulation or None,
        is_rest=is_rest_number(number),
        inline_comment=draft.inline_comment,
        annotation=NoteAnnotation(value=draft.note_value) if draft.note_value else None,
    )
