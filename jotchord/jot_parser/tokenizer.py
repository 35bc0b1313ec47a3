"""Depth-aware tokenizer for JotChord measure lines.

Whitespace separates tokens only outside parentheses and brackets, so a tie
group such as "(1 4)" stays a single token. Closed "/*...*/" comments are
never split either; they travel with the chord they annotate.
"""

from __future__ import annotations

import re

# Scale degrees, letter names (H is the German B), rests and sentinels
CHORD_HEADS = frozenset("0123456789ABCDEFGHXx%*")

MODULATION_AT_RE = re.compile(r"mod[+-]\d+")


def scan_tokens(text: str) -> list[str]:
    """Split text on whitespace at bracket depth zero.

    Parameters
    ----------
    text : str
        A measure line or group interior, without trailing comment.

    Returns
    -------
    list[str]
        Tokens in reading order. An unbalanced opening bracket swallows the
        rest of the text into one token.

    Examples
    --------
    >>> scan_tokens("1 (1 4) 5")
    ['1', '(1 4)', '5']
    >>> scan_tokens("2[1 2 3]  4/*soft intro*/")
    ['2[1 2 3]', '4/*soft intro*/']
    """
    tokens: list[str] = []
    depth = 0
    start: int | None = None
    i = 0
    n = len(text)

    while i < n:
        # Comment spans are opaque
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if start is None:
                start = i
            i = n if end == -1 else end + 2
            continue

        ch = text[i]
        if ch.isspace() and depth == 0:
            if start is not None:
                tokens.append(text[start:i])
                start = None
            i += 1
            continue

        if start is None:
            start = i
        if ch in "([":
            depth += 1
        elif ch in ")]" and depth > 0:
            depth -= 1
        i += 1

    if start is not None:
        tokens.append(text[start:])

    return tokens


def _opens_diamond(text: str, i: int) -> bool:
    """Return True when the "<" at ``i`` starts a bracketed token.

    A "<" directly followed by a letter, digit or sharp opens "<1>" or
    "<mod+2>"; anything else makes it a trailing push marker.
    """
    return i + 1 < len(text) and (text[i + 1].isalnum() or text[i + 1] == "#")


def _starts_chord(text: str, i: int) -> bool:
    ch = text[i]
    if ch == "<":
        return _opens_diamond(text, i)
    if ch == "#":
        return i + 1 < len(text) and text[i + 1] in CHORD_HEADS
    if ch == "b":
        # Lower-case b is a flat only in front of a scale degree
        return i + 1 < len(text) and text[i + 1].isdigit()
    return ch in CHORD_HEADS


def split_compact(run: str) -> list[str]:
    """Split a whitespace-free run of chords into chord tokens.

    A new chord starts at every scale-degree digit, upper-case letter, rest,
    sentinel, accidental or opening diamond. Everything else (dots, note
    values, accents, quality letters) stays with the preceding chord.

    Parameters
    ----------
    run : str
        The run to split, e.g. the interior of "(3444)".

    Returns
    -------
    list[str]
        Chord tokens in reading order.

    Examples
    --------
    >>> split_compact("3444")
    ['3', '4', '4', '4']
    >>> split_compact("<1><2>")
    ['<1>', '<2>']
    >>> split_compact("1..b7-<1><")
    ['1..', 'b7-', '<1><']
    """
    tokens: list[str] = []
    current = ""
    i = 0
    n = len(run)

    while i < n:
        if current and current not in ("#", "b") and _starts_chord(run, i):
            tokens.append(current)
            current = ""

        if run[i] == "<" and _opens_diamond(run, i):
            close = run.find(">", i + 1)
            stop = n if close == -1 else close + 1
            current += run[i:stop]
            i = stop
            continue

        if run.startswith("/*", i):
            end = run.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            current += run[i:stop]
            i = stop
            continue

        modulation = MODULATION_AT_RE.match(run, i)
        if modulation:
            current += modulation.group(0)
            i = modulation.end()
            continue

        current += run[i]
        i += 1

    if current:
        tokens.append(current)

    return tokens


def split_interior(inner: str) -> list[str]:
    """Split the interior of a group into chord tokens.

    Interiors containing any whitespace are split on it, so "(1sus4 )"
    keeps a single chord; compact interiors such as "1234" go through
    :func:`split_compact`.

    Examples
    --------
    >>> split_interior("1e 2q")
    ['1e', '2q']
    >>> split_interior("1234")
    ['1', '2', '3', '4']
    """
    if has_whitespace(inner):
        return scan_tokens(inner)
    return split_compact(inner)


def has_whitespace(text: str) -> bool:
    return any(ch.isspace() for ch in text)


def split_trailing_comment(line: str) -> tuple[str, str | None]:
    """Separate a trailing "//" or unterminated "/*" comment from a line.

    Closed "/*...*/" spans are left in place.

    Parameters
    ----------
    line : str
        The measure line.

    Returns
    -------
    tuple[str, str | None]
        The line without the comment, and the stripped comment text (None
        when absent or empty).

    Examples
    --------
    >>> split_trailing_comment("1 4 5 //build up")
    ('1 4 5', 'build up')
    >>> split_trailing_comment("1/*soft*/ 4 /* tacet after")
    ('1/*soft*/ 4', 'tacet after')
    >>> split_trailing_comment("1 4")
    ('1 4', None)
    """
    i = 0
    n = len(line)
    while i < n:
        if line.startswith("/*", i):
            end = line.find("*/", i + 2)
            if end == -1:
                return line[:i].rstrip(), line[i + 2 :].strip() or None
            i = end + 2
            continue
        if line.startswith("//", i):
            return line[:i].rstrip(), line[i + 2 :].strip() or None
        i += 1
    return line, None
