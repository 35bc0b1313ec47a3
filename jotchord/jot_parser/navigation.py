"""Navigation marker vocabulary (segno, coda, D.S., D.C., Fine, To Coda)."""

from __future__ import annotations

import re

from jotchord.models import NavigationKind, NavigationMarker

# Keywords are matched upper-cased with whitespace collapsed
NAVIGATION_KEYWORDS: dict[str, NavigationKind] = {
    "§": "segno",
    "SEGNO": "segno",
    "⊕": "coda",
    "CODA": "coda",
    "D.S.": "ds",
    "DS": "ds",
    "D.S. AL FINE": "ds-al-fine",
    "DS AL FINE": "ds-al-fine",
    "D.S. AL CODA": "ds-al-coda",
    "DS AL CODA": "ds-al-coda",
    "D.C.": "dc",
    "DC": "dc",
    "D.C. AL FINE": "dc-al-fine",
    "DC AL FINE": "dc-al-fine",
    "D.C. AL CODA": "dc-al-coda",
    "DC AL CODA": "dc-al-coda",
    "FINE": "fine",
    "TO CODA": "to-coda",
    "TO ⊕": "to-coda",
}

_WHITESPACE_RE = re.compile(r"\s+")


def match_navigation_marker(line: str) -> NavigationMarker | None:
    """Return the navigation marker a whole line spells, if any.

    Parameters
    ----------
    line : str
        A stripped source line.

    Returns
    -------
    NavigationMarker | None
        The marker, or None when the line is not an exact keyword.

    Examples
    --------
    >>> match_navigation_marker("D.S. al Coda").kind
    'ds-al-coda'
    >>> match_navigation_marker("to  coda").kind
    'to-coda'
    >>> match_navigation_marker("CODA:") is None
    True
    """
    normalized = _WHITESPACE_RE.sub(" ", line.strip()).upper()
    kind = NAVIGATION_KEYWORDS.get(normalized)
    if kind is None:
        return None
    return NavigationMarker(kind=kind, text=line.strip())
