"""Identifier factories for parsed chart elements.

Identifiers only need to be unique within one parse. The default factory is
a per-parse counter, so parsing the same text twice yields the same ids.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdFactory = Callable[[str], str]


class SequentialIds:
    """Counter-based id factory.

    Examples
    --------
    >>> ids = SequentialIds()
    >>> ids("measure"), ids("measure"), ids("section")
    ('measure-1', 'measure-2', 'section-3')
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


def uuid_ids(prefix: str) -> str:
    """Return a random UUID-based id, e.g. ``"measure-3f2c..."``."""
    return f"{prefix}-{uuid.uuid4().hex}"
