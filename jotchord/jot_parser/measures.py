"""Measure line tokenization.

Turns one source line into measures: repeat bars "||: ... :||{N}", pipe
separated measures, tie groups that become their own split-bar measures,
multi-measure repeats "%%" and inline meter changes "[3/8]".
"""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass, replace
from typing import Iterator

from jotchord.jot_parser.groups import expand_group, is_split_bar_token, modulation_token
from jotchord.jot_parser.ids import IdFactory, SequentialIds
from jotchord.jot_parser.tokenizer import scan_tokens, split_trailing_comment
from jotchord.models import Chord, Measure

logger = logging.getLogger(__name__)

REPEAT_BAR_RE = re.compile(r"^\|\|:\s*(.*?)\s*:\|\|(\{(\d+)\})?$")
METER_CHANGE_RE = re.compile(r"^\[(\d+/\d+)\]$")
MULTI_MEASURE_REPEAT_RE = re.compile(r"^%{2,}$")


@dataclass(frozen=True)
class LineTokens:
    """Measures parsed from one source line.

    Parameters
    ----------
    measures : tuple[Measure, ...]
        The measures of the line; never empty.
    is_repeat : bool
        Whether the line was a "||: ... :||" repeat bar.
    repeat_multiplier : int | None
        The "{N}" multiplier of a repeat bar.
    """

    measures: tuple[Measure, ...]
    is_repeat: bool = False
    repeat_multiplier: int | None = None


class _SegmentBuilder:
    """Groups the tokens of one pipe segment into measures."""

    def __init__(
        self,
        ids: IdFactory,
        group_ids: Iterator[int],
        nashville_mode: bool,
        one_bar_per_chord: bool,
    ) -> None:
        self.ids = ids
        self.group_ids = group_ids
        self.nashville_mode = nashville_mode
        self.one_bar_per_chord = one_bar_per_chord
        self.measures: list[Measure] = []
        self.buffer: list[str] = []
        self.pending_meter: str | None = None

    def add(self, token: str) -> None:
        meter = METER_CHANGE_RE.match(token)
        if meter:
            self.flush()
            self.pending_meter = meter.group(1)
            return

        if MULTI_MEASURE_REPEAT_RE.match(token):
            self.flush()
            self._emit(raw_text=token, is_repeat=True, repeat_count=len(token))
            return

        if is_split_bar_token(token):
            self.flush()
            self._emit_tokens([token])
            return

        self.buffer.append(token)

    def flush(self) -> None:
        if not self.buffer:
            return
        if self.one_bar_per_chord:
            for token in self.buffer:
                self._emit_tokens([token])
        else:
            self._emit_tokens(self.buffer)
        self.buffer = []

    def finish(self) -> list[Measure]:
        self.flush()
        if self.pending_meter is not None:
            # A meter change with nothing after it still needs a measure
            self._emit()
        return self.measures

    def _emit(self, **fields: object) -> None:
        measure = Measure(id=self.ids("measure"), meter_change=self.pending_meter, **fields)  # type: ignore[arg-type]
        self.pending_meter = None
        self.measures.append(measure)

    def _emit_tokens(self, tokens: list[str]) -> None:
        chords: list[Chord] = []
        was_tie = False
        for token in tokens:
            semitones = modulation_token(token)
            if semitones is not None:
                self._modulate_previous(chords, semitones, token)
                continue

            group_id = next(self.group_ids) if token.startswith("(") else 0
            expansion = expand_group(
                token,
                group_id,
                nashville_mode=self.nashville_mode,
                next_group_id=lambda: next(self.group_ids),
            )
            chords.extend(expansion.chords)
            was_tie = was_tie or expansion.was_tie

        if not chords and all(modulation_token(token) is not None for token in tokens):
            return
        self._emit(chords=tuple(chords), raw_text=" ".join(tokens), is_split_bar=was_tie)

    def _modulate_previous(self, chords: list[Chord], semitones: int, token: str) -> None:
        if chords:
            chords[-1] = replace(chords[-1], modulation=semitones)
            return
        for index in range(len(self.measures) - 1, -1, -1):
            previous = self.measures[index]
            if previous.chords:
                modulated = replace(previous.chords[-1], modulation=semitones)
                self.measures[index] = replace(previous, chords=previous.chords[:-1] + (modulated,))
                return
        logger.debug("Ignored %r with no preceding chord", token)


def _tokenize_segment(
    text: str,
    ids: IdFactory,
    group_ids: Iterator[int],
    nashville_mode: bool,
    one_bar_per_chord: bool,
) -> list[Measure]:
    builder = _SegmentBuilder(ids, group_ids, nashville_mode, one_bar_per_chord)
    for token in scan_tokens(text):
        builder.add(token)
    return builder.finish()


def _tokenize_body(
    text: str,
    ids: IdFactory,
    group_ids: Iterator[int],
    nashville_mode: bool,
    one_bar_per_chord: bool,
    *,
    allow_pipes: bool = True,
) -> list[Measure]:
    if not (allow_pipes and "|" in text):
        return _tokenize_segment(text, ids, group_ids, nashville_mode, one_bar_per_chord)

    measures: list[Measure] = []
    segments = [segment.strip() for segment in text.split("|") if segment.strip()]
    for index, segment in enumerate(segments):
        parsed = _tokenize_segment(segment, ids, group_ids, nashville_mode, one_bar_per_chord)
        if index > 0 and parsed:
            parsed[0] = replace(parsed[0], show_pipe_before=True)
        measures.extend(parsed)
    return measures


def tokenize_line(
    line: str,
    *,
    nashville_mode: bool = True,
    ids: IdFactory | None = None,
    group_ids: Iterator[int] | None = None,
    one_bar_per_chord: bool = False,
) -> LineTokens:
    """Parse one measure line into measures.

    Parameters
    ----------
    line : str
        The source line (without newline).
    nashville_mode : bool
        Display hint stored on the chords.
    ids : IdFactory | None
        Factory for measure ids. A fresh :class:`SequentialIds` when None.
    group_ids : Iterator[int] | None
        Source of parenthesised group ids, shared across a document parse.
    one_bar_per_chord : bool
        Emit one measure per plain chord token instead of one measure for
        the run of plain tokens.

    Returns
    -------
    LineTokens
        The measures and repeat information of the line.

    Examples
    --------
    >>> result = tokenize_line("||: 1 4 5 1 :||{4}")
    >>> result.is_repeat, result.repeat_multiplier
    (True, 4)
    >>> [len(m.chords) for m in tokenize_line("1 4 (5 6) 1").measures]
    [2, 2, 1]
    """
    ids = ids if ids is not None else SequentialIds()
    group_ids = group_ids if group_ids is not None else itertools.count(1)
    body, comment = split_trailing_comment(line.strip())

    is_repeat = False
    multiplier: int | None = None
    repeat = REPEAT_BAR_RE.match(body)
    if repeat:
        is_repeat = True
        multiplier = int(repeat.group(3)) if repeat.group(3) else None
        measures = _tokenize_body(repeat.group(1), ids, group_ids, nashville_mode, one_bar_per_chord)
    else:
        allow_pipes = "||:" not in body and ":||" not in body
        measures = _tokenize_body(
            body,
            ids,
            group_ids,
            nashville_mode,
            one_bar_per_chord,
            allow_pipes=allow_pipes,
        )

    if not measures:
        measures = [Measure(id=ids("measure"))]
    if comment is not None:
        measures[-1] = replace(measures[-1], comment=comment)

    return LineTokens(measures=tuple(measures), is_repeat=is_repeat, repeat_multiplier=multiplier)
