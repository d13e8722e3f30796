"""
Run algebra: bold/color formatting as intervals over a string.

A text block stores its formatting as a list of :class:`TextRun` intervals.
Every edit goes through the same pipeline:

1. ``normalize_runs``  : sort runs and fill gaps with the default style so the
   result is a full partition of ``[0, len(text))`` into :class:`Segment` s.
2. ``split_segments``  : cut segments at the edit boundaries.
3. restyle the segments fully covered by the edited range.
4. ``merge_segments``  : collapse neighbours with equal style.
5. ``segments_to_runs``: drop default-style segments, giving explicit runs.

``adjust_runs_for_text_change`` keeps runs attached to the right characters
when the text itself changes (insertions, deletions and replacements).

All functions are pure; inputs are never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from blockmail.core.contracts.blocks import TextRun


@dataclass(frozen=True, slots=True)
class TextStyle:
    bold: bool = False
    color: str | None = None


DEFAULT_STYLE = TextStyle()


@dataclass(frozen=True, slots=True)
class Segment:
    """A styled, half-open ``[start, end)`` slice of a partition."""

    start: int
    end: int
    style: TextStyle = DEFAULT_STYLE


def _style_of(run: TextRun) -> TextStyle:
    return TextStyle(bold=run.bold, color=run.color)


def normalize_runs(text_length: int, runs: Iterable[TextRun]) -> list[Segment]:
    """Return the gap-filled partition of ``[0, text_length)`` described by ``runs``."""
    segments: list[Segment] = []
    cursor = 0
    for run in sorted(runs, key=lambda r: r.start):
        if run.start > cursor:
            segments.append(Segment(cursor, run.start))
        segments.append(Segment(run.start, run.end, _style_of(run)))
        cursor = run.end
    if cursor < text_length:
        segments.append(Segment(cursor, text_length))
    return segments


def split_segments(segments: Sequence[Segment], positions: Iterable[int]) -> list[Segment]:
    """Cut every segment at each position strictly inside it.

    Positions on a segment boundary or outside every segment are no-ops, and
    duplicates are ignored.
    """
    boundaries = sorted(set(positions))
    out: list[Segment] = []
    for segment in segments:
        start = segment.start
        for cut in boundaries:
            if segment.start < cut < segment.end:
                out.append(Segment(start, cut, segment.style))
                start = cut
        out.append(Segment(start, segment.end, segment.style))
    return out


def merge_segments(segments: Sequence[Segment]) -> list[Segment]:
    """Collapse adjacent segments whose styles are equal."""
    merged: list[Segment] = []
    for segment in segments:
        if merged and merged[-1].style == segment.style:
            merged[-1] = replace(merged[-1], end=segment.end)
            continue
        merged.append(segment)
    return merged


def segments_to_runs(segments: Iterable[Segment]) -> list[TextRun]:
    """Convert a partition back into explicit runs, dropping default-style segments."""
    return [
        TextRun(start=s.start, end=s.end, bold=s.style.bold, color=s.style.color)
        for s in segments
        if s.style != DEFAULT_STYLE
    ]


def _is_valid_range(text_length: int, start: int, end: int) -> bool:
    return start >= 0 and end <= text_length and end > start


def _restyle(
    split: Sequence[Segment],
    start: int,
    end: int,
    *,
    bold: bool | None = None,
    color: str | None = None,
    set_color: bool = False,
) -> list[TextRun]:
    """Apply a style change to every split segment fully inside ``[start, end)``."""
    updated: list[Segment] = []
    for segment in split:
        if segment.start >= start and segment.end <= end:
            style = segment.style
            if bold is not None:
                style = replace(style, bold=bold)
            if set_color:
                style = replace(style, color=color)
            segment = replace(segment, style=style)
        updated.append(segment)
    return segments_to_runs(merge_segments(updated))


def toggle_bold(text: str, runs: Sequence[TextRun], start: int, end: int) -> list[TextRun]:
    """Toggle bold on ``[start, end)``.

    If *any* character in the range is already bold, bold is cleared on the
    whole range; otherwise it is set on the whole range. An invalid range
    returns ``runs`` unchanged.
    """
    if not _is_valid_range(len(text), start, end):
        return list(runs)

    split = split_segments(normalize_runs(len(text), runs), (start, end))
    any_bold = any(s.style.bold for s in split if s.start >= start and s.end <= end)
    return _restyle(split, start, end, bold=not any_bold)


def apply_color(
    text: str, runs: Sequence[TextRun], start: int, end: int, color: str | None
) -> list[TextRun]:
    """Overwrite the color of ``[start, end)``; ``None`` clears it."""
    if not _is_valid_range(len(text), start, end):
        return list(runs)
    split = split_segments(normalize_runs(len(text), runs), (start, end))
    return _restyle(split, start, end, color=color, set_color=True)


def diff_region(previous: str, current: str) -> tuple[int, int, int]:
    """Locate the edited region between two texts with a symmetric trim.

    Returns ``(start, old_change_end, delta)``: the replaced slice of the old
    text is ``previous[start:old_change_end]`` and the length changed by
    ``delta``.
    """
    min_length = min(len(previous), len(current))
    start = 0
    while start < min_length and previous[start] == current[start]:
        start += 1

    previous_end = len(previous) - 1
    current_end = len(current) - 1
    while (
        previous_end >= start
        and current_end >= start
        and previous[previous_end] == current[current_end]
    ):
        previous_end -= 1
        current_end -= 1

    old_change_end = previous_end + 1 if previous_end >= start else start
    return start, old_change_end, len(current) - len(previous)


def adjust_runs_for_text_change(
    previous_text: str, next_text: str, runs: Sequence[TextRun]
) -> list[TextRun]:
    """Re-anchor ``runs`` after ``previous_text`` became ``next_text``.

    Runs before the edit are kept, runs after it are shifted by the length
    delta, runs overlapping it are truncated to the parts outside the edit, and
    runs fully inside it are dropped. Survivors are clamped to the new text,
    empty ones discarded, and touching runs with identical style merged.
    """
    if previous_text == next_text:
        return list(runs)

    start, old_change_end, delta = diff_region(previous_text, next_text)
    next_length = len(next_text)
    survivors: list[TextRun] = []

    def keep(run: TextRun, run_start: int, run_end: int) -> None:
        run_start = min(max(run_start, 0), next_length)
        run_end = min(max(run_end, 0), next_length)
        if run_end > run_start:
            survivors.append(run.model_copy(update={"start": run_start, "end": run_end}))

    for run in runs:
        if run.end <= start:
            keep(run, run.start, run.end)
            continue
        if run.start >= old_change_end:
            keep(run, run.start + delta, run.end + delta)
            continue
        if run.start < start:
            keep(run, run.start, min(run.end, start))
        if run.end > old_change_end:
            keep(run, max(run.start, old_change_end) + delta, run.end + delta)

    survivors.sort(key=lambda r: r.start)

    merged: list[TextRun] = []
    for run in survivors:
        last = merged[-1] if merged else None
        if (
            last is not None
            and last.end == run.start
            and last.bold == run.bold
            and last.color == run.color
        ):
            merged[-1] = last.model_copy(update={"end": run.end})
            continue
        merged.append(run)
    return merged


__all__ = [
    "DEFAULT_STYLE",
    "Segment",
    "TextStyle",
    "adjust_runs_for_text_change",
    "apply_color",
    "diff_region",
    "merge_segments",
    "normalize_runs",
    "segments_to_runs",
    "split_segments",
    "toggle_bold",
]
