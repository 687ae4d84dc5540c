"""Interval aggregation: positional start/end pairing."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from .models import EventMatches, EventOutcome, EventResult, NoMatches


def pair_durations(starts: Sequence[datetime], ends: Sequence[datetime]) -> list[timedelta]:
    """Pair the i-th start with the i-th end.

    Starts or ends beyond the shorter sequence are dropped. An end that precedes its paired
    start yields a negative duration.
    """
    return [end - start for start, end in zip(starts, ends)]


def mean_duration(durations: Sequence[timedelta]) -> timedelta:
    """Average in whole microseconds, truncated toward zero."""
    us = sum(durations, timedelta()) // timedelta(microseconds=1)
    q = abs(us) // len(durations)
    return timedelta(microseconds=-q if us < 0 else q)


def aggregate(
    starts: Sequence[datetime],
    ends: Sequence[datetime],
    *,
    name: str = "",
    matches: EventMatches | None = None,
) -> EventOutcome:
    """Return per-pair durations and their average, or NoMatches when either side is empty."""
    if not starts or not ends:
        return NoMatches(name=name, starts_seen=len(starts), ends_seen=len(ends), matches=matches)

    instances = pair_durations(starts, ends)
    return EventResult(
        name=name,
        instances=tuple(instances),
        average=mean_duration(instances),
        starts_seen=len(starts),
        ends_seen=len(ends),
        matches=matches,
    )
