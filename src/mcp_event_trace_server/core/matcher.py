"""Event start/end matching over ordered records."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .models import EventMatches, LogRecord

logger = logging.getLogger(__name__)


def match_event(
    records: Iterable[LogRecord],
    start_pattern: re.Pattern[str],
    end_pattern: re.Pattern[str],
    *,
    name: str = "",
    debug: bool = False,
) -> EventMatches:
    """Collect records whose message matches the start and/or end pattern.

    Single pass over ``records``. A record matching both patterns lands in both sequences,
    and both sequences keep traversal order.
    """
    starts: list[LogRecord] = []
    ends: list[LogRecord] = []
    trace: list[tuple[LogRecord, bool]] = []

    for r in records:
        if start_pattern.search(r.message):
            if debug:
                logger.debug("Matched start for event %s at %s: %s", name, r.timestamp, r.message)
            starts.append(r)
            trace.append((r, True))
        if end_pattern.search(r.message):
            if debug:
                logger.debug("Matched end for event %s at %s: %s", name, r.timestamp, r.message)
            ends.append(r)
            trace.append((r, False))

    return EventMatches(start_records=tuple(starts), end_records=tuple(ends), trace=tuple(trace))
