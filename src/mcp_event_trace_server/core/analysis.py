"""Analysis driver: ingest lines, then measure every configured event."""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .aggregator import aggregate
from .errors import SkippableLineError
from .line_parser import LineParser, NoMatch, ParsedRecord
from .matcher import match_event
from .models import EventOutcome, EventResult, EventSpec, IngestStats, LogRecord
from .store import RecordStore

logger = logging.getLogger(__name__)

MAX_RECENT_SKIPS = 20


@dataclass(frozen=True, slots=True)
class CompiledEvent:
    """An event with both patterns compiled."""

    spec: EventSpec
    start: re.Pattern[str]
    end: re.Pattern[str]

    @property
    def name(self) -> str:
        return self.spec.name


def dedupe_events(events: Iterable[EventSpec]) -> list[EventSpec]:
    """Drop earlier definitions of a repeated event name; the last one wins."""
    by_name: dict[str, EventSpec] = {}
    for ev in events:
        if ev.name in by_name:
            logger.warning("Event %r defined more than once; using the last definition", ev.name)
        by_name[ev.name] = ev
    return list(by_name.values())


def compile_events(events: Iterable[EventSpec]) -> list[CompiledEvent]:
    """Dedupe and compile events; raises ConfigError on the first invalid pattern."""
    return [CompiledEvent(ev, *ev.compile()) for ev in dedupe_events(events)]


def analyze_event(
    records: Sequence[LogRecord],
    event: CompiledEvent,
    *,
    debug: bool = False,
) -> EventOutcome:
    """Match one event against ordered records and aggregate its durations."""
    spec = event.spec
    logger.info(
        "Analyzing event: %s, start=%s, end=%s", spec.name, spec.start_pattern, spec.end_pattern
    )

    matches = match_event(records, event.start, event.end, name=spec.name, debug=debug)
    outcome = aggregate(matches.starts, matches.ends, name=spec.name, matches=matches)

    if not isinstance(outcome, EventResult):
        logger.info(
            "No matches for event %s: starts=%d, ends=%d",
            spec.name,
            outcome.starts_seen,
            outcome.ends_seen,
        )
        return outcome

    if debug:
        for i, d in enumerate(outcome.instances, start=1):
            logger.debug("Event %s instance %d duration: %s", spec.name, i, d)
        logger.debug("Event %s average duration: %s", spec.name, outcome.average)
    if outcome.unpaired:
        logger.info(
            "Event %s: %d start(s) / %d end(s); %d left unpaired",
            spec.name,
            outcome.starts_seen,
            outcome.ends_seen,
            outcome.unpaired,
        )
    return outcome


def analyze_compiled(
    records: Sequence[LogRecord],
    events: Sequence[CompiledEvent],
    *,
    debug: bool = False,
) -> list[EventOutcome]:
    """Run already-compiled events, in order, against the same ordered record set."""
    return [analyze_event(records, ev, debug=debug) for ev in events]


def analyze(
    records: Sequence[LogRecord],
    events: Iterable[EventSpec],
    *,
    debug: bool = False,
) -> list[EventOutcome]:
    """Compile every event first, so a bad pattern aborts before any output, then run them."""
    return analyze_compiled(records, compile_events(events), debug=debug)


class Analyzer:
    """Ingest raw lines into a record store and analyze events over it."""

    def __init__(
        self,
        line_parser: LineParser,
        *,
        store: RecordStore | None = None,
        debug: bool | None = None,
    ) -> None:
        self.line_parser = line_parser
        self.store = store if store is not None else RecordStore()
        self.debug = line_parser.debug if debug is None else debug
        self._lines_read = 0
        self._no_match = 0
        self._malformed = 0
        self._recent_skips: deque[SkippableLineError] = deque(maxlen=MAX_RECENT_SKIPS)

    @property
    def stats(self) -> IngestStats:
        return IngestStats(
            lines_read=self._lines_read,
            records=len(self.store),
            no_match=self._no_match,
            malformed=self._malformed,
            recent_skips=tuple(self._recent_skips),
        )

    def feed(self, line_no: int, line: str) -> LogRecord | None:
        """Parse one line; store and return its record, or None if the line was skipped."""
        self._lines_read += 1
        out = self.line_parser.parse(line_no, line)
        if isinstance(out, ParsedRecord):
            self.store.insert(out.record)
            return out.record

        if isinstance(out, NoMatch):
            self._no_match += 1
        else:
            self._malformed += 1
        self._recent_skips.append(out.to_error())
        return None

    def ingest(self, lines: Iterable[str], *, start: int = 1) -> IngestStats:
        """Feed every line (numbered from ``start``) and return the running counters."""
        for line_no, line in enumerate(lines, start=start):
            self.feed(line_no, line.rstrip("\r\n"))
        stats = self.stats
        logger.info(
            "Finished reading %d lines (%d records, %d skipped)",
            stats.lines_read,
            stats.records,
            stats.skipped,
        )
        return stats

    def run(self, events: Iterable[EventSpec]) -> list[EventOutcome]:
        return analyze(self.store.all_ordered(), events, debug=self.debug)
