"""Core data models for event tracing."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .errors import ConfigError, SkippableLineError


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One successfully parsed log line."""

    timestamp: datetime  # naive; no timezone is attached
    level: str
    message: str
    line_no: int = field(default=0, compare=False)


@dataclass(frozen=True, slots=True)
class EventSpec:
    """A named pair of start/end patterns, matched against record messages."""

    name: str
    start_pattern: str
    end_pattern: str

    def compile(self) -> tuple[re.Pattern[str], re.Pattern[str]]:
        """Compile both patterns, raising ConfigError on invalid regex syntax."""
        return (
            compile_pattern(self.start_pattern, what=f"event {self.name!r} start pattern"),
            compile_pattern(self.end_pattern, what=f"event {self.name!r} end pattern"),
        )


def compile_pattern(pattern: str, *, what: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"Invalid {what} {pattern!r}: {e}") from e


@dataclass(frozen=True, slots=True)
class EventMatches:
    """Start/end occurrences of one event, in record traversal order."""

    start_records: tuple[LogRecord, ...] = ()
    end_records: tuple[LogRecord, ...] = ()
    # (record, is_start) in traversal order; a record matching both appears as start, then end
    trace: tuple[tuple[LogRecord, bool], ...] = ()

    @property
    def starts(self) -> list[datetime]:
        return [r.timestamp for r in self.start_records]

    @property
    def ends(self) -> list[datetime]:
        return [r.timestamp for r in self.end_records]


@dataclass(frozen=True, slots=True)
class EventResult:
    """Durations measured for one configured event."""

    name: str
    instances: tuple[timedelta, ...]
    average: timedelta
    starts_seen: int
    ends_seen: int
    matches: EventMatches | None = field(default=None, compare=False, repr=False)

    @property
    def unpaired(self) -> int:
        """Starts or ends dropped by positional pairing."""
        return abs(self.starts_seen - self.ends_seen)


@dataclass(frozen=True, slots=True)
class NoMatches:
    """Outcome for an event with no starts or no ends."""

    name: str
    starts_seen: int = 0
    ends_seen: int = 0
    matches: EventMatches | None = field(default=None, compare=False, repr=False)


EventOutcome = EventResult | NoMatches


@dataclass(frozen=True, slots=True)
class IngestStats:
    """Counters collected while loading a log file."""

    lines_read: int = 0
    records: int = 0
    no_match: int = 0
    malformed: int = 0
    # most recent skipped lines, oldest first
    recent_skips: tuple[SkippableLineError, ...] = field(default=(), compare=False, repr=False)

    @property
    def skipped(self) -> int:
        return self.no_match + self.malformed


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Ingestion counters plus one outcome per configured event."""

    outcomes: Sequence[EventOutcome]
    stats: IngestStats = field(default_factory=IngestStats)
