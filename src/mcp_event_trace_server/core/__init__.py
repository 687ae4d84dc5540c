"""Event tracing engine: line parsing, ordered storage, start/end matching and aggregation."""

from __future__ import annotations

from .aggregator import aggregate, pair_durations
from .analysis import (
    Analyzer,
    CompiledEvent,
    analyze,
    analyze_compiled,
    analyze_event,
    compile_events,
    dedupe_events,
)
from .errors import (
    ConfigError,
    EventTraceError,
    SkippableLineError,
    StoreAccessError,
    TimestampFormatError,
)
from .line_parser import LineParser, MalformedMatch, NoMatch, ParsedLine, ParsedRecord, parse_line
from .matcher import match_event
from .models import (
    AnalysisReport,
    EventMatches,
    EventOutcome,
    EventResult,
    EventSpec,
    IngestStats,
    LogRecord,
    NoMatches,
)
from .store import RecordStore
from .timestamps import TIMESTAMP_LAYOUT, format_timestamp, parse_timestamp

__all__ = [
    "TIMESTAMP_LAYOUT",
    "AnalysisReport",
    "Analyzer",
    "CompiledEvent",
    "ConfigError",
    "EventMatches",
    "EventOutcome",
    "EventResult",
    "EventSpec",
    "EventTraceError",
    "IngestStats",
    "LineParser",
    "LogRecord",
    "MalformedMatch",
    "NoMatch",
    "NoMatches",
    "ParsedLine",
    "ParsedRecord",
    "RecordStore",
    "SkippableLineError",
    "StoreAccessError",
    "TimestampFormatError",
    "aggregate",
    "analyze",
    "analyze_compiled",
    "analyze_event",
    "compile_events",
    "dedupe_events",
    "format_timestamp",
    "match_event",
    "pair_durations",
    "parse_line",
    "parse_timestamp",
]
