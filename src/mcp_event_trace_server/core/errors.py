"""Error taxonomy for the event tracing engine.

Fatal errors (ConfigError, TimestampFormatError, StoreAccessError) propagate to the entry point.
SkippableLineError is absorbed during ingestion and only reported.
"""

from __future__ import annotations

from typing import Literal

SkipReason = Literal["no_match", "malformed"]


class EventTraceError(Exception):
    """Base class for all engine errors."""


class ConfigError(EventTraceError, ValueError):
    """Invalid or missing configuration (line pattern, event patterns, config file)."""


class TimestampFormatError(EventTraceError, ValueError):
    """Date/time strings extracted from a line do not fit the fixed timestamp layout."""

    def __init__(self, date_str: str, time_str: str, layout: str) -> None:
        self.date_str = date_str
        self.time_str = time_str
        self.layout = layout
        super().__init__(
            f"cannot parse timestamp {date_str + ' ' + time_str!r} with layout {layout!r}"
        )


class StoreAccessError(EventTraceError):
    """Failure to insert into or read from the ordered record store."""


class SkippableLineError(EventTraceError):
    """A log line that was skipped during ingestion."""

    def __init__(
        self,
        line_no: int,
        line: str,
        reason: SkipReason,
        group_count: int | None = None,
    ) -> None:
        self.line_no = line_no
        self.line = line
        self.reason = reason
        self.group_count = group_count
        if reason == "malformed":
            msg = f"line {line_no}: expected at least 4 groups, got {group_count}"
        else:
            msg = f"line {line_no}: did not match line pattern"
        super().__init__(msg)
