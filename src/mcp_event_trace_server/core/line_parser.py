"""Configurable line parser.

The line pattern is matched positionally: group 1 is the date, group 2 the time, group 3 the
level and group 4 the message. Any further groups are ignored, and group names are not used.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .errors import ConfigError, SkippableLineError
from .models import LogRecord, compile_pattern
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)

REQUIRED_GROUPS = 4


@dataclass(frozen=True, slots=True)
class NoMatch:
    """The line pattern did not match; the line is skipped silently."""

    line_no: int
    line: str

    def to_error(self) -> SkippableLineError:
        return SkippableLineError(self.line_no, self.line, "no_match")


@dataclass(frozen=True, slots=True)
class MalformedMatch:
    """The line pattern matched but declares fewer than four groups."""

    line_no: int
    line: str
    group_count: int

    def to_error(self) -> SkippableLineError:
        return SkippableLineError(self.line_no, self.line, "malformed", self.group_count)


@dataclass(frozen=True, slots=True)
class ParsedRecord:
    record: LogRecord


ParsedLine = NoMatch | MalformedMatch | ParsedRecord


def parse_line(line: str, pattern: re.Pattern[str], *, line_no: int = 0) -> ParsedLine:
    """Apply the line pattern to one raw line.

    Raises TimestampFormatError when the line matches but its date/time groups do not parse.
    """
    m = pattern.search(line)
    if m is None:
        return NoMatch(line_no=line_no, line=line)

    groups = m.groups()
    if len(groups) < REQUIRED_GROUPS:
        return MalformedMatch(line_no=line_no, line=line, group_count=len(groups))

    date_str, time_str, level, message = (g or "" for g in groups[:REQUIRED_GROUPS])
    ts = parse_timestamp(date_str, time_str)
    return ParsedRecord(LogRecord(timestamp=ts, level=level, message=message, line_no=line_no))


@dataclass(frozen=True, slots=True)
class LineParser:
    """Parse lines with a configured pattern, logging skips when debug is on."""

    pattern: re.Pattern[str]
    debug: bool = False

    @classmethod
    def from_pattern(cls, pattern: str, *, debug: bool = False) -> LineParser:
        """Compile a line-format pattern; an empty pattern is a configuration error."""
        if not pattern:
            raise ConfigError("Line format pattern is empty. Please check your configuration.")
        return cls(pattern=compile_pattern(pattern, what="line format pattern"), debug=debug)

    def parse(self, line_no: int, line: str) -> ParsedLine:
        if self.debug:
            logger.debug("Read line %d: %s", line_no, line)

        out = parse_line(line, self.pattern, line_no=line_no)

        if isinstance(out, NoMatch):
            if self.debug:
                logger.debug("Line %d did not match pattern: %s", line_no, line)
        elif isinstance(out, MalformedMatch):
            logger.warning(
                "Pattern match error: expected at least %d groups, got %d for line %d: %s",
                REQUIRED_GROUPS,
                out.group_count,
                line_no,
                line,
            )
        elif self.debug:
            r = out.record
            logger.debug(
                "Parsed line %d: ts=%s level=%s message=%s", line_no, r.timestamp, r.level, r.message
            )
        return out
