from __future__ import annotations

import logging
import re

import pytest

from mcp_event_trace_server.core.errors import ConfigError, TimestampFormatError
from mcp_event_trace_server.core.line_parser import (
    LineParser,
    MalformedMatch,
    NoMatch,
    ParsedRecord,
    parse_line,
)
from mcp_event_trace_server.core.timestamps import parse_timestamp


def test_parse_line_record(line_pattern: str) -> None:
    out = parse_line("2024-01-01 10:00:00 [INFO] Backup job triggered", re.compile(line_pattern), line_no=3)
    assert isinstance(out, ParsedRecord)
    r = out.record
    assert r.timestamp == parse_timestamp("2024-01-01", "10:00:00")
    assert r.level == "INFO"
    assert r.message == "Backup job triggered"
    assert r.line_no == 3


@pytest.mark.parametrize(
    ("date_str", "time_str", "level", "message"),
    [
        ("2024-01-01", "00:00:00", "INFO", "Backup job triggered"),
        ("1999-12-31", "23:59:59", "ERROR", "disk [sda] failed: code=5"),
        ("2024-02-29", "12:30:45", "DEBUG", "x"),
    ],
)
def test_parse_line_formatted_tuple_parses_back(
    line_pattern: str, date_str: str, time_str: str, level: str, message: str
) -> None:
    line = f"{date_str} {time_str} [{level}] {message}"
    out = parse_line(line, re.compile(line_pattern))
    assert isinstance(out, ParsedRecord)
    assert out.record.level == level
    assert out.record.message == message
    assert out.record.timestamp == parse_timestamp(date_str, time_str)


def test_parse_line_no_match_is_skipped(line_pattern: str) -> None:
    out = parse_line("garbage line", re.compile(line_pattern), line_no=7)
    assert out == NoMatch(line_no=7, line="garbage line")
    err = out.to_error()
    assert err.reason == "no_match"
    assert err.line_no == 7


def test_parse_line_three_groups_is_malformed() -> None:
    pattern = re.compile(r"^(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2}) (.+)$")
    out = parse_line("2024-01-01 10:00:00 hello", pattern, line_no=2)
    assert isinstance(out, MalformedMatch)
    assert out.group_count == 3
    err = out.to_error()
    assert err.reason == "malformed"
    assert "got 3" in str(err)


def test_parse_line_extra_groups_ignored() -> None:
    pattern = re.compile(r"^(\S+) (\S+) (\w+) (.+?)( \(pid=(\d+)\))?$")
    out = parse_line("2024-01-01 10:00:00 WARN slow query (pid=42)", pattern)
    assert isinstance(out, ParsedRecord)
    assert out.record.level == "WARN"
    assert out.record.message == "slow query"


def test_parse_line_bad_timestamp_is_fatal() -> None:
    pattern = re.compile(r"^(\S+) (\S+) \[(\w+)\] (.+)$")
    with pytest.raises(TimestampFormatError):
        parse_line("2024-99-01 10:00:00 [INFO] bad month", pattern)


def test_parse_line_search_is_unanchored() -> None:
    pattern = re.compile(r"(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2}) (\w+): (.+)")
    out = parse_line("host-a 2024-01-01 10:00:00 INFO: up", pattern)
    assert isinstance(out, ParsedRecord)
    assert out.record.message == "up"


def test_line_parser_from_pattern_rejects_empty() -> None:
    with pytest.raises(ConfigError, match="empty"):
        LineParser.from_pattern("")


def test_line_parser_from_pattern_rejects_invalid_regex() -> None:
    with pytest.raises(ConfigError):
        LineParser.from_pattern(r"^(\d{4}")


def test_line_parser_logs_malformed_even_without_debug(caplog: pytest.LogCaptureFixture) -> None:
    parser = LineParser.from_pattern(r"^(\S+) (\S+) (.+)$")
    with caplog.at_level(logging.DEBUG, logger="mcp_event_trace_server"):
        out = parser.parse(1, "2024-01-01 10:00:00 hi")
    assert isinstance(out, MalformedMatch)
    assert any("expected at least 4 groups" in r.getMessage() for r in caplog.records)


def test_line_parser_debug_flag_controls_line_tracing(
    line_pattern: str, caplog: pytest.LogCaptureFixture
) -> None:
    quiet = LineParser.from_pattern(line_pattern)
    loud = LineParser.from_pattern(line_pattern, debug=True)

    with caplog.at_level(logging.DEBUG, logger="mcp_event_trace_server"):
        quiet.parse(1, "nothing here")
    assert caplog.records == []

    with caplog.at_level(logging.DEBUG, logger="mcp_event_trace_server"):
        loud.parse(1, "nothing here")
    assert any("did not match" in r.getMessage() for r in caplog.records)


def test_parse_line_unpadded_timestamp_is_fatal() -> None:
    pattern = re.compile(r"^(\S+) (\S+) \[(\w+)\] (.+)$")
    with pytest.raises(TimestampFormatError):
        parse_line("2024-1-5 9:3:7 [INFO] x", pattern)
