from __future__ import annotations

from datetime import timedelta

import pytest

from mcp_event_trace_server.core.analysis import (
    MAX_RECENT_SKIPS,
    Analyzer,
    analyze,
    compile_events,
    dedupe_events,
)
from mcp_event_trace_server.core.errors import ConfigError, TimestampFormatError
from mcp_event_trace_server.core.line_parser import LineParser
from mcp_event_trace_server.core.models import EventResult, EventSpec, NoMatches

BACKUP = EventSpec(name="backup", start_pattern="triggered", end_pattern="completed")


def _run(line_pattern: str, lines: list[str], *events: EventSpec) -> list:
    analyzer = Analyzer(LineParser.from_pattern(line_pattern))
    analyzer.ingest(lines)
    return analyzer.run(events or [BACKUP])


def test_single_instance_duration(line_pattern: str) -> None:
    [out] = _run(
        line_pattern,
        [
            "2024-01-01 10:00:00 [INFO] Backup job triggered",
            "2024-01-01 10:00:05 [INFO] Backup job completed",
        ],
    )
    assert isinstance(out, EventResult)
    assert out.name == "backup"
    assert out.instances == (timedelta(seconds=5),)
    assert out.average == timedelta(seconds=5)


def test_start_without_end_is_no_matches(line_pattern: str) -> None:
    [out] = _run(line_pattern, ["2024-01-01 10:00:00 [INFO] Backup job triggered"])
    assert isinstance(out, NoMatches)
    assert out.starts_seen == 1
    assert out.ends_seen == 0


def test_two_starts_one_end_pairs_with_first_start(line_pattern: str) -> None:
    [out] = _run(
        line_pattern,
        [
            "2024-01-01 10:00:00 [INFO] Backup job triggered",
            "2024-01-01 10:00:03 [INFO] Backup job triggered",
            "2024-01-01 10:00:10 [INFO] Backup job completed",
        ],
    )
    assert isinstance(out, EventResult)
    assert out.instances == (timedelta(seconds=10),)
    assert out.starts_seen == 2
    assert out.ends_seen == 1


def test_unmatched_line_is_skipped(line_pattern: str) -> None:
    analyzer = Analyzer(LineParser.from_pattern(line_pattern))
    stats = analyzer.ingest(
        [
            "2024-01-01 10:00:00 [INFO] Backup job triggered",
            "Backup job completed (no timestamp, must not count)",
            "2024-01-01 10:00:07 [INFO] Backup job completed",
        ]
    )
    [out] = analyzer.run([BACKUP])
    assert isinstance(out, EventResult)
    assert out.ends_seen == 1
    assert out.instances == (timedelta(seconds=7),)
    assert stats.no_match == 1
    assert stats.records == 2


def test_three_group_match_is_not_stored() -> None:
    analyzer = Analyzer(LineParser.from_pattern(r"^(\S+) (\S+) (.+triggered)$"))
    stats = analyzer.ingest(["2024-01-01 10:00:00 Backup job triggered"])
    assert stats.malformed == 1
    assert stats.records == 0
    assert len(analyzer.store) == 0


def test_records_are_sorted_before_matching(line_pattern: str) -> None:
    [out] = _run(
        line_pattern,
        [
            "2024-01-01 10:00:09 [INFO] Backup job completed",
            "2024-01-01 10:00:00 [INFO] Backup job triggered",
        ],
    )
    assert isinstance(out, EventResult)
    assert out.instances == (timedelta(seconds=9),)


def test_interleaved_instances_pair_by_position(line_pattern: str) -> None:
    # Known limitation: overlapping instances are paired by index, not by nesting.
    # A(start) B(start) B(end) A(end) -> (A.start, B.end), (B.start, A.end)
    [out] = _run(
        line_pattern,
        [
            "2024-01-01 10:00:00 [INFO] A triggered",
            "2024-01-01 10:00:01 [INFO] B triggered",
            "2024-01-01 10:00:02 [INFO] B completed",
            "2024-01-01 10:00:10 [INFO] A completed",
        ],
    )
    assert isinstance(out, EventResult)
    assert out.instances == (timedelta(seconds=2), timedelta(seconds=9))


def test_events_are_independent_and_ordered(line_pattern: str) -> None:
    lines = [
        "2024-01-01 10:00:00 [INFO] Backup job triggered",
        "2024-01-01 10:00:01 [INFO] Cache warmup started",
        "2024-01-01 10:00:05 [INFO] Backup job completed",
    ]
    cache = EventSpec(name="cache", start_pattern="warmup started", end_pattern="warmup finished")
    outcomes = _run(line_pattern, lines, cache, BACKUP)
    assert [o.name for o in outcomes] == ["cache", "backup"]
    assert isinstance(outcomes[0], NoMatches)
    assert isinstance(outcomes[1], EventResult)


def test_duplicate_event_names_last_definition_wins() -> None:
    events = [
        EventSpec("backup", "a", "b"),
        EventSpec("other", "c", "d"),
        EventSpec("backup", "x", "y"),
    ]
    out = dedupe_events(events)
    assert [e.name for e in out] == ["backup", "other"]
    assert out[0].start_pattern == "x"


def test_invalid_event_pattern_raises_before_analysis() -> None:
    with pytest.raises(ConfigError, match="start pattern"):
        analyze([], [BACKUP, EventSpec("bad", "(", "ok")])


def test_bad_timestamp_aborts_ingestion() -> None:
    analyzer = Analyzer(LineParser.from_pattern(r"^(\S+) (\S+) \[(\w+)\] (.+)$"))
    with pytest.raises(TimestampFormatError):
        analyzer.ingest(
            [
                "2024-01-01 10:00:00 [INFO] fine",
                "2024-01-01 99:00:00 [INFO] broken clock",
                "2024-01-01 10:00:02 [INFO] never read",
            ]
        )
    assert analyzer.stats.lines_read == 2


def test_ingest_strips_line_endings(line_pattern: str) -> None:
    analyzer = Analyzer(LineParser.from_pattern(line_pattern))
    analyzer.ingest(["2024-01-01 10:00:00 [INFO] Backup job triggered\r\n"])
    [record] = analyzer.store.all_ordered()
    assert record.message == "Backup job triggered"
    assert record.line_no == 1


def test_ingest_keeps_recent_skips(line_pattern: str) -> None:
    analyzer = Analyzer(LineParser.from_pattern(line_pattern))
    stats = analyzer.ingest(
        [
            "2024-01-01 10:00:00 [INFO] Backup job triggered",
            "no timestamp here",
            "2024-01-01 10:00:07 [INFO] Backup job completed",
        ]
    )
    assert stats.skipped == 1
    [skip] = stats.recent_skips
    assert skip.line_no == 2
    assert skip.reason == "no_match"


def test_recent_skips_are_bounded(line_pattern: str) -> None:
    analyzer = Analyzer(LineParser.from_pattern(line_pattern))
    stats = analyzer.ingest(f"junk {i}" for i in range(MAX_RECENT_SKIPS + 5))
    assert stats.no_match == MAX_RECENT_SKIPS + 5
    assert len(stats.recent_skips) == MAX_RECENT_SKIPS
    assert stats.recent_skips[-1].line_no == MAX_RECENT_SKIPS + 5


def test_compile_events_dedupes_and_compiles() -> None:
    compiled = compile_events([BACKUP, EventSpec("backup", "x", "y")])
    assert [c.name for c in compiled] == ["backup"]
    assert compiled[0].start.pattern == "x"
    assert compiled[0].end.search("xyz")
