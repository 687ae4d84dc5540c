"""Text and JSON presentation of analysis reports."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from typing import Any

from .core.models import AnalysisReport, EventOutcome, EventResult, IngestStats
from .core.timestamps import format_timestamp

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
PURPLE = "\033[35m"
CYAN = "\033[36m"


def format_duration(d: timedelta) -> str:
    """Format a duration compactly: ``5s``, ``1m30s``, ``2h0m5s``, ``1.5s``, ``250ms``."""
    us = (d.days * 86_400 + d.seconds) * 1_000_000 + d.microseconds
    if us == 0:
        return "0s"
    sign = "-" if us < 0 else ""
    us = abs(us)

    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_trim(us, 1_000)}ms"

    hours, rem = divmod(us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    secs = _trim(rem, 1_000_000)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def _trim(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{str(frac).zfill(width).rstrip('0')}"


def _paint(s: str, color: str, enabled: bool) -> str:
    return f"{color}{s}{RESET}" if enabled else s


def iter_outcome_lines(outcome: EventOutcome, *, color: bool = True) -> Iterator[str]:
    """Yield the printable lines for one event."""
    yield ""
    yield _paint(f"=== {outcome.name} ===", CYAN, color)

    if outcome.matches is not None:
        for r, is_start in outcome.matches.trace:
            tag, c = ("[START]", GREEN) if is_start else ("[ END ]", YELLOW)
            yield f"{_paint(tag, c, color)} {format_timestamp(r.timestamp)} {_paint(r.message, c, color)}"

    if not isinstance(outcome, EventResult):
        yield _paint("No matches.", RED, color)
        return

    for i, d in enumerate(outcome.instances, start=1):
        yield f"{_paint('[RESULT]', PURPLE, color)} Instance {i}: {_paint(format_duration(d), PURPLE, color)}"
    yield f"{_paint('Average Duration:', BLUE, color)} {_paint(format_duration(outcome.average), BLUE, color)}"


def render_report(report: AnalysisReport, *, color: bool = True) -> str:
    lines: list[str] = []
    for outcome in report.outcomes:
        lines.extend(iter_outcome_lines(outcome, color=color))
    return "\n".join(lines) + "\n"


def _seconds(d: timedelta) -> float:
    return d.total_seconds()


def outcome_to_dict(outcome: EventOutcome) -> dict[str, Any]:
    """Convert an outcome into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "name": outcome.name,
        "matched": isinstance(outcome, EventResult),
        "starts_seen": outcome.starts_seen,
        "ends_seen": outcome.ends_seen,
    }
    if isinstance(outcome, EventResult):
        d["instances"] = [
            {"index": i, "seconds": _seconds(x), "duration": format_duration(x)}
            for i, x in enumerate(outcome.instances, start=1)
        ]
        d["average_seconds"] = _seconds(outcome.average)
        d["average"] = format_duration(outcome.average)
    return d


def stats_to_dict(stats: IngestStats) -> dict[str, Any]:
    return {
        "lines_read": stats.lines_read,
        "records": stats.records,
        "skipped": stats.skipped,
        "no_match": stats.no_match,
        "malformed": stats.malformed,
        "recent_skips": [
            {"line_no": e.line_no, "reason": e.reason, "detail": str(e)} for e in stats.recent_skips
        ],
    }


def report_to_dict(report: AnalysisReport) -> dict[str, Any]:
    return {
        "count": len(report.outcomes),
        "events": [outcome_to_dict(o) for o in report.outcomes],
        "ingest": stats_to_dict(report.stats),
    }
