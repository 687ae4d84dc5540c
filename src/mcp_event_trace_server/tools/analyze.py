"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from mcp_event_trace_server.config import load_config
from mcp_event_trace_server.core.log_service import analyze_file
from mcp_event_trace_server.core.models import EventSpec
from mcp_event_trace_server.render import render_report, report_to_dict

DEFAULT_PATTERN = r"^(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2}) \[(\w+)\] (.+)$"
MAX_EVENTS = 100


def _parse_events(events: Sequence[Mapping[str, Any]] | None) -> list[EventSpec]:
    """Translate tool-call event objects into EventSpecs."""
    if not events:
        raise ValueError("At least one event is required (name, start_regex, end_regex).")
    if len(events) > MAX_EVENTS:
        raise ValueError(f"Too many events ({len(events)}); at most {MAX_EVENTS} are allowed.")

    out: list[EventSpec] = []
    for i, ev in enumerate(events, start=1):
        name = str(ev.get("name") or "").strip()
        start = ev.get("start_regex")
        end = ev.get("end_regex")
        if not name:
            raise ValueError(f"Event #{i} is missing 'name'.")
        if not start or not end:
            raise ValueError(f"Event {name!r} needs both 'start_regex' and 'end_regex'.")
        out.append(EventSpec(name=name, start_pattern=str(start), end_pattern=str(end)))
    return out


async def analyze_events_impl(
    *,
    log_path: str,
    events: Sequence[Mapping[str, Any]] | None,
    pattern: str | None = None,
    debug: bool = False,
    include_text: bool = False,
) -> dict[str, Any]:
    """Implementation for the `analyze_event_durations` MCP tool.

    Notes
    -----
    - pattern defaults to DEFAULT_PATTERN ("YYYY-MM-DD HH:MM:SS [LEVEL] message")
    - events are analyzed in the order given; a repeated name keeps its last definition
    - include_text adds the plain (uncolored) text report
    """
    specs = _parse_events(events)
    report = await analyze_file(
        log_path,
        pattern=DEFAULT_PATTERN if pattern is None else pattern,
        events=specs,
        debug=debug,
    )
    out = report_to_dict(report)
    if include_text:
        out["text"] = render_report(report, color=False)
    return out


async def analyze_with_config_impl(
    *,
    log_path: str,
    config_path: str,
    include_text: bool = False,
) -> dict[str, Any]:
    """Implementation for the `analyze_with_config` MCP tool."""
    cfg = load_config(config_path)
    report = await analyze_file(
        log_path,
        pattern=cfg.pattern,
        events=cfg.event_specs(),
        debug=cfg.debug,
    )
    out = report_to_dict(report)
    if include_text:
        out["text"] = render_report(report, color=False)
    return out
