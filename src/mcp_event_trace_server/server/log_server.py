"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: callable actions (measure event durations in a log file)
- Resources: addressable data blobs (help, examples, config schema, log contents)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_event_trace_server.server.log_server
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_event_trace_server.config import resolve_log_level
from mcp_event_trace_server.prompts.registry import register_prompts
from mcp_event_trace_server.resources.registry import register_resources
from mcp_event_trace_server.tools.analyze import analyze_events_impl, analyze_with_config_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    logging.basicConfig(
        level=resolve_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("event-trace", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def analyze_event_durations(
    log_path: str,
    events: list[dict[str, str]],
    pattern: str | None = None,
    debug: bool = False,
    include_text: bool = False,
) -> dict[str, Any]:
    """Measure elapsed time between start and end markers in a log file.

    Parameters
    ----------
    log_path:
        Path to a local log file. Supports plain text and .gz.
    events:
        Ordered list of events, each {"name": ..., "start_regex": ..., "end_regex": ...}.
        Patterns are regular expressions searched in the message part of each line.
    pattern:
        Line-format regex with four positional groups: date (YYYY-MM-DD), time (HH:MM:SS),
        level, message. Defaults to lines like "2024-01-01 10:00:00 [INFO] message".
    debug:
        Emit per-line diagnostics to the server log.
    include_text:
        Also return the plain-text report.

    Returns
    -------
    dict:
        {"count": int, "events": list[dict], "ingest": dict}

    The i-th start is paired with the i-th end; extra starts or ends are left unpaired.
    """
    return await analyze_events_impl(
        log_path=log_path,
        events=events,
        pattern=pattern,
        debug=debug,
        include_text=include_text,
    )


@mcp.tool()
async def analyze_with_config(
    log_path: str,
    config_path: str,
    include_text: bool = False,
) -> dict[str, Any]:
    """Measure event durations using a TOML config file ([log_format] and [events.<name>])."""
    return await analyze_with_config_impl(
        log_path=log_path,
        config_path=config_path,
        include_text=include_text,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
