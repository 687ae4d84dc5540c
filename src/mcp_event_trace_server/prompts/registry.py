"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_event(name: str, start_regex: str, end_regex: str) -> str:
    """Return one event as a JSON object literal for prompt display."""
    return json.dumps({"name": name, "start_regex": start_regex, "end_regex": end_regex})


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def measure_event_durations(
        log_path: str,
        event_name: str,
        start_regex: str,
        end_regex: str,
        pattern: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt that measures one event and summarizes its timings."""
        call_lines = [
            f"- log_path: {log_path}",
            f"- events: [{_format_event(event_name, start_regex, end_regex)}]",
        ]
        if pattern is not None:
            call_lines.append(f"- pattern: {pattern}")
        call_lines.append("- include_text: true")
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a performance analysis assistant. Report timings exactly as the "
                    "tool returns them. Do not invent durations; if the evidence is "
                    "insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Measure the event using analyze_event_durations. Follow this workflow:\n"
                    "- Always call analyze_event_durations first with the parameters below.\n"
                    "- events must be a list of objects (JSON array), not a string.\n"
                    "- If the event has no matches, say so and suggest checking the start/end "
                    "patterns or the line pattern (see ingest.no_match and ingest.malformed).\n"
                    "- Starts and ends are paired by position (1st start with 1st end, ...). "
                    "If starts_seen and ends_seen differ, point out the unpaired occurrences.\n"
                    "- A negative duration means an end was logged before its paired start; "
                    "flag it as a likely overlapping or interleaved event.\n\n"
                    "Call analyze_event_durations with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Summary (instances, average)\n"
                    "2) Outliers (slowest/fastest instances with their durations)\n"
                    "3) Caveats (unpaired or negative instances; 'None' if clean)\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Optional: if you need raw context, you can read the log via:",
                    },
                    {"type": "resource", "uri": f"log://{log_path}"},
                ],
            },
        ]

    @mcp.prompt()
    def explain_duration_report(log_path: str, config_path: str) -> list[dict[str, Any]]:
        """Build a prompt that runs a config file and explains the report."""
        return [
            {
                "role": "system",
                "content": (
                    "Explain event duration reports to engineers. Be concise and quote numbers "
                    "from the tool output only."
                ),
            },
            {
                "role": "user",
                "content": (
                    f"Call analyze_with_config with log_path={log_path} and "
                    f"config_path={config_path} (include_text=true).\n"
                    "For each event, give: instances, average, and anything unusual "
                    "(no matches, unpaired starts/ends, negative durations).\n"
                    "Finish with one line on which event dominates total time.\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "The configuration used:"},
                    {"type": "resource", "uri": f"log://{config_path}"},
                ],
            },
        ]
