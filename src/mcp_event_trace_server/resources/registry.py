"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio
import gzip
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_event_trace_server.config import BASE_DIR_ENV, TraceConfig

ALLOWED_FILE_SUFFIXES = {".log", ".txt", ".toml"}
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"

SAMPLE_LOG = (
    "2024-01-01 10:00:00 [INFO] Backup job triggered\n"
    "2024-01-01 10:00:02 [DEBUG] Copying volume /data\n"
    "2024-01-01 10:00:05 [INFO] Backup job completed\n"
    "2024-01-01 10:05:00 [INFO] Backup job triggered\n"
    "2024-01-01 10:06:30 [INFO] Backup job completed\n"
    "2024-01-01 10:07:00 [INFO] Cache warmup started\n"
)

SAMPLE_CONFIG = (
    'log_level = "info"\n'
    "\n"
    "[log_format]\n"
    "pattern = '^(\\d{4}-\\d{2}-\\d{2}) (\\d{2}:\\d{2}:\\d{2}) \\[(\\w+)\\] (.+)$'\n"
    "\n"
    "[events.backup]\n"
    'start_regex = "Backup job triggered"\n'
    'end_regex = "Backup job completed"\n'
    "\n"
    "[events.cache_warmup]\n"
    'start_regex = "Cache warmup started"\n'
    'end_regex = "Cache warmup finished"\n'
)


def _base_dir() -> Path:
    """Return the resolved base directory for file resources."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _safe_resolve(path: str) -> Path:
    """Resolve a path under the configured base directory."""
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError("Path escapes base dir")
    return p


def _allowed_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".gz":
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def _resolve_resource_path(path: str) -> Path:
    """Resolve and validate a resource file path."""
    resolved = _safe_resolve(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"File not found: {resolved}")
    if _allowed_suffix(resolved) not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"File type not allowed. Allowed: {allowed}.")
    return resolved


def _open_text(path: Path) -> str:
    """Read text from a file, supporting optional gzip compression."""
    if path.suffix.lower() == ".gz":
        with gzip.open(path, mode="rt", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            return f.read()
    return path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://event-trace/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        return (
            "Resources:\n"
            "- app://event-trace/help\n"
            "- app://event-trace/examples/sample-log\n"
            "- app://event-trace/examples/config\n"
            "- app://event-trace/schemas/config\n"
            f"- log://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, .gz)\n"
            f"\nBase directory: {_base_dir()}\n"
        )

    @mcp.resource("app://event-trace/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny sample log for demos and tests."""
        return SAMPLE_LOG

    @mcp.resource("app://event-trace/examples/config")
    def sample_config() -> str:
        """Return a TOML config matching the sample log."""
        return SAMPLE_CONFIG

    @mcp.resource("app://event-trace/schemas/config")
    def config_schema() -> dict[str, Any]:
        """Return the JSON schema of the configuration file."""
        return TraceConfig.model_json_schema()

    @mcp.resource("log://{path}")
    async def read_log(path: str) -> str:
        """Return the full log contents."""
        p = _resolve_resource_path(path)
        return await asyncio.to_thread(_open_text, p)
