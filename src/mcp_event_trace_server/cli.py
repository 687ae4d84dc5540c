from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from mcp_event_trace_server.config import DEFAULT_CONFIG_PATH, DEFAULT_LOG_PATH, load_config
from mcp_event_trace_server.core.errors import EventTraceError
from mcp_event_trace_server.core.log_service import analyze_file
from mcp_event_trace_server.render import render_report

LOGGER = logging.getLogger("mcp_event_trace_server")


def _configure_logging(level: str | None, *, debug: bool) -> None:
    if level is None:
        level = "DEBUG" if debug else "INFO"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="event-trace",
        description="Measure elapsed time between start and end markers in a log file.",
    )
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to config TOML file")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file to analyze")
    p.add_argument("--no-color", dest="color", action="store_false", help="Disable ANSI colors")
    p.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Diagnostics level on stderr (default: DEBUG when the config sets log_level=debug)",
    )
    p.set_defaults(color=True)
    return p


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config)
        _configure_logging(args.log_level, debug=cfg.debug)
        LOGGER.info("Starting event trace (config=%s, log=%s)", args.config, args.log)
        report = asyncio.run(
            analyze_file(
                args.log,
                pattern=cfg.pattern,
                events=cfg.event_specs(),
                debug=cfg.debug,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except EventTraceError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    sys.stdout.write(render_report(report, color=args.color))


if __name__ == "__main__":
    main()
