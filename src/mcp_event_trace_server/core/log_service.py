"""Log file loading and analysis.

This module is the main integration point: it reads one log file, feeds its lines through the
line parser into the ordered store, then measures each configured event.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .analysis import Analyzer, analyze_compiled, compile_events
from .line_parser import LineParser
from .models import AnalysisReport, EventSpec, IngestStats
from .store import RecordStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def _require_file(log_path: str | Path) -> Path:
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    return path


async def iter_lines(
    log_path: str | Path,
    *,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[tuple[int, str]]:
    """Yield (line_no, line) pairs with line endings stripped. Line numbers start at 1."""
    path = _require_file(log_path)
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        line_no = 0
        async for line in f:
            line_no += 1
            yield line_no, line.rstrip("\r\n")


async def load_records(
    log_path: str | Path,
    line_parser: LineParser,
    *,
    store: RecordStore | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> tuple[RecordStore, IngestStats]:
    """Parse every line of a log file into a record store."""
    analyzer = Analyzer(line_parser, store=store)
    logger.info("Opened %s for reading", log_path)
    async for line_no, line in iter_lines(log_path, encoding=encoding, decode_errors=decode_errors):
        analyzer.feed(line_no, line)
    stats = analyzer.stats
    logger.info(
        "Finished reading %d lines: %d records, %d skipped (%d unmatched, %d malformed)",
        stats.lines_read,
        stats.records,
        stats.skipped,
        stats.no_match,
        stats.malformed,
    )
    return analyzer.store, stats


async def analyze_file(
    log_path: str | Path,
    *,
    pattern: str,
    events: Iterable[EventSpec],
    debug: bool = False,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AnalysisReport:
    """Load a log file and measure every event.

    Patterns are validated before the file is read, so configuration errors abort early.
    """
    line_parser = LineParser.from_pattern(pattern, debug=debug)
    compiled = compile_events(events)
    path = _require_file(log_path)

    store, stats = await load_records(
        path, line_parser, encoding=encoding, decode_errors=decode_errors
    )
    outcomes = analyze_compiled(store.all_ordered(), compiled, debug=debug)
    return AnalysisReport(outcomes=outcomes, stats=stats)
