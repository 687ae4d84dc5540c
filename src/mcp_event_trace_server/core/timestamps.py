"""Timestamp parsing for the fixed log layout."""

from __future__ import annotations

import re
from datetime import datetime

from .errors import TimestampFormatError

TIMESTAMP_LAYOUT = "%Y-%m-%d %H:%M:%S"

# strptime accepts one-digit fields; the layout does not
_LAYOUT_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)


def parse_timestamp(date_str: str, time_str: str) -> datetime:
    """Parse a (date, time) pair as ``YYYY-MM-DD HH:MM:SS``.

    The result is naive. Unpadded fields and invalid calendar values (e.g. month 13) are
    rejected the same way as layout mismatches.
    """
    raw = f"{date_str} {time_str}"
    if not _LAYOUT_RE.fullmatch(raw):
        raise TimestampFormatError(date_str, time_str, TIMESTAMP_LAYOUT)
    try:
        return datetime.strptime(raw, TIMESTAMP_LAYOUT)
    except ValueError as e:
        raise TimestampFormatError(date_str, time_str, TIMESTAMP_LAYOUT) from e


def format_timestamp(ts: datetime) -> str:
    return ts.strftime(TIMESTAMP_LAYOUT)
