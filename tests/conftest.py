from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

LINE_PATTERN = r"^(\d{4}-\d{2}-\d{2}) (\d{2}:\d{2}:\d{2}) \[(\w+)\] (.+)$"


@pytest.fixture
def line_pattern() -> str:
    return LINE_PATTERN


@pytest.fixture
def write_backup_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    "2024-01-01 10:00:00 [INFO] Backup job triggered",
                    "garbage line without a timestamp",
                    "2024-01-01 10:00:05 [INFO] Backup job completed",
                    "2024-01-01 11:00:00 [INFO] Backup job triggered",
                    "2024-01-01 11:01:30 [INFO] Backup job completed",
                    "2024-01-01 11:02:00 [WARNING] Cache warmup started",
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def write_config() -> Callable[[Path, str], None]:
    def _write(path: Path, pattern: str = LINE_PATTERN) -> None:
        path.write_text(
            "\n".join(
                [
                    'log_level = "info"',
                    "",
                    "[log_format]",
                    f"pattern = '{pattern}'",
                    "",
                    "[events.backup]",
                    'start_regex = "triggered"',
                    'end_regex = "completed"',
                    "",
                    "[events.cache]",
                    'start_regex = "warmup started"',
                    'end_regex = "warmup finished"',
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write
