"""Run configuration.

Configuration files are TOML, in the layout::

    log_level = "debug"

    [log_format]
    pattern = '^(\\d{4}-\\d{2}-\\d{2}) (\\d{2}:\\d{2}:\\d{2}) \\[(\\w+)\\] (.+)$'

    [events.backup]
    start_regex = "triggered"
    end_regex = "completed"

Events are analyzed in the order their tables appear in the file.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .core.errors import ConfigError
from .core.line_parser import LineParser
from .core.models import EventSpec, compile_pattern

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "EVENT_TRACE_LOG_LEVEL"
BASE_DIR_ENV = "EVENT_TRACE_BASE_DIR"
DEFAULT_CONFIG_PATH = "config.toml"
DEFAULT_LOG_PATH = "sample.log"


class LogFormat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pattern: str = Field(default="", description="Line pattern with date, time, level, message groups.")


class EventConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(min_length=1, description="Unique event name.")
    start_regex: str = Field(
        validation_alias=AliasChoices("start_regex", "start_pattern", "start"),
        description="Pattern marking the start of an instance.",
    )
    end_regex: str = Field(
        validation_alias=AliasChoices("end_regex", "end_pattern", "end"),
        description="Pattern marking the end of an instance.",
    )

    @field_validator("start_regex", "end_regex")
    @classmethod
    def _check_regex(cls, v: str) -> str:
        compile_pattern(v, what="event pattern")
        return v

    def to_spec(self) -> EventSpec:
        return EventSpec(name=self.name, start_pattern=self.start_regex, end_pattern=self.end_regex)


class TraceConfig(BaseModel):
    """Line format, diagnostics level and the ordered list of events to measure."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    log_format: LogFormat = Field(
        default_factory=LogFormat,
        validation_alias=AliasChoices("log_format", "LogFormat", "logformat"),
    )
    log_level: str = Field(default="info", validation_alias=AliasChoices("log_level", "LogLevel"))
    events: list[EventConfig] = Field(
        default_factory=list, validation_alias=AliasChoices("events", "Events")
    )

    @field_validator("events", mode="before")
    @classmethod
    def _events_from_tables(cls, v: Any) -> Any:
        # [events.<name>] tables arrive as a mapping; keep their document order
        if isinstance(v, dict):
            return [
                {"name": name, **body} if isinstance(body, dict) else body
                for name, body in v.items()
            ]
        return v

    @model_validator(mode="after")
    def _check_line_pattern(self) -> TraceConfig:
        # empty or invalid line patterns are rejected here, before any log is read
        LineParser.from_pattern(self.pattern)
        return self

    @property
    def pattern(self) -> str:
        return self.log_format.pattern

    @property
    def debug(self) -> bool:
        return self.log_level.strip().lower() == "debug"

    def event_specs(self) -> tuple[EventSpec, ...]:
        return tuple(e.to_spec() for e in self.events)

    def line_parser(self) -> LineParser:
        """Build the line parser; raises ConfigError when the pattern is empty or invalid."""
        return LineParser.from_pattern(self.pattern, debug=self.debug)


def parse_config(data: dict[str, Any]) -> TraceConfig:
    """Validate an already-decoded configuration mapping."""
    try:
        return TraceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> TraceConfig:
    """Read and validate a TOML configuration file."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Config file not found: {p}")
    logger.info("Loading config from %s", p)
    try:
        with p.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Cannot decode {p}: {e}") from e
    cfg = parse_config(data)
    logger.debug("Loaded config: %s", cfg)
    return cfg


def resolve_log_level(default: str = "INFO") -> int:
    """Process logging level from EVENT_TRACE_LOG_LEVEL (falls back to ``default``)."""
    level_name = os.getenv(LOG_LEVEL_ENV, default).upper()
    return getattr(logging, level_name, logging.INFO)
