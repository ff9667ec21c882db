"""Configuration models for the drift monitor."""

from typing import List

from pydantic import BaseModel, Field, ConfigDict, field_validator

from shiftwatch.common import LoggingConfig

from .discovery import DEFAULT_IMAGE_EXTENSIONS, DEFAULT_MEDIA_NAME_FILTER
from .fetcher import DEFAULT_USER_AGENT
from .report import DEFAULT_MAX_REPORT_CHARS, TRUNCATION_MARKER

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/dream-three/baseline/refs/heads/main/"


class WatchConfig(BaseModel):
    """Monitoring cycle configuration."""

    model_config = ConfigDict(extra='forbid')

    watch_directory: str = Field(
        default="",
        description="Directory holding local reference copies (default: current directory)"
    )
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="URL prefix of the remote counterparts"
    )
    interval_minutes: int = Field(
        default=60,
        gt=0,
        description="Minutes between monitoring cycles"
    )
    fetch_pause_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Pause between successive remote fetches within a cycle"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with remote fetches"
    )
    shift_log: str = Field(
        default="shifts.log",
        description="Append-only diff log, relative to the watch directory unless absolute"
    )
    max_report_chars: int = Field(
        default=DEFAULT_MAX_REPORT_CHARS,
        gt=len(TRUNCATION_MARKER),
        description="Maximum characters of one logged diff report"
    )
    image_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS),
        description="Extensions of monitored images"
    )
    media_name_filter: str = Field(
        default=DEFAULT_MEDIA_NAME_FILTER,
        description="Substring a monitored image filename must contain (case-insensitive)"
    )
    use_ocr: bool = Field(
        default=True,
        description="Compare OCR text of monitored images (requires tesseract)"
    )

    @field_validator('image_extensions', mode='before')
    @classmethod
    def normalize_extensions(cls, v):
        """Accept a comma-separated string and normalize to lowercase dotted extensions."""
        if isinstance(v, str):
            v = [part.strip() for part in v.split(",") if part.strip()]
        if isinstance(v, list):
            return [e.lower() if str(e).startswith('.') else f".{str(e).lower()}" for e in v]
        return v


class MonitorConfig(BaseModel):
    """Root configuration for the drift monitor."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    monitor: WatchConfig = Field(default_factory=WatchConfig)
