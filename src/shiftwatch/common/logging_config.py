"""Logging section of the configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator


class LoggingConfig(BaseModel):
    """Console and file logging options."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console log format; the log file is always JSON"
    )
    file: Optional[str] = Field(
        default=None,
        description="Optional rotating log file (~ is expanded)"
    )

    @field_validator('level', 'format', mode='before')
    @classmethod
    def normalize_case(cls, v, info):
        """Accept level and format names in any case."""
        if isinstance(v, str):
            return v.upper() if info.field_name == 'level' else v.lower()
        return v

    @field_validator('file', mode='before')
    @classmethod
    def empty_file_means_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def log_path(self) -> Optional[Path]:
        """Log file as a path, or None when file logging is off."""
        return Path(self.file).expanduser() if self.file else None
