"""Settings for avfeed's JSON-line logging."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LogConfig(BaseModel):
    """Where avfeed writes log lines and which request fields get their own key.

    ``promoted_fields`` are lifted out of the free-form ``context`` object so
    that lines can be filtered by symbol or endpoint directly.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console_output: bool = True
    console_stream: Any = None
    file_path: str | None = None
    promoted_fields: tuple[str, ...] = ("provider", "symbol", "endpoint")
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LEVELS:
            raise ValueError(f"unknown log level {value!r}, expected one of {', '.join(LEVELS)}")
        return level


__all__ = ["LEVELS", "LogConfig"]
