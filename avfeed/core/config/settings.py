"""配置管理模块 - 处理avfeed连接器的配置"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from avfeed.core.exceptions import ConfigurationError
from avfeed.core.logging import LogConfig

DEFAULT_URL = "https://www.alphavantage.co"


class ConnectorConfig(BaseModel):
    """Immutable connector settings passed into every pipeline call."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    timeout: float = 5.0
    url: str = DEFAULT_URL
    adjusted: bool = True
    use_parallel: bool = False
    max_items: int = 100
    output_format: Literal["records", "frame"] = "records"
    slice_padding: int = 1

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_key must not be empty")
        return value

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("max_items")
    @classmethod
    def _check_max_items(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_items must be at least 1")
        return value

    @field_validator("slice_padding")
    @classmethod
    def _check_slice_padding(cls, value: int) -> int:
        if value < 0:
            raise ValueError("slice_padding must be non-negative")
        return value

    def with_options(self, **changes: Any) -> ConnectorConfig:
        """Return a validated copy with ``changes`` applied."""
        return build_connector_config({**self.model_dump(), **changes})


def build_connector_config(values: dict[str, Any]) -> ConnectorConfig:
    """Build a :class:`ConnectorConfig`, reporting problems as ``ConfigurationError``."""
    if "api_key" not in values or values["api_key"] is None:
        raise ConfigurationError("api_key must be specified to connect to Alpha Vantage")
    values = {**values, "api_key": resolve_api_key(str(values["api_key"]))}
    try:
        return ConnectorConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid connector configuration",
            details={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc


def resolve_api_key(value: str) -> str:
    """Return the API key, reading it from ``value`` when that names a file.

    Only the first whitespace-delimited token of the file is used.
    """
    candidate = Path(value).expanduser()
    try:
        is_file = candidate.is_file()
    except OSError:
        is_file = False
    if not is_file:
        return value
    try:
        tokens = candidate.read_text(encoding="utf-8").split()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read Alpha Vantage API key from {candidate}: {exc}") from exc
    if not tokens:
        raise ConfigurationError(f"Alpha Vantage API key file {candidate} is empty")
    return tokens[0]


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, value: str, kind: type[int] | type[float]) -> int | float:
    try:
        return kind(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"Environment variable {name} must be {kind.__name__}, got {value!r}",
            details={"variable": name},
        ) from exc


def load_config_from_env() -> dict[str, Any]:
    """从环境变量加载配置"""
    config: dict[str, Any] = {}

    connector_config: dict[str, Any] = {}
    if os.getenv("AVFEED_API_KEY"):
        connector_config["api_key"] = os.getenv("AVFEED_API_KEY")
    avfeed_timeout = os.getenv("AVFEED_TIMEOUT")
    if avfeed_timeout is not None:
        connector_config["timeout"] = _env_number("AVFEED_TIMEOUT", avfeed_timeout, float)
    if os.getenv("AVFEED_URL"):
        connector_config["url"] = os.getenv("AVFEED_URL")
    avfeed_adjusted = os.getenv("AVFEED_ADJUSTED")
    if avfeed_adjusted is not None:
        connector_config["adjusted"] = _env_bool(avfeed_adjusted)
    avfeed_use_parallel = os.getenv("AVFEED_USE_PARALLEL")
    if avfeed_use_parallel is not None:
        connector_config["use_parallel"] = _env_bool(avfeed_use_parallel)
    avfeed_max_items = os.getenv("AVFEED_MAX_ITEMS")
    if avfeed_max_items is not None:
        connector_config["max_items"] = _env_number("AVFEED_MAX_ITEMS", avfeed_max_items, int)
    if os.getenv("AVFEED_OUTPUT_FORMAT"):
        connector_config["output_format"] = os.getenv("AVFEED_OUTPUT_FORMAT")
    avfeed_slice_padding = os.getenv("AVFEED_SLICE_PADDING")
    if avfeed_slice_padding is not None:
        connector_config["slice_padding"] = _env_number("AVFEED_SLICE_PADDING", avfeed_slice_padding, int)

    if connector_config:
        config["connector"] = connector_config

    # 日志配置
    avfeed_logging_level = os.getenv("AVFEED_LOGGING_LEVEL")
    if avfeed_logging_level is not None:
        config["logging"] = {"level": avfeed_logging_level}

    return config


class ConfigManager:
    """配置管理器"""

    def __init__(self, config_path: Path | None = None):
        """初始化配置管理器

        Args:
            config_path: 配置文件路径，如果为None则使用默认路径
        """
        self.config_path = config_path or Path.home() / ".avfeed" / "config.toml"
        self._values = self._load_file()
        for section, values in load_config_from_env().items():
            self._values.setdefault(section, {}).update(values)

    def _load_file(self) -> dict[str, dict[str, Any]]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationError(f"Failed to load config from {self.config_path}: {exc}") from exc
        return {
            "connector": dict(raw.get("connector", {})),
            "logging": dict(raw.get("logging", {})),
        }

    def connector_config(self, **overrides: Any) -> ConnectorConfig:
        """Build the connector configuration, ``overrides`` taking precedence."""
        values = {**self._values.get("connector", {}), **overrides}
        return build_connector_config(values)

    def logging_config(self) -> LogConfig:
        """Build the logging configuration."""
        try:
            return LogConfig(**self._values.get("logging", {}))
        except ValidationError as exc:
            raise ConfigurationError(
                "Invalid logging configuration",
                details={"errors": [error["msg"] for error in exc.errors()]},
            ) from exc


__all__ = [
    "DEFAULT_URL",
    "ConfigManager",
    "ConnectorConfig",
    "build_connector_config",
    "load_config_from_env",
    "resolve_api_key",
]
