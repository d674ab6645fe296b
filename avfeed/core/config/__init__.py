"""Configuration management module."""

from avfeed.core.config.settings import (
    DEFAULT_URL,
    ConfigManager,
    ConnectorConfig,
    build_connector_config,
    load_config_from_env,
    resolve_api_key,
)

__all__ = [
    "DEFAULT_URL",
    "ConfigManager",
    "ConnectorConfig",
    "build_connector_config",
    "load_config_from_env",
    "resolve_api_key",
]
