"""Logging utilities for monitoring and debugging."""

from avfeed.core.logging.config import LEVELS, LogConfig
from avfeed.core.logging.logger import (
    bind,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LEVELS",
    "LogConfig",
    "bind",
    "current_trace_id",
    "get_logger",
    "configure_logging",
    "log_context",
    "logger",
]
