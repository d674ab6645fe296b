"""Standardized error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """avfeed错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    MALFORMED_TIMESTAMP = "MALFORMED_TIMESTAMP"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


__all__ = ["ErrorCode"]
