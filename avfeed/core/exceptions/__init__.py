"""Exception handling module."""

from avfeed.core.exceptions.base import (
    AuthenticationError,
    AvfeedError,
    ConfigurationError,
    DataValidationError,
    MalformedTimestampError,
    NetworkError,
    ProtocolError,
    ProviderError,
    UpstreamError,
)
from avfeed.core.exceptions.codes import ErrorCode

__all__ = [
    "AvfeedError",
    "ProviderError",
    "UpstreamError",
    "NetworkError",
    "ProtocolError",
    "AuthenticationError",
    "MalformedTimestampError",
    "DataValidationError",
    "ConfigurationError",
    "ErrorCode",
]
