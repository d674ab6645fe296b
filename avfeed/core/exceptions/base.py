"""avfeed核心异常类."""

from typing import Any

from avfeed.core.exceptions.codes import ErrorCode


class AvfeedError(Exception):
    """avfeed基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class ProviderError(AvfeedError):
    """数据提供商相关异常."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alpha_vantage",
        error_code: str = ErrorCode.PROVIDER_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class UpstreamError(ProviderError):
    """The remote service answered with an error text instead of data."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alpha_vantage",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, ErrorCode.UPSTREAM_ERROR.value, details)


class NetworkError(ProviderError):
    """网络异常."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alpha_vantage",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, ErrorCode.NETWORK_ERROR.value, details)


class ProtocolError(ProviderError):
    """HTTP-level failure reported by the transport."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alpha_vantage",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, ErrorCode.PROTOCOL_ERROR.value, super_details)
        self.status_code = status_code


class AuthenticationError(ProviderError):
    """认证异常."""

    def __init__(
        self,
        message: str,
        provider_name: str = "alpha_vantage",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, ErrorCode.AUTHENTICATION_ERROR.value, details)


class MalformedTimestampError(AvfeedError):
    """A time-series key matches none of the known timestamp shapes."""

    def __init__(self, key: str, details: dict[str, Any] | None = None):
        super_details = details or {}
        super_details["key"] = key
        super().__init__(f"Unrecognized time-series key: {key!r}", ErrorCode.MALFORMED_TIMESTAMP.value, super_details)
        self.key = key


class DataValidationError(AvfeedError):
    """数据验证异常."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR.value, super_details)
        self.validation_errors = validation_errors or {}


class ConfigurationError(AvfeedError):
    """配置异常."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, details)
