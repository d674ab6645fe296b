"""Tests for the avfeed exception hierarchy."""

import pytest

from avfeed.core.exceptions import (
    AuthenticationError,
    AvfeedError,
    ConfigurationError,
    DataValidationError,
    ErrorCode,
    MalformedTimestampError,
    NetworkError,
    ProtocolError,
    ProviderError,
    UpstreamError,
)


class TestAvfeedError:
    """Test base exception behaviour."""

    def test_defaults(self):
        error = AvfeedError("boom")

        assert str(error) == "boom"
        assert error.message == "boom"
        assert error.error_code == ErrorCode.GENERAL_ERROR.value
        assert error.details == {}

    def test_to_payload(self):
        error = AvfeedError("boom", "CUSTOM", {"symbol": "IBM"})

        assert error.to_payload() == {"code": "CUSTOM", "message": "boom", "details": {"symbol": "IBM"}}


class TestProviderErrors:
    """Test provider-side failures."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (UpstreamError("Invalid API call."), ErrorCode.UPSTREAM_ERROR),
            (NetworkError("timed out"), ErrorCode.NETWORK_ERROR),
            (ProtocolError("HTTP 500"), ErrorCode.PROTOCOL_ERROR),
            (AuthenticationError("bad key"), ErrorCode.AUTHENTICATION_ERROR),
        ],
    )
    def test_codes_and_hierarchy(self, error, code):
        assert isinstance(error, ProviderError)
        assert isinstance(error, AvfeedError)
        assert error.error_code == code.value
        assert error.provider_name == "alpha_vantage"

    def test_upstream_error_keeps_message_verbatim(self):
        text = "Thank you for using Alpha Vantage! Our standard API call frequency is 5 calls per minute."
        error = UpstreamError(text, details={"field": "Note"})

        assert str(error) == text
        assert error.details == {"field": "Note"}

    def test_protocol_error_records_status_code(self):
        error = ProtocolError("HTTP request failed: 503", status_code=503)

        assert error.status_code == 503
        assert error.details["status_code"] == 503


class TestDataErrors:
    """Test data shape failures."""

    def test_malformed_timestamp(self):
        error = MalformedTimestampError("July29")

        assert error.key == "July29"
        assert error.details == {"key": "July29"}
        assert error.error_code == ErrorCode.MALFORMED_TIMESTAMP.value
        assert "July29" in str(error)

    def test_validation_errors_are_attached(self):
        error = DataValidationError("bad request", validation_errors={"symbol": "empty"})

        assert error.validation_errors == {"symbol": "empty"}
        assert error.details["validation_errors"] == {"symbol": "empty"}

    def test_configuration_error(self):
        error = ConfigurationError("api_key missing")

        assert error.error_code == ErrorCode.CONFIGURATION_ERROR.value
        assert not isinstance(error, ProviderError)
