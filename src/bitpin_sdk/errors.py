"""Error classes for the Bitpin SDK.

Structured error hierarchy with error codes. Every failure raised by the
client is a ``BitpinError``; the subclasses map one-to-one onto the stage
of the request pipeline that produced them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Bitpin SDK."""

    # Request preparation errors (1xxx)
    REQUEST_PREPARATION = "REQ_1001"
    QUERY_ENCODING = "REQ_1002"

    # Transport errors (2xxx)
    TRANSPORT_ERROR = "NET_2001"
    TIMEOUT_ERROR = "NET_2002"
    RESPONSE_READ = "NET_2003"

    # Authentication errors (3xxx)
    AUTHENTICATION_FAILED = "AUTH_3001"
    MISSING_ACCESS_TOKEN = "AUTH_3002"
    MISSING_REFRESH_TOKEN = "AUTH_3003"
    MISSING_CREDENTIALS = "AUTH_3004"
    TOKEN_DECODE_FAILED = "AUTH_3005"
    AUTHENTICATION_ERROR = "AUTH_3006"

    # API errors (4xxx)
    API_ERROR = "API_4001"

    # Decode errors (5xxx)
    RESPONSE_DECODE = "DEC_5001"


class BitpinError(Exception):
    """Base error for the Bitpin SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.details = details or {}
        if cause is not None:
            self.details.setdefault("cause", str(cause))
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class RequestPreparationError(BitpinError):
    """Request could not be built; raised before any network I/O."""

    def __init__(
        self,
        message: str = "Failed to prepare request",
        *,
        operation: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.REQUEST_PREPARATION,
            details={"operation": operation} if operation else None,
            cause=cause,
        )
        self.operation = operation


class QueryEncodingError(BitpinError):
    """Query parameters are not a model instance."""

    def __init__(self, message: str = "Query parameters must be a model instance") -> None:
        super().__init__(message, ErrorCode.QUERY_ENCODING)


class TransportError(BitpinError):
    """Network request failed (connection refused, DNS, protocol)."""

    def __init__(
        self,
        message: str = "Failed to send request",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.TRANSPORT_ERROR, cause=cause)


class RequestTimeoutError(TransportError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        timeout_seconds: float | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.code = ErrorCode.TIMEOUT_ERROR.value
        self.status_code = 408
        if timeout_seconds:
            self.details["timeout_seconds"] = timeout_seconds


class ResponseReadError(BitpinError):
    """Response body could not be read."""

    def __init__(
        self,
        message: str = "Failed to read response body",
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.RESPONSE_READ,
            status_code=status_code,
            cause=cause,
        )


class ResponseDecodeError(BitpinError):
    """A successful response did not match the expected shape."""

    def __init__(
        self,
        message: str = "Failed to decode response",
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.RESPONSE_DECODE,
            status_code=status_code,
            cause=cause,
        )


class AuthenticationError(BitpinError):
    """Base class for credential and token lifecycle errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.AUTHENTICATION_ERROR,
        *,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code, details=details, cause=cause)


class MissingAccessTokenError(AuthenticationError):
    """No access token is held."""

    def __init__(self, message: str = "access token is empty") -> None:
        super().__init__(message, ErrorCode.MISSING_ACCESS_TOKEN)


class MissingRefreshTokenError(AuthenticationError):
    """No refresh token is held."""

    def __init__(self, message: str = "refresh token is empty") -> None:
        super().__init__(message, ErrorCode.MISSING_REFRESH_TOKEN)


class MissingCredentialsError(AuthenticationError):
    """API key and/or secret key are missing."""

    def __init__(self, message: str = "API key and/or secret key are empty") -> None:
        super().__init__(message, ErrorCode.MISSING_CREDENTIALS)


class TokenDecodeError(AuthenticationError):
    """Bearer token is not a decodable JWT."""

    def __init__(
        self,
        message: str = "Failed to decode token",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.TOKEN_DECODE_FAILED, cause=cause)


class AuthenticationFailedError(AuthenticationError):
    """Refreshing or re-establishing authentication failed."""

    def __init__(
        self,
        message: str = "failed to refresh authentication",
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED, cause=cause)


class APIError(BitpinError):
    """Non-2xx response returned by the Bitpin API.

    ``details`` maps a field name to the ordered list of messages the
    server reported for it.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.API_ERROR,
            status_code=status_code,
            details=details,
        )
        self.status_code: int = status_code

    @property
    def is_unauthorized(self) -> bool:
        """Whether the server rejected the bearer token."""
        return self.status_code == 401

    @property
    def is_rate_limited(self) -> bool:
        """Whether the server rate limited the request."""
        return self.status_code == 429

    @property
    def is_server_error(self) -> bool:
        """Whether the server failed to process the request."""
        return self.status_code >= 500

    def __str__(self) -> str:
        return f"API error: {self.status_code} {self.message}"
