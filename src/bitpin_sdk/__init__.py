"""Bitpin exchange Python SDK."""

from .client import BitpinClient
from .config import BitpinConfig, TelemetryConfig
from .core import AuthState, DecodedToken, decode_token, encode_query, normalize_error
from .telemetry import configure_telemetry
from .errors import (
    APIError,
    AuthenticationError,
    AuthenticationFailedError,
    BitpinError,
    ErrorCode,
    MissingAccessTokenError,
    MissingCredentialsError,
    MissingRefreshTokenError,
    QueryEncodingError,
    RequestPreparationError,
    RequestTimeoutError,
    ResponseDecodeError,
    ResponseReadError,
    TokenDecodeError,
    TransportError,
)

__all__ = [
    "BitpinClient",
    "BitpinConfig",
    "TelemetryConfig",
    "configure_telemetry",
    "AuthState",
    "DecodedToken",
    "decode_token",
    "encode_query",
    "normalize_error",
    "APIError",
    "AuthenticationError",
    "AuthenticationFailedError",
    "BitpinError",
    "ErrorCode",
    "MissingAccessTokenError",
    "MissingCredentialsError",
    "MissingRefreshTokenError",
    "QueryEncodingError",
    "RequestPreparationError",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "ResponseReadError",
    "TokenDecodeError",
    "TransportError",
]

__version__ = "0.1.0"
