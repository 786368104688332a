"""Core components for the Bitpin SDK.

The request pipeline and the pieces it is built from: query encoding,
token decoding, credential state, token lifecycle and error normalization.
"""

from __future__ import annotations

from .query import QueryParams, encode_query
from .token_codec import DecodedToken, decode_token
from .credentials import CredentialSnapshot, Credentials
from .errors import ErrorFactory, normalize_error
from .auth import AuthLifecycleManager, AuthState
from .pipeline import RequestPipeline

__all__ = [
    "QueryParams",
    "encode_query",
    "DecodedToken",
    "decode_token",
    "CredentialSnapshot",
    "Credentials",
    "ErrorFactory",
    "normalize_error",
    "AuthLifecycleManager",
    "AuthState",
    "RequestPipeline",
]
