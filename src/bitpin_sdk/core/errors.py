"""Centralized error factory for the Bitpin SDK.

Turns HTTP error responses and transport exceptions into SDK errors.
Error bodies come in several shapes; each known shape is tried in a
fixed order and the first one that parses wins.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from ..errors import (
    APIError,
    BitpinError,
    RequestTimeoutError,
    TransportError,
)
from ..models import ErrorResponse

_FIELD_LIST_SHAPE: TypeAdapter[dict[str, list[str]]] = TypeAdapter(dict[str, list[str]])
_FIELD_STRING_SHAPE: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


def _field_lists(body: bytes) -> dict[str, list[str]] | None:
    return _FIELD_LIST_SHAPE.validate_json(body, strict=True)


def _field_strings(body: bytes) -> dict[str, list[str]] | None:
    parsed = _FIELD_STRING_SHAPE.validate_json(body, strict=True)
    return {field: [message] for field, message in parsed.items()}


def _structured(body: bytes) -> dict[str, list[str]] | None:
    parsed = ErrorResponse.model_validate_json(body, strict=True)
    details: dict[str, list[str]] = {}
    if parsed.detail:
        details["detail"] = [parsed.detail]
    if parsed.code:
        details["code"] = [parsed.code]
    for field, message in (parsed.messages or {}).items():
        details.setdefault(field, []).append(message)
    return details


_SHAPES = (_field_lists, _field_strings, _structured)


def _summarize(details: dict[str, list[str]]) -> str:
    return "; ".join(
        f"{field}: {messages[0] if messages else ''}"
        for field, messages in details.items()
    )


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def parse_details(raw_body: bytes | str) -> dict[str, list[str]]:
        """Extract field-keyed messages from an error body.

        Args:
            raw_body: Response body of unknown shape.

        Returns:
            Field name to ordered messages; ``{"raw": [body]}`` when no
            known shape matches.
        """
        body = raw_body.encode() if isinstance(raw_body, str) else raw_body
        for shape in _SHAPES:
            try:
                details = shape(body)
            except ValidationError:
                continue
            if details:
                return details
        return {"raw": [body.decode("utf-8", errors="replace")]}

    @staticmethod
    def from_response(status_code: int, raw_body: bytes | str) -> APIError:
        """Create the normalized API error for a non-2xx response.

        Never raises; an unreadable body is preserved verbatim.
        """
        details = ErrorFactory.parse_details(raw_body)
        return APIError(status_code, _summarize(details), details)

    @staticmethod
    def from_http_response(response: httpx.Response) -> APIError:
        """Create the normalized API error from a read ``httpx.Response``."""
        return ErrorFactory.from_response(response.status_code, response.content)

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        timeout_seconds: float | None = None,
    ) -> BitpinError:
        """Create SDK error from a transport exception.

        Args:
            exc: Original exception.
            timeout_seconds: Configured request timeout, for the error details.

        Returns:
            Appropriate BitpinError subclass.
        """
        if isinstance(exc, BitpinError):
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return RequestTimeoutError(
                f"Request timed out: {exc}",
                timeout_seconds=timeout_seconds,
                cause=exc,
            )

        if isinstance(exc, httpx.ConnectError):
            return TransportError(f"Connection failed: {exc}", cause=exc)

        return TransportError(f"failed to send request: {exc}", cause=exc)


def normalize_error(status_code: int, raw_body: bytes | str) -> APIError:
    """Normalize a non-2xx response into a single ``APIError``."""
    return ErrorFactory.from_response(status_code, raw_body)


def error_details(error: APIError) -> dict[str, Any]:
    """Serializable view of an API error for structured logs."""
    return {"status_code": error.status_code, "fields": list(error.details)}
