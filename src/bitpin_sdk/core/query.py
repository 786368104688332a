"""Query string encoding for GET request parameters.

Parameter models declare their fields in the order they should appear in
the query string. Empty values are left out so optional filters do not
pollute the request; booleans are the exception since ``false`` is a
meaningful filter value.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

from ..errors import QueryEncodingError


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, bytes, list, tuple, set, frozenset)):
        return len(value) == 0
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    return False


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _render(value.value)
    if isinstance(value, float):
        # plain decimal notation, never an exponent
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def query_pairs(params: Any) -> list[tuple[str, str]]:
    """Flatten a parameter model into ordered ``(key, value)`` pairs.

    Args:
        params: A pydantic model instance.

    Returns:
        Pairs in field declaration order, one pair per sequence element.

    Raises:
        QueryEncodingError: If ``params`` is not a model instance.
    """
    if not isinstance(params, BaseModel):
        msg = f"input must be a model instance, got {type(params).__name__}"
        raise QueryEncodingError(msg)

    pairs: list[tuple[str, str]] = []
    for name, field in type(params).model_fields.items():
        if field.exclude:
            continue
        key = field.serialization_alias or field.alias or name
        value = getattr(params, name)
        if _is_empty(value):
            continue
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            pairs.extend((key, _render(item)) for item in value)
        elif isinstance(value, (set, frozenset)):
            pairs.extend((key, _render(item)) for item in sorted(value, key=str))
        else:
            pairs.append((key, _render(value)))
    return pairs


def encode_query(params: Any) -> str:
    """Encode a parameter model as a percent-encoded query string."""
    return urlencode(query_pairs(params))


class QueryParams(BaseModel):
    """Base model for GET request filters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def to_query_params(self) -> list[tuple[str, str]]:
        """Convert to ordered URL query parameters."""
        return query_pairs(self)

    def to_query_string(self) -> str:
        """Convert to a percent-encoded query string."""
        return encode_query(self)
