"""Type definitions for the Bitpin SDK."""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")

READ_METHODS = frozenset({"GET", "DELETE", "HEAD"})


@dataclass(frozen=True)
class ApiRequest(Generic[T]):
    """One API call, built by an endpoint method and consumed by the pipeline."""

    method: str
    endpoint: str
    auth: bool = False
    body: Any = None
    result_type: Optional[type[T]] = None
    version: Optional[str] = None
