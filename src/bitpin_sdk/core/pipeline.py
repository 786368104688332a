"""Request pipeline for the Bitpin SDK.

Every API call passes through ``RequestPipeline.execute``: the body is
encoded, credentials are refreshed and attached when the endpoint needs
them, the request is sent, and the response is either decoded into the
requested type or turned into an ``APIError``. Nothing is retried here.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import (
    AuthenticationFailedError,
    BitpinError,
    QueryEncodingError,
    RequestPreparationError,
    ResponseDecodeError,
    ResponseReadError,
)
from ..telemetry import get_logger, record_response, trace_operation
from ..types import READ_METHODS, ApiRequest
from .auth import AuthLifecycleManager
from .errors import ErrorFactory, error_details
from .query import encode_query

if TYPE_CHECKING:
    from ..config import BitpinConfig
    from .credentials import Credentials

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


def encode_json_body(body: Any) -> bytes:
    """Serialize a request body to JSON bytes.

    Pydantic models are dumped by alias with unset optional fields left out.
    """
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode()
    return json.dumps(body, separators=(",", ":")).encode()


class RequestPipeline:
    """Single chokepoint through which every API call is sent."""

    def __init__(
        self,
        client: httpx.Client,
        config: BitpinConfig,
        credentials: Credentials,
    ) -> None:
        """Initialize the pipeline.

        Args:
            client: HTTP client used for dispatch.
            config: SDK configuration.
            credentials: Credential state shared with the auth lifecycle.
        """
        self._client = client
        self._config = config
        self._credentials = credentials
        self._logger = get_logger()
        self.auth = AuthLifecycleManager(
            self,
            credentials,
            refresh_margin=config.refresh_margin,
        )
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    @property
    def auto_refresh(self) -> bool:
        return self._config.auto_refresh

    def execute(self, request: ApiRequest[T]) -> T | None:
        """Send an API request and decode its response.

        Args:
            request: Endpoint, method and payload of the call.

        Returns:
            The decoded response, or None when no result type was given.

        Raises:
            RequestPreparationError: If the body cannot be encoded.
            AuthenticationFailedError: If refreshing the credentials failed.
            MissingAccessTokenError: If no access token is held.
            MissingRefreshTokenError: If no refresh token is held.
            TransportError: On network failure.
            ResponseReadError: If the response body cannot be read.
            APIError: On a non-2xx response.
            ResponseDecodeError: If a 2xx body does not match the result type.
        """
        url = self._config.api_url(request.endpoint, request.version)
        return self.send(
            request.method,
            url,
            auth=request.auth,
            body=request.body,
            result_type=request.result_type,
        )

    def send(
        self,
        method: str,
        url: str,
        *,
        auth: bool = False,
        body: Any = None,
        result_type: type[T] | None = None,
    ) -> T | None:
        """Send a request to an absolute URL. See ``execute``."""
        method = method.upper()
        content, url = self._prepare_body(method, body, url)

        headers = {"Content-Type": JSON_CONTENT_TYPE}
        if auth:
            headers["Authorization"] = f"Bearer {self._authorize()}"

        response = self._dispatch(method, url, headers, content)

        if not 200 <= response.status_code < 300:
            error = ErrorFactory.from_http_response(response)
            self._logger.warning(
                "API request failed",
                method=method,
                url=url,
                **error_details(error),
            )
            raise error

        if result_type is None:
            return None
        return self._decode(response, result_type)

    def _prepare_body(self, method: str, body: Any, url: str) -> tuple[bytes | None, str]:
        if body is None:
            return None, url

        if method in READ_METHODS:
            try:
                query = encode_query(body)
            except QueryEncodingError as e:
                raise RequestPreparationError(
                    "failed to convert parameters to URL params",
                    operation="preparing request parameters",
                    cause=e,
                ) from e
            if query:
                url = f"{url}?{query}"
            return None, url

        try:
            return encode_json_body(body), url
        except (TypeError, ValueError) as e:
            raise RequestPreparationError(
                "failed to marshal request body",
                operation="preparing request body",
                cause=e,
            ) from e

    def _authorize(self) -> str:
        if self.auto_refresh:
            try:
                self.auth.ensure_fresh()
            except BitpinError as e:
                raise AuthenticationFailedError(cause=e) from e
        self._credentials.assert_ready()
        return self._credentials.access_token

    def _dispatch(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | None,
    ) -> httpx.Response:
        with trace_operation(
            "http_request",
            attributes={"http.method": method, "http.url": url},
        ) as span:
            try:
                request = self._client.build_request(method, url, headers=headers, content=content)
            except httpx.InvalidURL as e:
                raise RequestPreparationError(
                    f"failed to create request: {e}",
                    operation="creating request",
                    cause=e,
                ) from e

            try:
                response = self._client.send(request, stream=True)
            except httpx.HTTPError as e:
                error = ErrorFactory.from_exception(e, timeout_seconds=self._config.timeout)
                self._logger.error("Request failed", method=method, url=url, error=str(e))
                raise error from e

            try:
                response.read()
            except httpx.HTTPError as e:
                self._logger.error("Reading response failed", method=method, url=url, error=str(e))
                raise ResponseReadError(status_code=response.status_code, cause=e) from e
            finally:
                response.close()

            record_response(span, response.status_code)
            return response

    def _decode(self, response: httpx.Response, result_type: type[T]) -> T:
        adapter = self._adapters.get(result_type)
        if adapter is None:
            adapter = self._adapters[result_type] = TypeAdapter(result_type)
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(
                f"failed to unmarshal response: {e.error_count()} validation error(s)",
                status_code=response.status_code,
                cause=e,
            ) from e
