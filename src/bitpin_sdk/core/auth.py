"""Token lifecycle: authentication, refresh and re-authentication.

The manager never runs in the background. ``ensure_fresh`` is called
right before a token is needed and decides, from the tokens currently
held, whether to do nothing, refresh the access token or log in again.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from ..errors import MissingCredentialsError, MissingRefreshTokenError
from ..models import (
    AuthenticationParams,
    AuthenticationResponse,
    RefreshTokenParams,
    RefreshTokenResponse,
)
from ..telemetry import get_logger
from ..types import ApiRequest
from .token_codec import decode_token

if TYPE_CHECKING:
    from .credentials import Credentials
    from .pipeline import RequestPipeline

AUTHENTICATE_ENDPOINT = "/usr/authenticate/"
REFRESH_ENDPOINT = "/usr/refresh_token/"


class AuthState(StrEnum):
    """Authentication states derived from the tokens held."""

    UNAUTHENTICATED = "unauthenticated"
    ACCESS_VALID = "access_valid"
    ACCESS_EXPIRED = "access_expired"
    REFRESH_EXPIRED = "refresh_expired"
    NO_CREDENTIALS = "no_credentials"


class AuthLifecycleManager:
    """Keeps the credentials usable for authenticated requests."""

    def __init__(
        self,
        pipeline: RequestPipeline,
        credentials: Credentials,
        *,
        refresh_margin: float = 0.0,
    ) -> None:
        """Initialize the lifecycle manager.

        Args:
            pipeline: Pipeline used to send the token requests.
            credentials: Credential state to read and update.
            refresh_margin: Seconds before expiry at which an access token
                is already treated as expired.
        """
        self._pipeline = pipeline
        self._credentials = credentials
        self._refresh_margin = refresh_margin
        self._logger = get_logger()

    @property
    def state(self) -> AuthState:
        """Current state, recomputed from the tokens on every access.

        Raises:
            TokenDecodeError: If a held token cannot be decoded.
        """
        creds = self._credentials.snapshot()
        if not creds.access_token and not creds.refresh_token:
            return AuthState.UNAUTHENTICATED
        access_expired = not creds.access_token or self._access_expired(creds.access_token)
        if creds.refresh_token and decode_token(creds.refresh_token).is_expired():
            if creds.api_key and creds.secret_key:
                return AuthState.REFRESH_EXPIRED
            return AuthState.NO_CREDENTIALS
        if access_expired:
            return AuthState.ACCESS_EXPIRED
        return AuthState.ACCESS_VALID

    def _access_expired(self, token: str) -> bool:
        decoded = decode_token(token)
        if self._refresh_margin:
            return decoded.is_expiring_within(self._refresh_margin)
        return decoded.is_expired()

    def ensure_fresh(self) -> None:
        """Refresh or re-authenticate if the held tokens have expired.

        Both tokens are decoded first, so a malformed token is reported
        even when a login would replace it. An expired refresh token means
        the access token cannot be renewed and a full login is required.

        Raises:
            TokenDecodeError: If a held token cannot be decoded.
            MissingCredentialsError: If re-authentication is needed but no
                API key/secret is available.
            MissingRefreshTokenError: If the access token expired and there
                is neither a refresh token nor API credentials.
            BitpinError: Any failure of the refresh or login request.
        """
        with self._credentials.lock:
            access_token = self._credentials.access_token
            access_expired = bool(access_token) and self._access_expired(access_token)

            refresh_token = self._credentials.refresh_token
            if refresh_token and decode_token(refresh_token).is_expired():
                if not self._credentials.has_api_credentials:
                    raise MissingCredentialsError()
                self._logger.info("Refresh token expired, re-authenticating")
                self._reauthenticate()
                return

            if access_expired:
                if refresh_token:
                    self._logger.info("Access token expired, refreshing")
                    self.refresh()
                elif self._credentials.has_api_credentials:
                    self._logger.info("Access token expired without refresh token, re-authenticating")
                    self._reauthenticate()
                else:
                    raise MissingRefreshTokenError()

    def _reauthenticate(self) -> None:
        self.authenticate(self._credentials.api_key, self._credentials.secret_key)

    def refresh(self) -> None:
        """Exchange the refresh token for a new access token.

        Only the access token is replaced; refresh tokens are not rotated.
        Failures propagate unchanged.
        """
        with self._credentials.lock:
            params = RefreshTokenParams(refresh=self._credentials.refresh_token)
            response = self._pipeline.execute(
                ApiRequest(
                    "POST",
                    REFRESH_ENDPOINT,
                    body=params,
                    result_type=RefreshTokenResponse,
                )
            )
            self._credentials.update(access_token=response.access)
            self._logger.info("Access token refreshed")

    def authenticate(self, api_key: str, secret_key: str) -> AuthenticationResponse:
        """Log in with API credentials and store the issued token pair.

        Args:
            api_key: Bitpin API key.
            secret_key: Bitpin API secret.

        Returns:
            The issued access and refresh tokens.

        Raises:
            MissingCredentialsError: If either argument is empty; no request
                is sent.
        """
        if not api_key or not secret_key:
            raise MissingCredentialsError()

        with self._credentials.lock:
            response = self._pipeline.execute(
                ApiRequest(
                    "POST",
                    AUTHENTICATE_ENDPOINT,
                    body=AuthenticationParams(api_key=api_key, secret_key=secret_key),
                    result_type=AuthenticationResponse,
                )
            )
            self._credentials.update(
                access_token=response.access,
                refresh_token=response.refresh,
                api_key=api_key,
                secret_key=secret_key,
            )
            self._logger.info("Authenticated")
            return response
