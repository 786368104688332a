"""Credential state shared by the request pipeline and the auth lifecycle."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..errors import MissingAccessTokenError, MissingRefreshTokenError


@dataclass(frozen=True)
class CredentialSnapshot:
    """Immutable view of the credentials at one point in time."""

    access_token: str = ""
    refresh_token: str = ""
    api_key: str = ""
    secret_key: str = field(default="", repr=False)


class Credentials:
    """Mutable token and API credential holder.

    All reads and writes go through ``lock``; callers that need a
    read-modify-write sequence (check expiry, then refresh) hold it for
    the whole sequence.
    """

    def __init__(
        self,
        access_token: str = "",
        refresh_token: str = "",
        api_key: str = "",
        secret_key: str = "",
    ) -> None:
        self.lock = threading.RLock()
        self._access_token = access_token
        self._refresh_token = refresh_token
        self._api_key = api_key
        self._secret_key = secret_key
        self.initial = self.snapshot()

    @property
    def access_token(self) -> str:
        with self.lock:
            return self._access_token

    @property
    def refresh_token(self) -> str:
        with self.lock:
            return self._refresh_token

    @property
    def api_key(self) -> str:
        with self.lock:
            return self._api_key

    @property
    def secret_key(self) -> str:
        with self.lock:
            return self._secret_key

    @property
    def is_authenticated(self) -> bool:
        """Whether both tokens are held."""
        with self.lock:
            return bool(self._access_token and self._refresh_token)

    @property
    def has_api_credentials(self) -> bool:
        """Whether API key and secret are both available for re-authentication."""
        with self.lock:
            return bool(self._api_key and self._secret_key)

    def update(
        self,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
        api_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        """Overwrite the given fields, leaving the others untouched."""
        with self.lock:
            if access_token is not None:
                self._access_token = access_token
            if refresh_token is not None:
                self._refresh_token = refresh_token
            if api_key is not None:
                self._api_key = api_key
            if secret_key is not None:
                self._secret_key = secret_key

    def assert_ready(self) -> None:
        """Check that a bearer token can be attached.

        Raises:
            MissingAccessTokenError: If no access token is held.
            MissingRefreshTokenError: If no refresh token is held.
        """
        with self.lock:
            if not self._access_token:
                raise MissingAccessTokenError()
            if not self._refresh_token:
                raise MissingRefreshTokenError()

    def snapshot(self) -> CredentialSnapshot:
        with self.lock:
            return CredentialSnapshot(
                access_token=self._access_token,
                refresh_token=self._refresh_token,
                api_key=self._api_key,
                secret_key=self._secret_key,
            )
