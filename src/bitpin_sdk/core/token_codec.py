"""Bearer token claims decoding.

Tokens are decoded without signature verification: the server verifies
them, the client only needs to read the expiry and identity claims.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from ..errors import TokenDecodeError

_DECODE_OPTIONS: dict[str, Any] = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


class DecodedToken(BaseModel):
    """Claims carried by a Bitpin access or refresh token."""

    model_config = ConfigDict(frozen=True, extra="allow")

    token_type: str = ""
    exp: int = Field(default=0, description="Expiration time (Unix timestamp)")
    jti: str = ""
    user_id: int | None = None
    ip: list[str] = Field(default_factory=list)
    api_credential_id: int | None = None

    @field_validator("token_type", "exp", "jti", "ip", mode="before")
    @classmethod
    def null_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Read a null claim as the field's zero value."""
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v

    @property
    def expires_at(self) -> datetime:
        """Get expiration as datetime."""
        return datetime.fromtimestamp(self.exp, tz=UTC)

    @property
    def subject_id(self) -> int | None:
        return self.user_id

    @property
    def token_id(self) -> str:
        return self.jti

    def is_expired(self) -> bool:
        """Check whether the expiry lies strictly before now."""
        return self.exp < time.time()

    def is_expiring_within(self, window: timedelta | float) -> bool:
        """Check whether the token expires before ``now + window``.

        Args:
            window: Look-ahead as a timedelta or a number of seconds.
        """
        seconds = window.total_seconds() if isinstance(window, timedelta) else float(window)
        return self.exp < time.time() + seconds

    def human_readable(self) -> str:
        return (
            f"Token Type: {self.token_type}\n"
            f"Exp: {self.exp}\n"
            f"Jti: {self.jti}\n"
            f"UserId: {self.user_id}\n"
            f"Ip: {self.ip}\n"
            f"Api Credential Id: {self.api_credential_id}"
        )


def decode_token(token: str) -> DecodedToken:
    """Decode the claims of a bearer token.

    Args:
        token: Encoded JWT.

    Returns:
        Decoded claims.

    Raises:
        TokenDecodeError: If the token is not a JWT or its claims are malformed.
    """
    try:
        claims = jwt.decode(token, options=_DECODE_OPTIONS)
    except jwt.exceptions.InvalidTokenError as e:
        raise TokenDecodeError(f"failed to parse token: {e}", cause=e) from e

    try:
        return DecodedToken.model_validate(claims)
    except ValidationError as e:
        raise TokenDecodeError(f"failed to read token claims: {e}", cause=e) from e
