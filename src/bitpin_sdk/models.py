"""Pydantic models for the Bitpin REST API.

Response models are frozen and ignore keys they do not know about, so
additive server changes do not break decoding. Request models for GET
endpoints derive from ``QueryParams`` and are sent as query strings;
the rest are sent as JSON bodies.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from .core.query import QueryParams


class OrderSide(StrEnum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"


class OrderType(StrEnum):
    """Order execution type."""

    LIMIT = "limit"
    MARKET = "market"
    STOP_LIMIT = "stop_limit"
    OCO = "oco"


class OrderState(StrEnum):
    """Order lifecycle state."""

    INITIAL = "initial"
    ACTIVE = "active"
    CLOSED = "closed"
    CANCELED = "canceled"


class _Response(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# Authentication


class AuthenticationParams(BaseModel):
    """Credentials exchanged for an access/refresh token pair."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1)
    secret_key: str = Field(..., min_length=1)


class AuthenticationResponse(_Response):
    """Token pair issued by ``/usr/authenticate/``."""

    access: str
    refresh: str


class RefreshTokenParams(BaseModel):
    """Refresh token exchanged for a new access token."""

    model_config = ConfigDict(frozen=True)

    refresh: str


class RefreshTokenResponse(_Response):
    """Access token issued by ``/usr/refresh_token/``."""

    access: str


class ErrorResponse(_Response):
    """Structured error body: summary, machine code and per-field messages."""

    detail: str | None = None
    code: str | None = None
    messages: dict[str, str] | None = None


# Market information


class Currency(_Response):
    currency: str
    name: str = ""
    tradable: bool = False
    precision: str = ""


class Market(_Response):
    symbol: str
    name: str = ""
    base: str = ""
    quote: str = ""
    tradable: bool = False
    price_precision: int = 0
    base_amount_precision: int = 0
    quote_amount_precision: int = 0


class Ticker(_Response):
    symbol: str
    price: str = ""
    daily_change_price: float = 0.0
    low: str = ""
    high: str = ""
    timestamp: float = 0.0


class OrderBook(_Response):
    """Price levels as ``[price, amount]`` string pairs."""

    asks: list[list[str]] = Field(default_factory=list)
    bids: list[list[str]] = Field(default_factory=list)


class Trade(_Response):
    id: str
    price: str = ""
    base_amount: str = ""
    quote_amount: str = ""
    side: str = ""


# Wallets


class Wallet(_Response):
    id: int
    asset: str
    balance: str = "0"
    frozen: str = "0"
    service: str = ""


class GetWalletParams(QueryParams):
    """Filters for ``GET /wlt/wallets/``."""

    assets: list[str] = Field(default_factory=list)
    service: str = ""
    offset: int = 0
    limit: int = 0


# Orders


class OrderStatus(_Response):
    id: int
    symbol: str
    type: str = ""
    side: str = ""
    base_amount: str | None = None
    quote_amount: str | None = None
    price: str | None = None
    stop_price: str | None = None
    oco_target_price: str | None = None
    identifier: str | None = None
    state: str = ""
    created_at: datetime | None = None
    closed_at: str | None = None
    dealed_base_amount: str | None = None
    dealed_quote_amount: str | None = None
    req_to_cancel: bool = False
    commission: str | None = None


class CreateOrderParams(BaseModel):
    """Body for ``POST /odr/orders/``; unset optional fields are not sent."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    type: OrderType
    side: OrderSide
    base_amount: str | None = None
    quote_amount: str | None = None
    price: str | None = None
    stop_price: str | None = None
    oco_target_price: str | None = None
    identifier: str | None = None


class GetOrdersHistoryParams(QueryParams):
    """Filters for ``GET /odr/orders/``."""

    symbol: str = ""
    side: OrderSide | None = None
    state: OrderState | None = None
    type: OrderType | None = None
    identifier: str = ""
    start: str = ""
    end: str = ""
    ids_in: str = ""
    identifiers_in: str = ""
    offset: int = 0
    limit: int = 0


class UserTrade(_Response):
    id: int
    symbol: str
    base_amount: str = ""
    quote_amount: str = ""
    price: str = ""
    created_at: datetime | None = None
    commission: str = ""
    side: str = ""
    commission_currency: str = ""
    order_id: int | None = None
    identifier: str | None = None


class GetUserTradesParams(QueryParams):
    """Filters for ``GET /odr/fills/``."""

    symbol: str = ""
    side: OrderSide | None = None
    offset: int = 0
    limit: int = 0
