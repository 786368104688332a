"""Bitpin REST API client.

Each endpoint method only describes its call (method, path, whether a
token is needed, payload and result type); the request pipeline does the
rest.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Self

import httpx

from .config import BitpinConfig
from .core import AuthState, CredentialSnapshot, Credentials, RequestPipeline
from .http import create_http_client
from .models import (
    AuthenticationResponse,
    CreateOrderParams,
    Currency,
    GetOrdersHistoryParams,
    GetUserTradesParams,
    GetWalletParams,
    Market,
    OrderBook,
    OrderState,
    OrderStatus,
    Ticker,
    Trade,
    UserTrade,
    Wallet,
)
from .telemetry import get_logger
from .types import ApiRequest


class BitpinClient:
    """Synchronous Bitpin client."""

    def __init__(
        self,
        config: BitpinConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Tokens supplied in the config are refreshed eagerly when
        ``auto_refresh`` is set, and the client logs in with the API key
        and secret when ``auto_auth`` is set and the token pair is incomplete.

        Args:
            config: SDK configuration; defaults to the production endpoint.
            http_client: Externally owned HTTP client; not closed by ``close``.
            transport: Transport for the internally created HTTP client.

        Raises:
            BitpinError: If the eager refresh or login fails.
        """
        self.config = config or BitpinConfig()
        self._logger = get_logger()
        self._owns_http = http_client is None
        self._http = http_client or create_http_client(self.config, transport)
        self._credentials = Credentials(
            access_token=self.config.access_token,
            refresh_token=self.config.refresh_token,
            api_key=self.config.api_key,
            secret_key=self.config.secret_key_str,
        )
        self._pipeline = RequestPipeline(self._http, self.config, self._credentials)

        try:
            self._bootstrap()
        except Exception:
            self.close()
            raise

    def _bootstrap(self) -> None:
        creds = self._credentials
        self._logger.debug(
            "Bootstrapping credentials",
            has_tokens=creds.is_authenticated,
            has_api_credentials=creds.has_api_credentials,
        )
        if self.config.auto_refresh and (creds.access_token or creds.refresh_token):
            self._pipeline.auth.ensure_fresh()
        if self.config.auto_auth and creds.has_api_credentials and not creds.is_authenticated:
            self._pipeline.auth.authenticate(creds.api_key, creds.secret_key)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http:
            self._http.close()

    @property
    def credentials(self) -> CredentialSnapshot:
        """Current tokens and API credentials."""
        return self._credentials.snapshot()

    @property
    def initial_credentials(self) -> CredentialSnapshot:
        """Credentials as supplied, before any eager refresh or login."""
        return self._credentials.initial

    @property
    def auth_state(self) -> AuthState:
        return self._pipeline.auth.state

    def api_request(
        self,
        method: str,
        endpoint: str,
        *,
        version: str | None = None,
        auth: bool = False,
        body: Any = None,
        result_type: Any = None,
    ) -> Any:
        """Call an arbitrary API endpoint through the request pipeline.

        Args:
            method: HTTP method.
            endpoint: Path below ``/api/<version>``, e.g. ``/mkt/markets/``.
            version: API version; defaults to the configured one.
            auth: Whether the endpoint needs a bearer token.
            body: Query parameter model for reads, JSON payload for writes.
            result_type: Type to decode a successful response into.

        Returns:
            The decoded response, or None without ``result_type``.
        """
        return self._pipeline.execute(
            ApiRequest(
                method,
                endpoint,
                auth=auth,
                body=body,
                result_type=result_type,
                version=version,
            )
        )

    # Authentication

    def authenticate(self, api_key: str, secret_key: str) -> AuthenticationResponse:
        """Log in with API credentials and store the issued tokens."""
        return self._pipeline.auth.authenticate(api_key, secret_key)

    def refresh_access_token(self) -> None:
        """Replace the access token using the held refresh token."""
        self._pipeline.auth.refresh()

    # Market data

    def get_currencies(self) -> list[Currency]:
        return self.api_request("GET", "/mkt/currencies/", result_type=list[Currency])

    def get_markets(self) -> list[Market]:
        return self.api_request("GET", "/mkt/markets/", result_type=list[Market])

    def get_tickers(self) -> list[Ticker]:
        return self.api_request("GET", "/mkt/tickers/", result_type=list[Ticker])

    def get_order_book(self, symbol: str) -> OrderBook:
        """Get the order book of a market, e.g. ``BTC_IRT``."""
        return self.api_request("GET", f"/mth/orderbook/{symbol}/", result_type=OrderBook)

    def get_recent_trades(self, symbol: str) -> list[Trade]:
        return self.api_request("GET", f"/mth/matches/{symbol}/", result_type=list[Trade])

    # Wallets

    def get_wallets(self, params: GetWalletParams | None = None) -> list[Wallet]:
        return self.api_request(
            "GET",
            "/wlt/wallets/",
            auth=True,
            body=params,
            result_type=list[Wallet],
        )

    # Orders

    def create_order(self, params: CreateOrderParams) -> OrderStatus:
        """Place a new order."""
        return self.api_request(
            "POST",
            "/odr/orders/",
            auth=True,
            body=params,
            result_type=OrderStatus,
        )

    def cancel_order(self, order_id: int) -> None:
        """Cancel an open order."""
        self.api_request("DELETE", f"/odr/orders/{order_id}/", auth=True)

    def get_orders_history(self, params: GetOrdersHistoryParams | None = None) -> list[OrderStatus]:
        return self.api_request(
            "GET",
            "/odr/orders/",
            auth=True,
            body=params,
            result_type=list[OrderStatus],
        )

    def get_open_orders(self, params: GetOrdersHistoryParams | None = None) -> list[OrderStatus]:
        """Get orders history filtered to active orders."""
        params = (params or GetOrdersHistoryParams()).model_copy(
            update={"state": OrderState.ACTIVE}
        )
        return self.get_orders_history(params)

    def get_order_statuses(self, order_ids: Sequence[int | str]) -> list[OrderStatus]:
        """Look up several orders by id in one call."""
        ids = ",".join(str(order_id) for order_id in order_ids)
        return self.api_request(
            "GET",
            f"/odr/orders/{ids}/",
            auth=True,
            result_type=list[OrderStatus],
        )

    def get_user_trades(self, params: GetUserTradesParams | None = None) -> list[UserTrade]:
        return self.api_request(
            "GET",
            "/odr/fills/",
            auth=True,
            body=params,
            result_type=list[UserTrade],
        )
