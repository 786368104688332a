"""HTTP client construction for the Bitpin SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from .telemetry import SDK_VERSION

if TYPE_CHECKING:
    from .config import BitpinConfig

USER_AGENT = f"bitpin-sdk/{SDK_VERSION} Python"


def create_http_client(
    config: BitpinConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: SDK configuration.
        transport: Optional transport replacing the default network one.

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        follow_redirects=False,
        transport=transport,
    )
