"""Unit tests for configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bitpin_sdk.config import DEFAULT_BASE_URL, BitpinConfig, TelemetryConfig


class TestBitpinConfig:
    """Tests for BitpinConfig."""

    def test_defaults(self) -> None:
        config = BitpinConfig()

        assert config.base_url_str == DEFAULT_BASE_URL
        assert config.api_version == "v1"
        assert config.timeout == 30.0
        assert config.auto_auth is True
        assert config.auto_refresh is True
        assert config.refresh_margin == 0.0
        assert config.secret_key_str == ""
        assert config.telemetry == TelemetryConfig()

    def test_api_url(self) -> None:
        config = BitpinConfig(base_url="https://api.bitpin.test/")

        assert config.api_url("/mkt/markets/") == "https://api.bitpin.test/api/v1/mkt/markets/"
        assert config.api_url("/mkt/markets/", "v2") == "https://api.bitpin.test/api/v2/mkt/markets/"

    def test_api_version_slashes_are_stripped(self) -> None:
        assert BitpinConfig(api_version="/v2/").api_version == "v2"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"base_url": "not a url"},
            {"api_version": "/"},
            {"timeout": 0},
            {"timeout": 301},
            {"connect_timeout": -1},
            {"refresh_margin": -5},
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            BitpinConfig(**kwargs)

    def test_frozen(self) -> None:
        config = BitpinConfig()

        with pytest.raises(ValidationError):
            config.timeout = 5.0  # type: ignore[misc]

    def test_secret_is_masked(self) -> None:
        config = BitpinConfig(api_key="key", secret_key="s3cret")

        assert "s3cret" not in repr(config)
        assert config.secret_key_str == "s3cret"

    def test_with_overrides(self) -> None:
        config = BitpinConfig(api_key="key", secret_key="s3cret")

        updated = config.with_overrides(timeout=5.0, auto_auth=False)

        assert updated.timeout == 5.0
        assert updated.auto_auth is False
        assert updated.secret_key_str == "s3cret"
        assert config.timeout == 30.0


class TestFromEnv:
    """Tests for BitpinConfig.from_env."""

    def test_reads_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BITPIN_BASE_URL", "https://api.bitpin.test")
        monkeypatch.setenv("BITPIN_API_VERSION", "v2")
        monkeypatch.setenv("BITPIN_TIMEOUT", "12.5")
        monkeypatch.setenv("BITPIN_API_KEY", "key")
        monkeypatch.setenv("BITPIN_SECRET_KEY", "secret")
        monkeypatch.setenv("BITPIN_AUTO_AUTH", "false")
        monkeypatch.setenv("BITPIN_AUTO_REFRESH", "Yes")

        config = BitpinConfig.from_env()

        assert config.base_url_str == "https://api.bitpin.test"
        assert config.api_version == "v2"
        assert config.timeout == 12.5
        assert config.api_key == "key"
        assert config.secret_key_str == "secret"
        assert config.auto_auth is False
        assert config.auto_refresh is True

    def test_defaults_when_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("BASE_URL", "API_VERSION", "TIMEOUT", "API_KEY", "SECRET_KEY"):
            monkeypatch.delenv(f"BITPIN_{name}", raising=False)

        config = BitpinConfig.from_env()

        assert config.base_url_str == DEFAULT_BASE_URL
        assert config.secret_key is None

    def test_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXCHANGE_ACCESS_TOKEN", "abc")

        assert BitpinConfig.from_env(prefix="EXCHANGE_").access_token == "abc"
