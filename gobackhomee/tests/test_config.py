"""
Unit tests for configuration and logging setup.
"""

import logging
import os
from unittest.mock import MagicMock, patch

import pytest

from gobackhomee.client import GobackhomeeClient
from gobackhomee.config import ClientConfig, EnvConfigProvider, SIWEConfig, WalletAuth
from gobackhomee.errors import ConfigurationError
from gobackhomee.logging_config import SecretRedactionFilter, get_logging_config, redact
from gobackhomee.modules.auth import StaticTokenStrategy, WalletChallengeStrategy


class TestClientConfig:
    """Test client configuration validation."""

    def test_defaults(self):
        config = ClientConfig(base_url="https://api.example")
        assert config.timeout == 30.0
        assert config.siwe == SIWEConfig()
        assert not config.has_credentials

    @pytest.mark.parametrize("base_url", ["", "   "])
    def test_base_url_required(self, base_url):
        with pytest.raises(ConfigurationError):
            ClientConfig(base_url=base_url)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_positive(self, timeout):
        with pytest.raises(ConfigurationError):
            ClientConfig(base_url="https://api.example", timeout=timeout)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ClientConfig(base_url="")

    def test_config_is_immutable(self):
        config = ClientConfig(base_url="https://api.example", api_key="k")
        with pytest.raises(AttributeError):
            config.api_key = "other"


class TestEnvConfigProvider:
    """Test environment-based configuration."""

    def test_full_environment(self):
        env = {
            "GOBACKHOMEE_BASE_URL": "https://api.example",
            "GOBACKHOMEE_TIMEOUT": "12.5",
            "GOBACKHOMEE_API_KEY": "secret",
            "GOBACKHOMEE_SIWE_DOMAIN": "app.example",
            "GOBACKHOMEE_SIWE_CHAIN_ID": "137",
            "GOBACKHOMEE_SESSION_TTL": "900",
        }
        with patch.dict(os.environ, env, clear=True):
            config = EnvConfigProvider().get_client_config()

        assert config.base_url == "https://api.example"
        assert config.timeout == 12.5
        assert config.api_key == "secret"
        assert config.siwe.domain == "app.example"
        assert config.siwe.uri == "https://app.example"
        assert config.siwe.chain_id == 137
        assert config.siwe.session_ttl == 900.0

    def test_base_url_required(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                EnvConfigProvider().get_client_config()
        assert "GOBACKHOMEE_BASE_URL" in str(exc_info.value)

    def test_empty_api_key_is_unset(self):
        env = {"GOBACKHOMEE_BASE_URL": "https://api.example", "GOBACKHOMEE_API_KEY": ""}
        with patch.dict(os.environ, env, clear=True):
            config = EnvConfigProvider().get_client_config()
        assert config.api_key is None

    def test_wallet_comes_from_caller(self):
        wallet = WalletAuth(wallet_address="0xabc", sign_message=lambda m: "sig")
        with patch.dict(os.environ, {"GOBACKHOMEE_BASE_URL": "https://api.example"}, clear=True):
            config = EnvConfigProvider(wallet=wallet).get_client_config()
        assert config.wallet is wallet
        assert config.has_credentials

    @pytest.mark.parametrize(
        "name,value",
        [
            ("GOBACKHOMEE_TIMEOUT", "soon"),
            ("GOBACKHOMEE_SIWE_CHAIN_ID", "mainnet"),
            ("GOBACKHOMEE_SESSION_TTL", "1h"),
        ],
    )
    def test_malformed_number_names_variable(self, name, value):
        env = {"GOBACKHOMEE_BASE_URL": "https://api.example", name: value}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                EnvConfigProvider().get_client_config()
        assert name in str(exc_info.value)

    def test_wallet_with_api_key_in_env_conflicts(self):
        wallet = WalletAuth(wallet_address="0xabc")
        env = {"GOBACKHOMEE_BASE_URL": "https://api.example", "GOBACKHOMEE_API_KEY": "k"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError):
                EnvConfigProvider(wallet=wallet).get_client_config()


class TestClientFromEnv:
    """Test client construction from the environment."""

    @pytest.mark.asyncio
    async def test_api_key_client(self):
        env = {"GOBACKHOMEE_BASE_URL": "https://api.example", "GOBACKHOMEE_API_KEY": "k"}
        with patch.dict(os.environ, env, clear=True):
            client = GobackhomeeClient.from_env()
        async with client:
            assert isinstance(client.credentials, StaticTokenStrategy)
            assert client.config.base_url == "https://api.example"

    @pytest.mark.asyncio
    async def test_wallet_client(self):
        wallet = WalletAuth(wallet_address="0xabc", sign_message=lambda m: "sig")
        with patch.dict(os.environ, {"GOBACKHOMEE_BASE_URL": "https://api.example"}, clear=True):
            client = GobackhomeeClient.from_env(wallet=wallet)
        async with client:
            assert isinstance(client.credentials, WalletChallengeStrategy)

    def test_wallet_with_custom_provider_rejected(self):
        wallet = WalletAuth(wallet_address="0xabc", sign_message=lambda m: "sig")
        provider = MagicMock()

        with pytest.raises(ConfigurationError):
            GobackhomeeClient.from_env(wallet=wallet, provider=provider)
        provider.get_client_config.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_provider_owns_wallet(self):
        wallet = WalletAuth(wallet_address="0xabc", sign_message=lambda m: "sig")
        provider = MagicMock()
        provider.get_client_config.return_value = ClientConfig(
            base_url="https://api.example", wallet=wallet
        )

        client = GobackhomeeClient.from_env(provider=provider)
        async with client:
            assert isinstance(client.credentials, WalletChallengeStrategy)
            assert client.credentials.wallet is wallet


class TestLogging:
    """Test logging configuration and credential redaction."""

    @pytest.mark.parametrize(
        "message,secret",
        [
            ("Authorization: Bearer abc.def-123", "abc.def-123"),
            ("signature=0xdeadbeef", "0xdeadbeef"),
            ("{'token': 'session-1'}", "session-1"),
            ('"signature": "0xfeed"', "0xfeed"),
        ],
    )
    def test_redact_masks_secrets(self, message, secret):
        redacted = redact(message)
        assert secret not in redacted
        assert "[REDACTED]" in redacted

    def test_redact_leaves_plain_messages(self):
        message = "GET /api/projects -> 200"
        assert redact(message) == message

    def test_filter_rewrites_but_never_drops(self):
        record = logging.LogRecord(
            name="gobackhomee.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="sent %s",
            args=("Bearer secret-token",),
            exc_info=None,
        )

        assert SecretRedactionFilter().filter(record) is True
        assert "secret-token" not in record.getMessage()

    def test_logging_config_shape(self):
        config = get_logging_config("DEBUG")

        assert config["loggers"]["gobackhomee"]["level"] == "DEBUG"
        assert config["loggers"]["httpx"]["level"] == "WARNING"
        assert config["handlers"]["default"]["filters"] == ["redact_secrets"]
        assert config["filters"]["redact_secrets"]["()"] is SecretRedactionFilter
