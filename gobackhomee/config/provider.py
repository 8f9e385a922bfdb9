"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, Protocol, Union

from ..errors import ConfigurationError

SignMessage = Callable[[str], Union[str, Awaitable[str]]]

DEFAULT_TIMEOUT = 30.0
DEFAULT_SESSION_TTL = 3600.0


@dataclass(frozen=True)
class SIWEConfig:
    """Sign-In with Ethereum message parameters."""
    domain: str = "localhost"
    uri: str = "https://localhost"
    statement: str = "Sign in to Gobackhomee"
    chain_id: int = 1
    session_ttl: float = DEFAULT_SESSION_TTL


@dataclass(frozen=True)
class WalletAuth:
    """Web3 wallet credentials: an address and a signing capability."""
    wallet_address: str
    sign_message: Optional[SignMessage] = None
    chain: str = "ethereum"
    sign_timeout: Optional[float] = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration captured once at construction."""
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    api_key: Optional[str] = None
    wallet: Optional[WalletAuth] = None
    siwe: SIWEConfig = field(default_factory=SIWEConfig)
    user_agent: str = "gobackhomee-python"

    def __post_init__(self):
        if not self.base_url or not self.base_url.strip():
            raise ConfigurationError("base_url is required")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.api_key and self.wallet is not None:
            raise ConfigurationError(
                "api_key and wallet are mutually exclusive; configure one credential strategy"
            )

    @property
    def has_credentials(self) -> bool:
        """Check if any credential material is configured."""
        return bool(self.api_key) or self.wallet is not None


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_client_config(self) -> ClientConfig:
        """Get client configuration."""
        ...

    def get_siwe_config(self) -> SIWEConfig:
        """Get SIWE configuration."""
        ...


def _env_number(name: str, default: str, cast: Callable[[str], Union[int, float]]):
    """Read a numeric environment variable, naming it when malformed."""
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def __init__(self, wallet: Optional[WalletAuth] = None):
        # Signing capabilities cannot come from the environment
        self.wallet = wallet

    def get_siwe_config(self) -> SIWEConfig:
        """Get SIWE configuration from environment variables."""
        domain = os.getenv("GOBACKHOMEE_SIWE_DOMAIN", "localhost")
        return SIWEConfig(
            domain=domain,
            uri=os.getenv("GOBACKHOMEE_SIWE_URI") or f"https://{domain}",
            statement=os.getenv("GOBACKHOMEE_SIWE_STATEMENT", "Sign in to Gobackhomee"),
            chain_id=_env_number("GOBACKHOMEE_SIWE_CHAIN_ID", "1", int),
            session_ttl=_env_number("GOBACKHOMEE_SESSION_TTL", str(DEFAULT_SESSION_TTL), float),
        )

    def get_client_config(self) -> ClientConfig:
        """Get client configuration from environment variables."""
        base_url = os.getenv("GOBACKHOMEE_BASE_URL")
        if not base_url:
            raise ConfigurationError(
                "GOBACKHOMEE_BASE_URL environment variable is required. "
                "Example: https://api.gobackhomee.example"
            )

        return ClientConfig(
            base_url=base_url,
            timeout=_env_number("GOBACKHOMEE_TIMEOUT", str(DEFAULT_TIMEOUT), float),
            api_key=os.getenv("GOBACKHOMEE_API_KEY") or None,
            wallet=self.wallet,
            siwe=self.get_siwe_config(),
        )
