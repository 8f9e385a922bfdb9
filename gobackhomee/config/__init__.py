"""Client configuration."""

from .provider import ClientConfig, ConfigProvider, EnvConfigProvider, SIWEConfig, WalletAuth

__all__ = ["ClientConfig", "ConfigProvider", "EnvConfigProvider", "SIWEConfig", "WalletAuth"]
