"""
Gobackhomee client - composition root.

Wires configuration, the credential strategy, the dispatcher and the
service facades together and exposes only the facades.

Usage::

    async with GobackhomeeClient(ClientConfig(base_url=url, api_key=key)) as client:
        projects = await client.projects.list()
"""

import logging
from typing import Optional

import httpx

from .config.provider import ClientConfig, ConfigProvider, EnvConfigProvider, WalletAuth
from .errors import ConfigurationError
from .modules.auth.factory import CredentialFactory
from .modules.auth.interfaces import ChallengeProvider, CredentialStrategy
from .modules.dispatch.dispatcher import Dispatcher
from .modules.services import AIService, AuthService, ProjectsService

logger = logging.getLogger(__name__)


class GobackhomeeClient:
    """
    Async client for the Gobackhomee platform.

    Safe for concurrent use by many coroutines: configuration is frozen,
    and the only shared mutable state is the wallet session cache, which
    serializes its own refreshes.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        credentials: Optional[CredentialStrategy] = None,
        challenges: Optional[ChallengeProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            config: Immutable client configuration
            credentials: Explicit credential strategy (overrides config credentials)
            challenges: Challenge provider for wallet sign-in
            transport: Optional httpx transport
        """
        self.config = config
        self.credentials = credentials or CredentialFactory.build(config, challenges)
        self._dispatcher = Dispatcher(config, self.credentials, transport=transport)

        self.auth = AuthService(self._dispatcher)
        self.projects = ProjectsService(self._dispatcher)
        self.ai = AIService(self._dispatcher)

        logger.debug(f"Client for {config.base_url} using {type(self.credentials).__name__}")

    @classmethod
    def from_env(
        cls,
        wallet: Optional[WalletAuth] = None,
        provider: Optional[ConfigProvider] = None,
        **kwargs
    ) -> "GobackhomeeClient":
        """
        Build a client from GOBACKHOMEE_* environment variables.

        A custom provider owns the whole configuration, wallet included, so
        passing both wallet and provider is rejected.
        """
        if provider is not None and wallet is not None:
            raise ConfigurationError(
                "Pass the wallet to the config provider, not alongside it"
            )
        provider = provider or EnvConfigProvider(wallet=wallet)
        return cls(provider.get_client_config(), **kwargs)

    async def aclose(self) -> None:
        await self._dispatcher.aclose()

    async def __aenter__(self) -> "GobackhomeeClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
