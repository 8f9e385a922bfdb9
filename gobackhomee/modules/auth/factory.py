"""
Credential Factory following Black Box Design principles.

This factory:
- Chooses the credential strategy from configuration
- Wires dependencies together
- Returns only the strategy interface (hiding implementation)
"""

import logging
from typing import Optional

from ...config.provider import ClientConfig
from .interfaces import ChallengeProvider, CredentialStrategy
from .siwe import SIWEChallengeProvider
from .static import NoCredentialStrategy, StaticTokenStrategy
from .wallet import WalletChallengeStrategy

logger = logging.getLogger(__name__)


class CredentialFactory:
    """
    Factory for building the credential strategy.

    Exactly one strategy is active per client. API key and wallet are
    mutually exclusive (enforced by ClientConfig), so there is never a
    fallback from one to the other.
    """

    @staticmethod
    def build(
        config: ClientConfig,
        challenges: Optional[ChallengeProvider] = None
    ) -> CredentialStrategy:
        """
        Build the credential strategy for a client.

        Args:
            config: Client configuration
            challenges: Optional challenge provider (defaults to local SIWE messages)

        Returns:
            CredentialStrategy implementation
        """
        if config.api_key:
            logger.debug("Using static API token credentials")
            return StaticTokenStrategy(config.api_key)

        if config.wallet is not None:
            logger.debug(f"Using wallet credentials for {config.wallet.wallet_address}")
            return WalletChallengeStrategy(
                wallet=config.wallet,
                challenges=challenges or SIWEChallengeProvider(config.siwe),
                session_ttl=config.siwe.session_ttl,
            )

        logger.debug("No credentials configured; authenticated requests will be refused")
        return NoCredentialStrategy()
