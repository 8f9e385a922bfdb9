"""Authentication facade (Web3-native)."""

import asyncio
from typing import Optional

from ...errors import AuthTimeout, AuthUnavailable, TransportError
from ..api.models import Identity, SignInRequest
from ..auth.interfaces import SignInPayload
from ..auth.wallet import WalletChallengeStrategy
from ..dispatch.dispatcher import SIGN_IN_PATH
from .base import Service, build_request


class AuthService(Service):
    """Sign-in operations."""

    async def sign_in_with_ethereum(
        self,
        message: str,
        signature: str,
        *,
        timeout: Optional[float] = None
    ) -> Identity:
        """
        Exchange an already-signed SIWE message for the signer's identity.

        Args:
            message: EIP-4361 message that was signed
            signature: Wallet signature over the message
            timeout: Optional deadline in seconds

        Returns:
            Identity of the signer
        """
        request = build_request(SignInRequest, message=message, signature=signature)
        grant = await self._dispatcher.sign_in(
            SignInPayload(message=request.message, signature=request.signature),
            timeout=timeout,
        )
        return grant.identity

    async def sign_in(self, *, timeout: Optional[float] = None) -> Identity:
        """
        Sign in with the configured wallet.

        Asks the wallet to sign a fresh challenge and performs the handshake,
        replacing any cached session. If signing fails nothing is sent.

        Args:
            timeout: Deadline in seconds for the whole sign-in, signing included

        Raises:
            AuthUnavailable: The client is not configured with a wallet
            AuthFailed: The wallet refused or failed to sign
            AuthTimeout: Signing did not finish in time
            TransportError: The handshake request did not finish in time
        """
        strategy = self._dispatcher.credentials
        if not isinstance(strategy, WalletChallengeStrategy):
            raise AuthUnavailable("sign_in requires a client configured with a wallet")

        stage = "signing"

        async def exchange(payload: SignInPayload):
            nonlocal stage
            stage = "network"
            return await self._dispatcher.sign_in(payload)

        try:
            async with asyncio.timeout(timeout):
                grant = await strategy.sign_in(exchange)
        except TimeoutError:
            if stage == "signing":
                raise AuthTimeout(f"Wallet sign-in not completed within {timeout}s") from None
            raise TransportError(f"POST {SIGN_IN_PATH} exceeded deadline of {timeout}s") from None
        return grant.identity
