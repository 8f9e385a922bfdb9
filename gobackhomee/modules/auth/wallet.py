"""
Wallet challenge credential strategy.

Sign-in is a dedicated handshake rather than a header on every request:

1. obtain a challenge message for the wallet
2. have the external signing capability sign it
3. exchange (message, signature) at the sign-in endpoint for a session
4. present the session token as a bearer header until it nears expiry

The strategy never talks to a blockchain. Refreshes are single-flight:
concurrent callers that find the session stale wait for the one refresh
in progress instead of each asking the wallet to sign.
"""

import asyncio
import inspect
import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from ...config.provider import DEFAULT_SESSION_TTL, WalletAuth
from ...errors import AuthError, AuthFailed, AuthTimeout, AuthUnavailable
from ..api.models import SessionGrant
from .interfaces import (
    ChallengeProvider,
    CredentialMaterial,
    OutgoingRequest,
    SessionExchange,
    SignInPayload,
)

logger = logging.getLogger(__name__)


class WalletChallengeStrategy:
    """
    Credential strategy backed by a wallet signing capability.

    This is a black box that:
    - Accepts any ChallengeProvider implementation
    - Accepts sync or async signing callables
    - Caches one session per strategy instance
    """

    def __init__(
        self,
        wallet: WalletAuth,
        challenges: ChallengeProvider,
        session_ttl: float = DEFAULT_SESSION_TTL,
        refresh_margin: float = 30.0,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        """
        Initialize with injected dependencies.

        Args:
            wallet: Wallet address and signing capability
            challenges: Source of messages to sign
            session_ttl: Session lifetime when the server sends no expiry
            refresh_margin: Seconds before expiry at which a session is stale
            clock: Time source, injectable for tests
        """
        self.wallet = wallet
        self.challenges = challenges
        self.session_ttl = session_ttl
        self.refresh_margin = refresh_margin
        self.clock = clock

        self._lock = asyncio.Lock()
        self._grant: Optional[SessionGrant] = None
        self._expires_at: Optional[datetime] = None

        # Bumped after every refresh attempt; callers that queued during an
        # attempt share its outcome, including its failure
        self._generation = 0
        self._failure: Optional[Exception] = None

        # Completed handshakes, reported in the sign-in log line
        self.refresh_count = 0

    @property
    def wallet_address(self) -> str:
        return self.wallet.wallet_address

    @property
    def session(self) -> Optional[SessionGrant]:
        """Current session if it is still fresh."""
        return self._fresh_grant()

    async def prepare(
        self,
        request: OutgoingRequest,
        *,
        exchange: SessionExchange
    ) -> CredentialMaterial:
        grant = await self.ensure_session(exchange)
        return CredentialMaterial(
            headers={"Authorization": f"Bearer {grant.token}"},
            method="wallet_session",
        )

    async def ensure_session(self, exchange: SessionExchange) -> SessionGrant:
        """
        Return a fresh session, refreshing it at most once across callers.

        Callers that find the session stale while a refresh is in flight
        wait for it and receive its result. If it fails they receive the
        same error instead of asking the wallet to sign again.

        Raises:
            AuthUnavailable: No signing capability configured
            AuthFailed: Signing failed or the server issued no session token
            AuthTimeout: Signing exceeded the wallet's sign timeout
        """
        grant = self._fresh_grant()
        if grant is not None:
            return grant

        generation = self._generation
        async with self._lock:
            # Another caller may have refreshed while we waited
            grant = self._fresh_grant()
            if grant is not None:
                return grant
            if self._generation != generation and self._failure is not None:
                raise self._failure

            grant = await self._attempt(exchange)
            if not grant.token:
                self._failure = AuthFailed("Sign-in response did not include a session token")
                raise self._failure
            return grant

    async def sign_in(self, exchange: SessionExchange) -> SessionGrant:
        """Force a new handshake, replacing any cached session."""
        async with self._lock:
            return await self._attempt(exchange)

    def invalidate(self) -> None:
        """Drop the cached session; the next request signs in again."""
        self._grant = None
        self._expires_at = None

    async def sign_challenge(self) -> SignInPayload:
        """
        Obtain a challenge and sign it with the wallet.

        Returns:
            SignInPayload for the sign-in endpoint
        """
        if self.wallet.sign_message is None:
            raise AuthUnavailable(
                f"No signing capability configured for wallet {self.wallet_address}"
            )

        message = await self.challenges.challenge(self.wallet_address)

        try:
            signature = await asyncio.wait_for(
                self._invoke_signer(message), timeout=self.wallet.sign_timeout
            )
        except TimeoutError:
            raise AuthTimeout(
                f"Wallet {self.wallet_address} did not sign within {self.wallet.sign_timeout}s"
            ) from None
        except AuthError:
            raise
        except Exception as e:
            raise AuthFailed(f"Wallet signing failed: {e}") from e

        if not isinstance(signature, str) or not signature.strip():
            raise AuthFailed("Wallet returned an empty signature")

        return SignInPayload(message=message, signature=signature.strip())

    async def _invoke_signer(self, message: str) -> str:
        sign = self.wallet.sign_message
        if inspect.iscoroutinefunction(sign):
            return await sign(message)

        # Blocking signers (hardware wallets, RPC prompts) run off the loop
        result = await asyncio.to_thread(sign, message)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def _attempt(self, exchange: SessionExchange) -> SessionGrant:
        # Caller holds self._lock
        self._failure = None
        try:
            return await self._refresh(exchange)
        except Exception as e:
            # Cancellation is not recorded: queued callers then try themselves
            self._failure = e
            raise
        finally:
            self._generation += 1

    async def _refresh(self, exchange: SessionExchange) -> SessionGrant:
        payload = await self.sign_challenge()
        grant = await exchange(payload)
        self.refresh_count += 1

        expires_at = grant.expires_at
        if expires_at is None:
            expires_at = self.clock() + timedelta(seconds=self.session_ttl)
        elif expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)

        if grant.token:
            self._grant = grant
            self._expires_at = expires_at
        else:
            self.invalidate()

        logger.info(
            f"Wallet {self.wallet_address} signed in as identity {grant.identity.id} "
            f"(handshake {self.refresh_count}, session expires {expires_at.isoformat()})"
        )
        return grant

    def _fresh_grant(self) -> Optional[SessionGrant]:
        if self._grant is None or self._expires_at is None:
            return None
        if self.clock() >= self._expires_at - timedelta(seconds=self.refresh_margin):
            return None
        return self._grant
