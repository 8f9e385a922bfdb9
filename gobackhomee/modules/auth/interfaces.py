"""Credential interfaces following Black Box Design principles."""
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Optional, Protocol

from ..api.models import SessionGrant


@dataclass(frozen=True)
class OutgoingRequest:
    """Description of a request about to be sent."""
    method: str
    path: str
    body: Optional[bytes] = None


@dataclass(frozen=True)
class CredentialMaterial:
    """Headers a strategy wants attached to one request."""
    headers: Dict[str, str] = field(default_factory=dict)
    method: Optional[str] = None  # "api_key", "wallet_session" or None


@dataclass(frozen=True)
class SignInPayload:
    """A signed SIWE challenge, ready for the sign-in handshake."""
    message: str
    signature: str


# Sends a SignInPayload to the sign-in endpoint and returns the grant
SessionExchange = Callable[[SignInPayload], Awaitable[SessionGrant]]


class CredentialStrategy(Protocol):
    """Protocol for credential strategies - allows swappable implementations."""

    async def prepare(
        self,
        request: OutgoingRequest,
        *,
        exchange: SessionExchange
    ) -> CredentialMaterial:
        """
        Produce credential material for one request.

        Args:
            request: The request about to be sent
            exchange: Handshake sender, used by strategies that need a session

        Returns:
            CredentialMaterial with headers to attach

        Raises:
            AuthUnavailable, AuthFailed, AuthTimeout
        """
        ...


class ChallengeProvider(Protocol):
    """Protocol for obtaining the message a wallet must sign."""

    async def challenge(self, wallet_address: str) -> str:
        """
        Get a challenge message for a wallet.

        Args:
            wallet_address: Address that will sign

        Returns:
            Message to sign
        """
        ...


class SignatureVerifier(Protocol):
    """
    Protocol for the external signature primitive.

    Signature verification belongs to a cryptographic library; the SDK
    only names the contract so servers and test doubles can share it.
    """

    def verify(self, address: str, message: str, signature: str) -> bool:
        ...
