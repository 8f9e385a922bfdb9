"""
Static credential strategies.

These strategies hold no mutable state and never touch the network.
"""

from typing import Optional

from ...errors import AuthUnavailable
from .interfaces import CredentialMaterial, OutgoingRequest, SessionExchange


class StaticTokenStrategy:
    """Presents the same bearer token on every request."""

    def __init__(self, token: Optional[str]):
        """
        Initialize with an API token.

        Args:
            token: Opaque API token (may include a "Bearer " prefix)
        """
        if token and token.startswith("Bearer "):
            token = token[7:]
        self._token = token.strip() if token else None

    async def prepare(
        self,
        request: OutgoingRequest,
        *,
        exchange: SessionExchange
    ) -> CredentialMaterial:
        if not self._token:
            raise AuthUnavailable("No API token configured")
        return CredentialMaterial(
            headers={"Authorization": f"Bearer {self._token}"},
            method="api_key",
        )

    def __repr__(self) -> str:
        return f"StaticTokenStrategy(token={'***' if self._token else None})"


class NoCredentialStrategy:
    """Strategy used when nothing is configured: every request is refused."""

    async def prepare(
        self,
        request: OutgoingRequest,
        *,
        exchange: SessionExchange
    ) -> CredentialMaterial:
        raise AuthUnavailable(
            f"No credentials configured for {request.method} {request.path}; "
            "configure an API key or a wallet signing capability"
        )
