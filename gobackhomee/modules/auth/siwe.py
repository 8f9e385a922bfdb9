"""
Sign-In with Ethereum (EIP-4361) challenge messages.

The platform ties each signature to a nonce and a domain statement. Where
the server issues the nonce, pass its nonce source to the provider;
otherwise a random alphanumeric nonce is generated locally.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from ...config.provider import SIWEConfig


def default_nonce() -> str:
    """Random nonce satisfying EIP-4361 (at least 8 alphanumeric characters)."""
    return secrets.token_hex(8)


def _iso(ts: datetime) -> str:
    return ts.astimezone(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")


def build_siwe_message(
    *,
    domain: str,
    address: str,
    uri: str,
    chain_id: int,
    nonce: str,
    statement: Optional[str] = None,
    issued_at: Optional[datetime] = None,
    expiration_time: Optional[datetime] = None,
) -> str:
    """
    Render an EIP-4361 message.

    Example:
        >>> build_siwe_message(domain="example.com", address="0xabc",
        ...     uri="https://example.com", chain_id=1, nonce="12345678",
        ...     issued_at=datetime(2024, 1, 1, tzinfo=UTC)).splitlines()[0]
        'example.com wants you to sign in with your Ethereum account:'
    """
    if not nonce.isalnum() or len(nonce) < 8:
        raise ValueError("nonce must be at least 8 alphanumeric characters")

    lines = [
        f"{domain} wants you to sign in with your Ethereum account:",
        address,
        "",
    ]
    if statement:
        lines.extend([statement, ""])
    lines.extend(
        [
            f"URI: {uri}",
            "Version: 1",
            f"Chain ID: {chain_id}",
            f"Nonce: {nonce}",
            f"Issued At: {_iso(issued_at or datetime.now(UTC))}",
        ]
    )
    if expiration_time is not None:
        lines.append(f"Expiration Time: {_iso(expiration_time)}")
    return "\n".join(lines)


class SIWEChallengeProvider:
    """Builds SIWE challenges from the configured domain and statement."""

    def __init__(
        self,
        config: SIWEConfig,
        nonce_source: Callable[[], str] = default_nonce,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.config = config
        self.nonce_source = nonce_source
        self.clock = clock

    async def challenge(self, wallet_address: str) -> str:
        now = self.clock()
        return build_siwe_message(
            domain=self.config.domain,
            address=wallet_address,
            uri=self.config.uri,
            chain_id=self.config.chain_id,
            nonce=self.nonce_source(),
            statement=self.config.statement,
            issued_at=now,
            expiration_time=now + timedelta(seconds=self.config.session_ttl),
        )
