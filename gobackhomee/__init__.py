"""
Gobackhomee - Python SDK for the Gobackhomee platform

Wallet-first identity, project deployments and AI inference behind a
single async client.

Architecture:
- Each module is self-contained with clear interfaces
- Credential strategies are swappable without touching request dispatch
- Deployment digests are verifiable without trusting the server

Modules:
- auth: Credential strategies (static token, wallet challenge)
- dispatch: Request encoding, transport and response decoding
- services: Per-domain facades (auth, projects, ai)
- content: Content-addressed deployment digests
- deployment: Deployment status observation
"""

from .client import GobackhomeeClient
from .config.provider import ClientConfig, SIWEConfig, WalletAuth

__version__ = "1.0.0"

__all__ = ["GobackhomeeClient", "ClientConfig", "SIWEConfig", "WalletAuth"]
