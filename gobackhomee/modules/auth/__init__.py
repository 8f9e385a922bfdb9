"""
Credential Module - Black Box Interface

Purpose: Produce authentication material for outgoing requests
Interface: CredentialStrategy.prepare(), CredentialFactory.build()
Hidden: Session caching, challenge signing, refresh serialization

Strategies can be swapped without affecting request dispatch.
"""

from .factory import CredentialFactory
from .interfaces import (
    ChallengeProvider,
    CredentialMaterial,
    CredentialStrategy,
    OutgoingRequest,
    SignatureVerifier,
    SignInPayload,
)
from .siwe import SIWEChallengeProvider, build_siwe_message
from .static import NoCredentialStrategy, StaticTokenStrategy
from .wallet import WalletChallengeStrategy

__all__ = [
    "ChallengeProvider",
    "CredentialFactory",
    "CredentialMaterial",
    "CredentialStrategy",
    "NoCredentialStrategy",
    "OutgoingRequest",
    "SIWEChallengeProvider",
    "SignatureVerifier",
    "SignInPayload",
    "StaticTokenStrategy",
    "WalletChallengeStrategy",
    "build_siwe_message",
]
