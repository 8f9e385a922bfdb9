"""
Shared pytest fixtures for Gobackhomee tests.

This module provides:
- PlatformStub: an in-process stand-in for the platform API, served via
  httpx.MockTransport, that records every request it receives
- Client builders for API key, wallet and credential-less configurations
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio

from gobackhomee import ClientConfig, GobackhomeeClient, WalletAuth

BASE_URL = "https://api.gobackhomee.test"
WALLET = "0x52908400098527886E0F7030069857D2E4169EE7"


# =============================================================================
# Platform stub
# =============================================================================

@dataclass
class RecordedRequest:
    """Record of a request received by the stub."""
    method: str
    path: str
    headers: Dict[str, str]
    body: Optional[Any]
    raw: bytes = b""


def identity_payload(**overrides) -> Dict[str, Any]:
    """A server-side Identity as JSON."""
    payload = {
        "id": "id-1",
        "wallet_address": WALLET,
        "chain": "ethereum",
        "email": None,
        "metadata": {"plan": "free"},
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


def project_payload(**overrides) -> Dict[str, Any]:
    """A server-side Project as JSON."""
    payload = {
        "id": "proj-1",
        "name": "site",
        "owner_id": "id-1",
        "domains": ["site.example"],
        "current_version": None,
        "framework": "static",
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


class PlatformStub:
    """
    Route table plus call history, usable as an httpx.MockTransport handler.

    Usage:
        def test_list(platform, api_key_client):
            platform.route("GET", "/api/projects", json=[...])
            await api_key_client.projects.list()
            assert platform.calls_to("GET", "/api/projects") == 1
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self._routes: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.session_counter = 0

    def route(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> "PlatformStub":
        """Register a canned response (or a custom handler) for a route."""
        if handler is None:
            def handler(request, status=status, body=json, content=content, headers=headers):
                if content is not None:
                    return httpx.Response(status, content=content, headers=headers)
                return httpx.Response(status, json=body, headers=headers)
        self._routes[(method.upper(), path)] = handler
        return self

    def route_sign_in(self, *, expires_in: Optional[float] = 3600, token: bool = True) -> "PlatformStub":
        """Sign-in endpoint issuing a new session token per handshake."""
        def handler(request: httpx.Request) -> httpx.Response:
            self.session_counter += 1
            body = identity_payload()
            if token:
                body["token"] = f"session-{self.session_counter}"
            if expires_in is not None:
                expires = datetime.now(UTC) + timedelta(seconds=expires_in)
                body["expires_at"] = expires.isoformat()
            return httpx.Response(200, json=body)

        return self.route("POST", "/api/auth/siwe", handler=handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        raw = request.content
        try:
            body = json.loads(raw) if raw else None
        except ValueError:
            body = None
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path,
                headers=dict(request.headers),
                body=body,
                raw=raw,
            )
        )
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def calls_to(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.path == path)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def platform():
    """Fresh platform stub per test."""
    return PlatformStub()


@pytest_asyncio.fixture
async def api_key_client(platform):
    """Client authenticated with a static API key."""
    client = GobackhomeeClient(
        ClientConfig(base_url=BASE_URL, api_key="test-api-key"),
        transport=platform.transport(),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def anonymous_client(platform):
    """Client with no credentials at all."""
    client = GobackhomeeClient(ClientConfig(base_url=BASE_URL), transport=platform.transport())
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def make_wallet_client(platform):
    """Factory for wallet clients with a given signing capability."""
    clients: List[GobackhomeeClient] = []

    def factory(sign_message, sign_timeout: Optional[float] = 5.0) -> GobackhomeeClient:
        client = GobackhomeeClient(
            ClientConfig(
                base_url=BASE_URL,
                wallet=WalletAuth(
                    wallet_address=WALLET,
                    sign_message=sign_message,
                    sign_timeout=sign_timeout,
                ),
            ),
            transport=platform.transport(),
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
