"""
Request dispatcher.

One call to send() is one HTTP attempt:

1. encode the body as canonical JSON (fails before any I/O)
2. attach credential headers from the active strategy
3. send exactly once, no retries
4. decode the response into the caller's expected type

Errors are reported by kind: EncodingError, credential errors,
TransportError, RemoteError, DecodeError.
"""

import asyncio
import json
import logging
import math
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ...config.provider import ClientConfig
from ...errors import (
    AuthTimeout,
    DecodeError,
    EncodingError,
    RemoteError,
    TransportError,
)
from ..api.models import SessionGrant, SignInRequest
from ..auth.interfaces import CredentialStrategy, OutgoingRequest, SignInPayload

logger = logging.getLogger(__name__)

SIGN_IN_PATH = "/api/auth/siwe"


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("non-finite numbers are not representable in JSON")
    return value


def encode_body(body: Any) -> Optional[bytes]:
    """
    Encode a request body as canonical JSON.

    Keys are sorted, separators compact and NaN/Infinity rejected, so equal
    bodies always produce equal bytes.

    Raises:
        EncodingError: If the body is not representable as JSON
    """
    if body is None:
        return None
    try:
        payload = json.dumps(
            _to_jsonable(body),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Request body is not JSON-representable: {e}") from e
    return payload.encode("utf-8")


def _remote_error(response: httpx.Response) -> RemoteError:
    message = response.reason_phrase or f"HTTP {response.status_code}"
    code = None
    details = None
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        raw_error = data.get("error")
        if isinstance(raw_error, dict):
            message = raw_error.get("message", message)
            code = raw_error.get("code")
            details = raw_error.get("details")
        elif isinstance(raw_error, str):
            message = raw_error
        if isinstance(data.get("message"), str):
            message = data["message"]
        code = code or data.get("code")
        details = details if details is not None else data.get("details")

    return RemoteError(
        status=response.status_code,
        message=message,
        code=code,
        details=details,
        request_id=response.headers.get("x-request-id"),
    )


class Dispatcher:
    """
    Builds, authenticates and sends single requests.

    Holds no mutable state across calls besides the shared httpx client;
    configuration is captured once at construction.
    """

    def __init__(
        self,
        config: ClientConfig,
        credentials: CredentialStrategy,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            config: Immutable client configuration
            credentials: Active credential strategy
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.config = config
        self.credentials = credentials
        self._http = httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout,
            transport=transport,
            headers={
                "Accept": "application/json",
                "User-Agent": config.user_agent,
            },
        )

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        response_type: Any = None,
        *,
        authenticate: bool = True,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Send one request and decode its response.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: dict or pydantic model, encoded as canonical JSON
            response_type: Type to decode into (pydantic model, List[...], ...);
                None returns the parsed JSON as-is
            authenticate: Attach credentials from the active strategy
            timeout: Caller deadline in seconds for the whole call

        Returns:
            Decoded response

        Raises:
            EncodingError, AuthUnavailable, AuthFailed, AuthTimeout,
            TransportError, RemoteError, DecodeError
        """
        method = method.upper()
        content = encode_body(body)
        request = OutgoingRequest(method=method, path=path, body=content)

        stage = "credentials"
        try:
            async with asyncio.timeout(timeout):
                headers: Dict[str, str] = {}
                if content is not None:
                    headers["Content-Type"] = "application/json"
                if authenticate:
                    material = await self.credentials.prepare(request, exchange=self._exchange_session)
                    headers.update(material.headers)

                stage = "network"
                response = await self._transmit(request, headers)
        except TimeoutError:
            if stage == "credentials":
                raise AuthTimeout(
                    f"Credentials for {method} {path} not ready within {timeout}s"
                ) from None
            raise TransportError(f"{method} {path} exceeded deadline of {timeout}s") from None

        return self._decode(request, response, response_type)

    async def _transmit(self, request: OutgoingRequest, headers: Dict[str, str]) -> httpx.Response:
        logger.debug(f"{request.method} {request.path}")
        try:
            return await self._http.request(
                request.method,
                request.path,
                content=request.body,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"{request.method} {request.path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{request.method} {request.path} failed: {e}") from e

    def _decode(self, request: OutgoingRequest, response: httpx.Response, response_type: Any) -> Any:
        if not response.is_success:
            error = _remote_error(response)
            logger.warning(
                f"{request.method} {request.path} -> {error.status}: {error.message}"
            )
            raise error

        if response.status_code == 204 or not response.content:
            data = None
        else:
            try:
                data = response.json()
            except ValueError as e:
                raise DecodeError(
                    f"{request.method} {request.path} returned invalid JSON: {e}"
                ) from e

        if response_type is None:
            return data

        try:
            return TypeAdapter(response_type).validate_python(data)
        except ValidationError as e:
            raise DecodeError(
                f"{request.method} {request.path} returned unexpected shape: {e}"
            ) from e

    async def sign_in(self, payload: SignInPayload, *, timeout: Optional[float] = None) -> SessionGrant:
        """
        Perform the SIWE handshake. Never carries credentials itself.
        """
        body = SignInRequest(message=payload.message, signature=payload.signature)
        data = await self.send("POST", SIGN_IN_PATH, body, authenticate=False, timeout=timeout)
        try:
            return SessionGrant.from_response(data)
        except ValidationError as e:
            raise DecodeError(f"POST {SIGN_IN_PATH} returned unexpected shape: {e}") from e

    async def _exchange_session(self, payload: SignInPayload) -> SessionGrant:
        return await self.sign_in(payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()
