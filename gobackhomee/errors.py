"""
Error taxonomy for the Gobackhomee SDK.

Every failure surfaces to the caller as a subclass of GobackhomeeError.
The SDK never retries and never falls back between credential strategies;
callers decide retry policy because only they know whether an operation
is idempotent.
"""

from typing import Any, Dict, Optional


class GobackhomeeError(Exception):
    """Base class for all SDK errors."""

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "message": str(self)}


class ConfigurationError(GobackhomeeError, ValueError):
    """Client configuration is inconsistent or incomplete."""


class InvalidArgument(GobackhomeeError, ValueError):
    """A caller-supplied argument was rejected before any request was made."""


class EncodingError(GobackhomeeError):
    """Request body could not be encoded. Nothing was sent."""


# Credential layer


class AuthError(GobackhomeeError):
    """Base class for credential failures."""


class AuthUnavailable(AuthError):
    """Required credential material (token or signing capability) is missing."""


class AuthFailed(AuthError):
    """The signing capability or the sign-in handshake failed."""


class AuthTimeout(AuthError):
    """Credential preparation exceeded its deadline."""


# Transport and server


class TransportError(GobackhomeeError):
    """Network or connection failure, including request timeouts."""


class RemoteError(GobackhomeeError):
    """The server answered with a non-success status."""

    def __init__(
        self,
        *,
        status: int,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.code = code
        self.details = details
        self.request_id = request_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "request_id": self.request_id,
        }


class DecodeError(GobackhomeeError):
    """Response body did not match the expected shape."""


# Content addressing


class InvalidArtifactPath(GobackhomeeError, ValueError):
    """An artifact path cannot be canonicalized."""


class IntegrityMismatch(GobackhomeeError):
    """Recomputed digest differs from the published one."""

    def __init__(self, expected: str, actual: str, path: Optional[str] = None) -> None:
        target = f" for {path}" if path else ""
        super().__init__(f"Integrity mismatch{target}: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "expected": self.expected,
            "actual": self.actual,
            "path": self.path,
        }


# Deployment lifecycle


class UnknownStatus(GobackhomeeError):
    """A deployment reported a status outside the known lifecycle."""

    def __init__(self, status: Any) -> None:
        super().__init__(f"Unknown deployment status: {status!r}")
        self.status = status


class InvalidStatusTransition(GobackhomeeError):
    """A deployment was observed moving backwards in its lifecycle."""

    def __init__(self, deployment_id: str, previous: str, current: str) -> None:
        super().__init__(
            f"Deployment {deployment_id} moved from {previous} to {current}"
        )
        self.deployment_id = deployment_id
        self.previous = previous
        self.current = current


class DeploymentPollTimeout(GobackhomeeError):
    """Polling gave up before the deployment reached a terminal status."""

    def __init__(self, attempts: int, last_status: Optional[str]) -> None:
        super().__init__(
            f"Deployment not terminal after {attempts} attempts (last status: {last_status})"
        )
        self.attempts = attempts
        self.last_status = last_status
