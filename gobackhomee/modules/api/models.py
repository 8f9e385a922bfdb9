"""
Gobackhomee shared data models.

These models define the wire shapes exchanged with the platform. Entities
are read-mostly projections owned by the server, so they are frozen on the
client side.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Enums


class DeploymentStatus(str, Enum):
    """Lifecycle of a deployment."""

    PENDING = "pending"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (DeploymentStatus.READY, DeploymentStatus.FAILED)


# Entities (API output)


class Identity(BaseModel):
    """Wallet-rooted principal."""

    model_config = ConfigDict(frozen=True)

    id: str
    wallet_address: str
    chain: str
    public_key: Optional[str] = None
    email: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v):
        """Servers omit or null out empty metadata."""
        return {} if v is None else v


class User(Identity):
    """Identity with application-level profile data."""

    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    active: bool = True


class Project(BaseModel):
    """Named deployment container owned by one identity."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    owner_id: str
    domains: List[str] = Field(default_factory=list)
    current_version: Optional[str] = None
    framework: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("domains", mode="before")
    @classmethod
    def default_domains(cls, v):
        return [] if v is None else v


class Deployment(BaseModel):
    """One immutable, versioned artifact set of a project."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    version: str
    hash: str
    status: str  # raw wire value, interpret with lifecycle_status()
    url: Optional[str] = None
    created_at: Optional[datetime] = None
    ready_at: Optional[datetime] = None

    def lifecycle_status(self) -> DeploymentStatus:
        """Interpret the raw status, raising UnknownStatus for foreign values."""
        from ..deployment.status import parse_status

        return parse_status(self.status)


class SessionGrant(BaseModel):
    """Result of a wallet sign-in handshake."""

    model_config = ConfigDict(frozen=True)

    identity: Identity
    token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_response(cls, body: Any) -> "SessionGrant":
        """
        Build a grant from a sign-in response.

        The server may answer with a bare Identity or with an envelope of
        the form {"identity": {...}, "token": "...", "expires_at": "..."}.
        """
        if not isinstance(body, dict):
            return cls.model_validate(body)  # let pydantic report the shape error
        if "identity" in body:
            return cls.model_validate(body)
        return cls.model_validate(
            {
                "identity": body,
                "token": body.get("token") or body.get("session_token"),
                "expires_at": body.get("expires_at"),
            }
        )


# Request Models (API input)


class SignInRequest(BaseModel):
    """SIWE sign-in payload."""

    message: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class CreateProjectRequest(BaseModel):
    """Request to create a project."""

    name: str = Field(..., min_length=1, max_length=100)
    framework: Optional[str] = Field(None, description="react, vue, static, ...")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class SchemaRequest(BaseModel):
    """Natural-language schema generation request."""

    description: str = Field(..., min_length=1)


class EmbedRequest(BaseModel):
    """Embedding request."""

    text: str = Field(..., min_length=1)


# Response Models (API output)


class SchemaResponse(BaseModel):
    """Generated schema."""

    model_config = ConfigDict(populate_by_name=True)

    schema_: str = Field(..., alias="schema")


class EmbeddingResponse(BaseModel):
    """Embedding vector."""

    embedding: List[float]
