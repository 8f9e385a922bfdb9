"""
API Models - wire shapes for requests and responses.
"""

from .models import (
    CreateProjectRequest,
    Deployment,
    DeploymentStatus,
    EmbeddingResponse,
    EmbedRequest,
    Identity,
    Project,
    SchemaRequest,
    SchemaResponse,
    SessionGrant,
    SignInRequest,
    User,
)

__all__ = [
    "CreateProjectRequest",
    "Deployment",
    "DeploymentStatus",
    "EmbeddingResponse",
    "EmbedRequest",
    "Identity",
    "Project",
    "SchemaRequest",
    "SchemaResponse",
    "SessionGrant",
    "SignInRequest",
    "User",
]
