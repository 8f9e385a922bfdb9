"""
Service Facades - one typed method per endpoint.

Each method validates its arguments locally and performs exactly one
dispatcher call. Composite workflows belong to the caller.
"""

from .ai import AIService
from .auth import AuthService
from .projects import ProjectsService

__all__ = ["AIService", "AuthService", "ProjectsService"]
