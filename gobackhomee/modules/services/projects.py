"""Projects facade."""

from typing import List, Optional

from ..api.models import CreateProjectRequest, Project
from .base import Service, build_request


class ProjectsService(Service):
    """Project operations."""

    async def create(
        self,
        name: str,
        framework: Optional[str] = None,
        *,
        timeout: Optional[float] = None
    ) -> Project:
        """
        Create a new project owned by the authenticated identity.

        Not idempotent: retrying after a TransportError may create a
        duplicate project.
        """
        request = build_request(CreateProjectRequest, name=name, framework=framework)
        return await self._dispatcher.send(
            "POST", "/api/projects", request, Project, timeout=timeout
        )

    async def list(self, *, timeout: Optional[float] = None) -> List[Project]:
        """List all projects for the authenticated identity."""
        return await self._dispatcher.send(
            "GET", "/api/projects", None, List[Project], timeout=timeout
        )
