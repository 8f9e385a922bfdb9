"""AI facade. The provider behind these endpoints is opaque to the SDK."""

from typing import List, Optional

from ..api.models import EmbeddingResponse, EmbedRequest, SchemaRequest, SchemaResponse
from .base import Service, build_request


class AIService(Service):
    """AI operations."""

    async def generate_schema(self, description: str, *, timeout: Optional[float] = None) -> str:
        """Generate a schema from a natural-language description."""
        request = build_request(SchemaRequest, description=description)
        result = await self._dispatcher.send(
            "POST", "/api/ai/schema", request, SchemaResponse, timeout=timeout
        )
        return result.schema_

    async def embed(self, text: str, *, timeout: Optional[float] = None) -> List[float]:
        """Generate an embedding vector for text (for RAG applications)."""
        request = build_request(EmbedRequest, text=text)
        result = await self._dispatcher.send(
            "POST", "/api/ai/embed", request, EmbeddingResponse, timeout=timeout
        )
        return result.embedding
