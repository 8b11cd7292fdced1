"""OpenAI implementation of EmbeddingClient."""

import logging

import httpx
import openai

from knowledge_clone.core import Credentials, ServiceError
from knowledge_clone.embeddings.base import EmbeddingClient
from knowledge_clone.providers.openai_support import (
    build_openai_client,
    translate_openai_error,
    with_credentials,
)

logger = logging.getLogger(__name__)


class OpenAIEmbeddingClient(EmbeddingClient):
    """OpenAI-based embedding client.

    Uses the standard embeddings API (``POST /embeddings`` with
    ``{model, input}``). The key is supplied per call.
    """

    PROVIDER = "openai-embeddings"

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        base_url: str | None = None,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI embedding client.

        Args:
            model: Embedding model to use. Default: text-embedding-ada-002.
            base_url: Optional override for API base URL.
            timeout: Request timeout in seconds.
            http_client: Optional pre-configured httpx client (used by tests).
        """
        self.model = model
        self.client = build_openai_client(base_url=base_url, timeout=timeout, http_client=http_client)
        self._request_count = 0

    async def embed(self, text: str, credentials: Credentials) -> list[float]:
        """Generate embedding for ``text``."""
        client = with_credentials(self.client, credentials)
        self._request_count += 1

        try:
            response = await client.embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float",
            )
        except openai.OpenAIError as e:
            raise translate_openai_error(e, self.PROVIDER) from e

        if not response.data:
            raise ServiceError("Embedding response contained no data", provider=self.PROVIDER)

        vector = list(response.data[0].embedding)
        logger.debug("Embedded %d chars into %d dimensions", len(text), len(vector))
        return vector

    def get_request_count(self) -> int:
        return self._request_count

    async def close(self) -> None:
        await self.client.close()
