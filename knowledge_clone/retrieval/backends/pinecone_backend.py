"""Pinecone REST backend for document vectors."""

import logging
from typing import Any

import httpx

from knowledge_clone.core import Credentials, Document
from knowledge_clone.core.http import post_json
from knowledge_clone.retrieval.base import VectorStoreClient
from knowledge_clone.retrieval.models import RetrievalResult, rank_results

logger = logging.getLogger(__name__)


class PineconeVectorStore(VectorStoreClient):
    """Vector store client speaking Pinecone's data-plane REST API.

    All vectors live in one namespace. Matches are requested with metadata so
    that the stored ``source`` and ``content`` fields can be shown as
    context.

    Args:
        base_url: Index host, e.g. ``https://my-index-abc123.svc.pinecone.io``
        namespace: Namespace isolating this application's vectors
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    DEFAULT_BASE_URL = "https://api.pinecone.io"
    NAMESPACE = "knowledge-clone"
    PROVIDER = "pinecone"

    UPSERT_PATH = "/vectors/upsert"
    QUERY_PATH = "/query"

    # Pinecone caps metadata at 40KB per vector.
    MAX_METADATA_CONTENT_CHARS = 8000

    def __init__(
        self,
        base_url: str | None = None,
        namespace: str = NAMESPACE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Pinecone client."""
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self.namespace = namespace
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def _headers(self, credentials: Credentials) -> dict[str, str]:
        return {"Api-Key": credentials.key}

    async def upsert(
        self,
        document: Document,
        embedding: list[float],
        credentials: Credentials,
    ) -> bool:
        """Upsert a document vector.

        Args:
            document: Document whose id and metadata are stored
            embedding: Vector for the document content
            credentials: Vector store key

        Returns:
            True once the store acknowledged the write
        """
        if not embedding:
            raise ValueError("Embedding is required for upsert")

        metadata = document.metadata.model_dump(exclude_none=True)
        if document.content:
            metadata["content"] = document.content[: self.MAX_METADATA_CONTENT_CHARS]

        payload: dict[str, Any] = {
            "namespace": self.namespace,
            "vectors": [
                {
                    "id": document.id,
                    "values": embedding,
                    "metadata": metadata,
                }
            ],
        }

        await post_json(
            self.client,
            self.UPSERT_PATH,
            payload,
            provider=self.PROVIDER,
            headers=self._headers(credentials),
        )
        logger.info("Upserted document %s into namespace %s", document.id, self.namespace)
        return True

    async def query(
        self,
        vector: list[float],
        top_k: int,
        credentials: Credentials,
    ) -> list[RetrievalResult]:
        """Query the namespace for the ``top_k`` nearest vectors."""
        payload = {
            "namespace": self.namespace,
            "topK": top_k,
            "vector": vector,
            "includeMetadata": True,
        }

        data = await post_json(
            self.client,
            self.QUERY_PATH,
            payload,
            provider=self.PROVIDER,
            headers=self._headers(credentials),
        )

        matches = data.get("matches") or []
        results = rank_results([RetrievalResult.from_match(match) for match in matches])
        logger.debug("Vector query returned %d matches", len(results))
        return results

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
