"""Base interface for vector store clients."""

from abc import ABC, abstractmethod

from knowledge_clone.core import Credentials, Document
from knowledge_clone.retrieval.models import RetrievalResult


class VectorStoreClient(ABC):
    """Abstract base class for vector store clients.

    Implementations write to and query a single namespace of an external
    store. The store owns document lifecycle; there is no update or delete.

    Example:
        >>> store = PineconeVectorStore(base_url="https://my-index.svc.pinecone.io")
        >>> await store.upsert(document, vector, credentials)
        >>> results = await store.query(query_vector, top_k=3, credentials=credentials)
    """

    @abstractmethod
    async def upsert(
        self,
        document: Document,
        embedding: list[float],
        credentials: Credentials,
    ) -> bool:
        """Store ``embedding`` for ``document`` under its id.

        Re-upserting an id overwrites the previous entry.

        Returns:
            True once the store acknowledged the write

        Raises:
            AuthError: If the key is rejected
            ServiceError: On any other non-2xx response
            NetworkError: On transport failure
        """
        pass

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        top_k: int,
        credentials: Credentials,
    ) -> list[RetrievalResult]:
        """Return up to ``top_k`` nearest matches, highest score first.

        Raises:
            AuthError: If the key is rejected
            ServiceError: On any other non-2xx response
            NetworkError: On transport failure
        """
        pass

    async def close(self) -> None:
        """Clean up resources and close connections."""
        pass

    async def __aenter__(self) -> "VectorStoreClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.close()
