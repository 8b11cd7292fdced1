"""Base interface for embedding clients."""

from abc import ABC, abstractmethod

from knowledge_clone.core import Credentials


class EmbeddingClient(ABC):
    """Abstract base class for embedding clients.

    Converts text into a fixed-length vector via an external service. One
    call means one outbound request; implementations do not retry.
    """

    @abstractmethod
    async def embed(self, text: str, credentials: Credentials) -> list[float]:
        """Generate an embedding for ``text``.

        Args:
            text: The text to embed.
            credentials: Key for the embedding provider.

        Returns:
            A list of floats with the model's fixed dimensionality.

        Raises:
            AuthError: If the key is rejected (401/403)
            ServiceError: On any other non-2xx response
            NetworkError: On transport failure
        """
        pass

    async def close(self) -> None:
        """Clean up resources and close connections."""
        pass
