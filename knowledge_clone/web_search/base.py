"""Base interface for secondary (web) context retrievers."""

from abc import ABC, abstractmethod


class Retriever(ABC):
    """Produces supplementary context text for a prompt.

    Callers must not invoke a retriever whose configured weight is zero.
    """

    name: str = "retriever"

    @abstractmethod
    async def search(self, query: str) -> str:
        """Return context text for ``query``, possibly empty.

        Raises:
            AuthError: If the search provider rejects the key
            ServiceError: On any other non-2xx response
            NetworkError: On transport failure
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass
