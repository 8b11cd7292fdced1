"""Abstract completion client interface."""

from abc import ABC, abstractmethod

from knowledge_clone.core import ConversationMessage, Credentials


class CompletionClient(ABC):
    """Abstract base class for chat-completion clients."""

    DEFAULT_TEMPERATURE = 0.7

    def __init__(self, default_model: str) -> None:
        """Initialize client.

        Args:
            default_model: Model used when a call does not name one
        """
        self.default_model = default_model
        self._request_count: int = 0

    @abstractmethod
    async def complete(
        self,
        messages: list[ConversationMessage],
        max_tokens: int,
        credentials: Credentials,
        temperature: float = DEFAULT_TEMPERATURE,
        model: str | None = None,
    ) -> str:
        """Send a single non-streaming completion request.

        Args:
            messages: Conversation messages, system message first
            max_tokens: Generation token budget
            credentials: Key for the completion provider
            temperature: Sampling temperature
            model: Model to use (overrides default)

        Returns:
            The assistant message text

        Raises:
            AuthError: If the key is rejected (401/403)
            ServiceError: On any other non-2xx response
            NetworkError: On transport failure
        """
        pass

    def get_request_count(self) -> int:
        """Get total number of requests made."""
        return self._request_count

    async def close(self) -> None:
        """Clean up resources and close connections."""
        pass

    def reset_metrics(self) -> None:
        self._request_count = 0

    def _track_request(self) -> None:
        self._request_count += 1
