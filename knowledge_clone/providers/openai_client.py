"""OpenAI chat-completions client implementation."""

import logging
import time

import httpx
import openai

from knowledge_clone.core import ConversationMessage, Credentials, ServiceError
from knowledge_clone.providers.base import CompletionClient
from knowledge_clone.providers.openai_support import (
    build_openai_client,
    translate_openai_error,
    with_credentials,
)

logger = logging.getLogger(__name__)


class OpenAICompletionClient(CompletionClient):
    """Chat-completions client for OpenAI-compatible endpoints."""

    PROVIDER = "openai"

    def __init__(
        self,
        default_model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize OpenAI client.

        Args:
            default_model: Model used when a call does not name one
            base_url: Optional override for API base URL
            timeout: Request timeout in seconds
            http_client: Optional pre-configured httpx client (used by tests)
        """
        super().__init__(default_model)
        self.client = build_openai_client(base_url=base_url, timeout=timeout, http_client=http_client)

    async def complete(
        self,
        messages: list[ConversationMessage],
        max_tokens: int,
        credentials: Credentials,
        temperature: float = CompletionClient.DEFAULT_TEMPERATURE,
        model: str | None = None,
    ) -> str:
        """Send chat completion request to OpenAI."""
        model = model or self.default_model
        client = with_credentials(self.client, credentials)

        start_time = time.time()
        self._track_request()

        try:
            response = await client.chat.completions.create(
                model=model,
                messages=[msg.to_payload() for msg in messages],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.OpenAIError as e:
            raise translate_openai_error(e, self.PROVIDER) from e

        if not response.choices:
            raise ServiceError("Completion response contained no choices", provider=self.PROVIDER)

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Completion from %s: %d messages, max_tokens=%d, %dms",
            model,
            len(messages),
            max_tokens,
            latency_ms,
        )
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()
