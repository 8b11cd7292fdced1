"""Retrieval-augmented response composition.

One call to :meth:`ResponseComposer.respond` is one chat turn:

1. vector context (embed the prompt, query the store) when the vector weight is above 0
2. web context from the configured retriever when the web weight is above 0
3. token budget from the preferred answer length
4. a single system message carrying the base instruction and any context
5. ``[system, *history, user prompt]``
6. one completion call

Retrieval failures only degrade the answer; completion failures are raised.
"""

import asyncio
import logging
import math
from collections.abc import Sequence

from knowledge_clone.core import (
    ComposedResponse,
    ConversationMessage,
    MessageRole,
    ProviderName,
    RetryPolicy,
    TurnContext,
)
from knowledge_clone.embeddings.base import EmbeddingClient
from knowledge_clone.providers.base import CompletionClient
from knowledge_clone.retrieval.base import VectorStoreClient
from knowledge_clone.retrieval.models import format_context
from knowledge_clone.web_search.factory import WebRetrieverFactory

logger = logging.getLogger(__name__)

# Generation tokens requested per desired word of output. A calibration
# constant, not a property of any tokenizer.
TOKENS_PER_WORD = 1.5

HISTORY_WINDOW = 5

BASE_SYSTEM_PROMPT = "You are a helpful assistant with access to the user's knowledge database."
VECTOR_CONTEXT_LABEL = " Here is relevant information from the user's knowledge database:\n\n"
WEB_CONTEXT_LABEL = "\n\nAdditional information from web search:\n\n"

VECTOR_WARNING = "Could not search your knowledge database. This answer does not use your uploaded data."
WEB_WARNING = "Web search is unavailable. This answer does not include web results."


def estimate_max_tokens(result_length: int, tokens_per_word: float = TOKENS_PER_WORD) -> int:
    """Token budget for an answer of ``result_length`` words, rounded half up."""
    return int(math.floor(result_length * tokens_per_word + 0.5))


def build_system_message(vector_context: str = "", web_context: str = "") -> ConversationMessage:
    content = BASE_SYSTEM_PROMPT
    if vector_context:
        content += VECTOR_CONTEXT_LABEL + vector_context
    if web_context:
        content += WEB_CONTEXT_LABEL + web_context
    return ConversationMessage(role=MessageRole.SYSTEM, content=content)


def trim_history(
    history: Sequence[ConversationMessage],
    window: int = HISTORY_WINDOW,
) -> list[ConversationMessage]:
    """Keep the last ``window`` user/assistant messages.

    System messages are dropped; the composer supplies its own.
    """
    dialogue = [msg for msg in history if msg.role != MessageRole.SYSTEM]
    return dialogue[-window:] if window > 0 else []


class ResponseComposer:
    """Builds the model request for a turn and returns the raw answer."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_store: VectorStoreClient,
        completion_client: CompletionClient,
        web_retrievers: WebRetrieverFactory | None = None,
        retry_policy: RetryPolicy | None = None,
        tokens_per_word: float = TOKENS_PER_WORD,
        history_window: int = HISTORY_WINDOW,
        model: str | None = None,
    ) -> None:
        """Initialize composer.

        Args:
            embedding_client: Turns the prompt into a query vector
            vector_store: Source of knowledge-database context
            completion_client: Produces the final answer
            web_retrievers: Chooses the web retriever for each turn (stub by default)
            retry_policy: Applied to every external call
            tokens_per_word: Calibration for the token budget
            history_window: Number of prior messages forwarded to the model
            model: Completion model override
        """
        self.embedding_client = embedding_client
        self.vector_store = vector_store
        self.completion_client = completion_client
        self.web_retrievers = web_retrievers or WebRetrieverFactory()
        self.retry_policy = retry_policy or RetryPolicy()
        self.tokens_per_word = tokens_per_word
        self.history_window = history_window
        self.model = model

    async def respond(
        self,
        prompt: str,
        history: Sequence[ConversationMessage],
        context: TurnContext,
    ) -> ComposedResponse:
        """Run one turn.

        Raises:
            AuthError: If the completion key is missing or rejected
            ServiceError: If the completion endpoint fails
            NetworkError: If the completion endpoint is unreachable
        """
        config = context.config

        # Vector and web retrieval are independent; run them together.
        (vector_context, vector_warning), (web_context, web_warning) = await asyncio.gather(
            self._vector_context(prompt, context),
            self._web_context(prompt, context),
        )
        warnings = [warning for warning in (vector_warning, web_warning) if warning]

        max_tokens = estimate_max_tokens(config.result_length, self.tokens_per_word)

        messages = [
            build_system_message(vector_context, web_context),
            *trim_history(history, self.history_window),
            ConversationMessage(role=MessageRole.USER, content=prompt),
        ]

        credentials = context.require(ProviderName.EMBEDDING)
        content = await self.retry_policy.call(
            self.completion_client.complete,
            messages,
            max_tokens,
            credentials,
            temperature=CompletionClient.DEFAULT_TEMPERATURE,
            model=self.model,
        )

        return ComposedResponse(
            content=content,
            max_tokens=max_tokens,
            messages=messages,
            warnings=warnings,
            metadata={
                "vector_weight": config.vector_weight,
                "web_weight": config.web_weight,
                "vector_context_used": bool(vector_context),
                "web_context_used": bool(web_context),
            },
        )

    async def _vector_context(self, prompt: str, context: TurnContext) -> tuple[str, str | None]:
        """Return the vector context and a warning if retrieval failed."""
        config = context.config
        if config.vector_weight <= 0:
            return "", None

        try:
            embedding_credentials = context.require(ProviderName.EMBEDDING)
            store_credentials = context.require(ProviderName.VECTOR_STORE)
            vector = await self.retry_policy.call(self.embedding_client.embed, prompt, embedding_credentials)
            results = await self.retry_policy.call(
                self.vector_store.query, vector, config.top_k, store_credentials
            )
        except Exception as e:
            logger.warning("Vector retrieval failed, continuing without it: %s", e)
            return "", VECTOR_WARNING

        return format_context(results), None

    async def _web_context(self, prompt: str, context: TurnContext) -> tuple[str, str | None]:
        if context.config.web_weight <= 0:
            return "", None

        retriever = await self.web_retrievers.select(context)
        try:
            return await self.retry_policy.call(retriever.search, prompt), None
        except Exception as e:
            logger.warning("Web retrieval (%s) failed, continuing without it: %s", retriever.name, e)
            return "", WEB_WARNING
