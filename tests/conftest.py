"""Pytest configuration and fixtures."""

import pytest

from knowledge_clone.config import ConfigProvider, InMemorySettingsStore
from knowledge_clone.core import (
    ConversationMessage,
    Credentials,
    Document,
    ProviderName,
    RetryPolicy,
)
from knowledge_clone.embeddings.base import EmbeddingClient
from knowledge_clone.pipeline import ResponseComposer
from knowledge_clone.providers.base import CompletionClient
from knowledge_clone.retrieval.base import VectorStoreClient
from knowledge_clone.retrieval.models import RetrievalResult
from knowledge_clone.web_search import StubWebRetriever, WebRetrieverFactory


class FakeEmbeddingClient(EmbeddingClient):
    """Returns a fixed vector, or raises ``error`` when set."""

    def __init__(self, vector: list[float] | None = None) -> None:
        self.vector = vector or [0.1, 0.2, 0.3]
        self.error: Exception | None = None
        self.calls: list[tuple[str, Credentials]] = []

    async def embed(self, text: str, credentials: Credentials) -> list[float]:
        self.calls.append((text, credentials))
        if self.error is not None:
            raise self.error
        return list(self.vector)


class FakeVectorStore(VectorStoreClient):
    """Dict-backed store keyed by document id."""

    def __init__(self) -> None:
        self.records: dict[str, tuple[Document, list[float]]] = {}
        self.results: list[RetrievalResult] = []
        self.error: Exception | None = None
        self.query_calls: list[tuple[list[float], int]] = []
        self.upsert_calls = 0

    async def upsert(self, document: Document, embedding: list[float], credentials: Credentials) -> bool:
        self.upsert_calls += 1
        if self.error is not None:
            raise self.error
        self.records[document.id] = (document, list(embedding))
        return True

    async def query(self, vector: list[float], top_k: int, credentials: Credentials) -> list[RetrievalResult]:
        self.query_calls.append((vector, top_k))
        if self.error is not None:
            raise self.error
        return self.results[:top_k]


class FakeCompletionClient(CompletionClient):
    """Records every request and answers with ``reply``."""

    def __init__(self, reply: str = "Here is what I found.") -> None:
        super().__init__(default_model="fake-model")
        self.reply = reply
        self.error: Exception | None = None
        self.requests: list[dict] = []

    async def complete(
        self,
        messages: list[ConversationMessage],
        max_tokens: int,
        credentials: Credentials,
        temperature: float = CompletionClient.DEFAULT_TEMPERATURE,
        model: str | None = None,
    ) -> str:
        self._track_request()
        self.requests.append(
            {
                "messages": messages,
                "max_tokens": max_tokens,
                "credentials": credentials,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings_store():
    """Empty in-memory settings."""
    return InMemorySettingsStore()


@pytest.fixture
def default_keys():
    """Built-in fallback keys used instead of the environment."""
    return {
        ProviderName.EMBEDDING: "test-openai-key",
        ProviderName.VECTOR_STORE: "test-pinecone-key",
        ProviderName.WEB_SEARCH: "",
    }


@pytest.fixture
def config_provider(settings_store, default_keys):
    return ConfigProvider(settings_store, defaults=default_keys)


@pytest.fixture
def credentials():
    return Credentials(provider=ProviderName.EMBEDDING, key="test-key")


@pytest.fixture
def embedding_client():
    return FakeEmbeddingClient()


@pytest.fixture
def vector_store():
    store = FakeVectorStore()
    store.results = [
        RetrievalResult(source="notes.txt", relevance_score=0.92, snippet="Pricing is reviewed every quarter."),
        RetrievalResult(source="plan.md", relevance_score=0.81, snippet="Launch is planned for March."),
    ]
    return store


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def web_retriever():
    return StubWebRetriever()


@pytest.fixture
def composer(embedding_client, vector_store, completion_client, web_retriever):
    return ResponseComposer(
        embedding_client,
        vector_store,
        completion_client,
        web_retrievers=WebRetrieverFactory(stub=web_retriever),
        retry_policy=RetryPolicy.none(),
    )
