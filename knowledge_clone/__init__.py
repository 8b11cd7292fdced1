"""Knowledge Clone - retrieval-augmented chat over your own documents."""

from knowledge_clone.config import ConfigProvider, InMemorySettingsStore, JsonFileSettingsStore
from knowledge_clone.core import (
    AuthError,
    ChatTurn,
    ConfigError,
    ConversationMessage,
    Credentials,
    Document,
    KnowledgeCloneError,
    MessageRole,
    NetworkError,
    ProviderName,
    RetrievalConfig,
    RetryPolicy,
    ServiceError,
    TurnContext,
)
from knowledge_clone.embeddings import EmbeddingClient, OpenAIEmbeddingClient
from knowledge_clone.pipeline import ChatSession, DocumentIngestor, ResponseComposer, gate
from knowledge_clone.providers import CompletionClient, OpenAICompletionClient
from knowledge_clone.retrieval import PineconeVectorStore, RetrievalResult, VectorStoreClient
from knowledge_clone.web_search import Retriever, StubWebRetriever, WebRetrieverFactory, ZaiWebRetriever

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "ChatTurn",
    "ConversationMessage",
    "Credentials",
    "Document",
    "MessageRole",
    "ProviderName",
    "RetrievalConfig",
    "RetryPolicy",
    "TurnContext",
    # Exceptions
    "KnowledgeCloneError",
    "AuthError",
    "ConfigError",
    "NetworkError",
    "ServiceError",
    # Config
    "ConfigProvider",
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    # Clients
    "EmbeddingClient",
    "OpenAIEmbeddingClient",
    "VectorStoreClient",
    "PineconeVectorStore",
    "RetrievalResult",
    "CompletionClient",
    "OpenAICompletionClient",
    "Retriever",
    "StubWebRetriever",
    "WebRetrieverFactory",
    "ZaiWebRetriever",
    # Pipeline
    "ChatSession",
    "DocumentIngestor",
    "ResponseComposer",
    "gate",
]
