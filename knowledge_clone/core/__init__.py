"""Core abstractions and models."""

from knowledge_clone.core.exceptions import (
    AuthError,
    ConfigError,
    KnowledgeCloneError,
    NetworkError,
    ServiceError,
)
from knowledge_clone.core.models import (
    ChatTurn,
    ComposedResponse,
    ConversationMessage,
    Credentials,
    Document,
    DocumentMetadata,
    IngestResult,
    MessageRole,
    Notification,
    NotificationLevel,
    ProviderName,
    RetrievalConfig,
    TurnContext,
    TurnResult,
)
from knowledge_clone.core.retry import RetryPolicy

__all__ = [
    # Exceptions
    "KnowledgeCloneError",
    "AuthError",
    "ServiceError",
    "NetworkError",
    "ConfigError",
    # Models
    "ChatTurn",
    "ComposedResponse",
    "ConversationMessage",
    "Credentials",
    "Document",
    "DocumentMetadata",
    "IngestResult",
    "MessageRole",
    "Notification",
    "NotificationLevel",
    "ProviderName",
    "RetrievalConfig",
    "TurnContext",
    "TurnResult",
    # Retry
    "RetryPolicy",
]
