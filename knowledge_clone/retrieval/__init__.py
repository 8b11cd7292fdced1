"""Vector retrieval module."""

from knowledge_clone.retrieval.backends import PineconeVectorStore
from knowledge_clone.retrieval.base import VectorStoreClient
from knowledge_clone.retrieval.models import (
    CONTEXT_SEPARATOR,
    NO_CONTENT_PLACEHOLDER,
    RetrievalResult,
    format_context,
    rank_results,
)

__all__ = [
    "CONTEXT_SEPARATOR",
    "NO_CONTENT_PLACEHOLDER",
    "PineconeVectorStore",
    "RetrievalResult",
    "VectorStoreClient",
    "format_context",
    "rank_results",
]
