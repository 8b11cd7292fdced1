"""Embedding clients module."""

from knowledge_clone.embeddings.base import EmbeddingClient
from knowledge_clone.embeddings.openai import OpenAIEmbeddingClient

__all__ = ["EmbeddingClient", "OpenAIEmbeddingClient"]
