"""Completion provider implementations."""

from knowledge_clone.providers.base import CompletionClient
from knowledge_clone.providers.openai_client import OpenAICompletionClient

__all__ = ["CompletionClient", "OpenAICompletionClient"]
