"""Request/response pipeline: composition, summarization, chat and upload."""

from knowledge_clone.pipeline.chat import FALLBACK_ERROR_MESSAGE, GREETING, ChatSession
from knowledge_clone.pipeline.composer import (
    TOKENS_PER_WORD,
    ResponseComposer,
    build_system_message,
    estimate_max_tokens,
    trim_history,
)
from knowledge_clone.pipeline.ingest import DocumentIngestor, derive_document_id
from knowledge_clone.pipeline.summarizer import count_words, gate

__all__ = [
    "ChatSession",
    "DocumentIngestor",
    "FALLBACK_ERROR_MESSAGE",
    "GREETING",
    "ResponseComposer",
    "TOKENS_PER_WORD",
    "build_system_message",
    "count_words",
    "derive_document_id",
    "estimate_max_tokens",
    "gate",
    "trim_history",
]
