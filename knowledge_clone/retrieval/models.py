"""Data models for retrieval operations."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

NO_CONTENT_PLACEHOLDER = "No content available"
CONTEXT_SEPARATOR = "\n---\n"


class RetrievalResult(BaseModel):
    """A single match returned by the vector store.

    Attributes:
        source: Identifier of the source document (the uploaded filename)
        relevance_score: Similarity score reported by the store, higher is better
        snippet: Stored text for the match, or a placeholder when none was stored
        metadata: Remaining metadata returned with the match
    """

    source: str = Field(..., description="Source identifier for the document")
    relevance_score: float = Field(..., description="Similarity score from the store")
    snippet: str = Field(NO_CONTENT_PLACEHOLDER, description="Text content of the match")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "source": "meeting-notes.txt",
                "relevance_score": 0.87,
                "snippet": "Quarterly goals were agreed on...",
            }
        },
    )

    @classmethod
    def from_match(cls, match: dict[str, Any]) -> "RetrievalResult":
        """Build a result from one entry of a query response's ``matches``."""
        metadata = dict(match.get("metadata") or {})
        source = metadata.pop("source", None) or match.get("id") or "unknown"
        content = metadata.pop("content", None)
        return cls(
            source=str(source),
            relevance_score=float(match.get("score") or 0.0),
            snippet=content if content else NO_CONTENT_PLACEHOLDER,
            metadata=metadata,
        )

    def render(self) -> str:
        """Human-readable block used as model context."""
        return f"Source: {self.source}\nRelevance: {self.relevance_score}\n{self.snippet}\n"

    def __str__(self) -> str:
        preview = self.snippet[:100] + "..." if len(self.snippet) > 100 else self.snippet
        return f"RetrievalResult(source={self.source}, score={self.relevance_score:.3f}, snippet='{preview}')"


def rank_results(results: Sequence[RetrievalResult]) -> list[RetrievalResult]:
    """Order results by descending relevance, keeping store order on ties."""
    return sorted(results, key=lambda r: r.relevance_score, reverse=True)


def format_context(results: Sequence[RetrievalResult]) -> str:
    """Join rendered results into the flat text handed to the composer."""
    return CONTEXT_SEPARATOR.join(result.render() for result in results)
