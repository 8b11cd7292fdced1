"""Core data models for the knowledge clone pipeline."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from knowledge_clone.core.exceptions import AuthError


class MessageRole(str, Enum):
    """Message role in conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ProviderName(str, Enum):
    """External services that need credentials."""

    EMBEDDING = "embedding"
    VECTOR_STORE = "vector-store"
    WEB_SEARCH = "web-search"


class NotificationLevel(str, Enum):
    """Severity of a transient user notification."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ConversationMessage(BaseModel):
    """Single message sent to the completion endpoint."""

    model_config = ConfigDict(use_enum_values=True, frozen=True)

    role: MessageRole
    content: str

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class Credentials(BaseModel):
    """API key for one provider."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    key: str

    def __repr__(self) -> str:
        # Keys must never end up in logs.
        return f"Credentials(provider={self.provider.value!r}, key='***')"

    __str__ = __repr__


class RetrievalConfig(BaseModel):
    """User-tunable retrieval and response-length parameters.

    Only ``vector_weight`` is stored; ``web_weight`` is always derived so the
    two can never disagree.
    """

    model_config = ConfigDict(frozen=True)

    vector_weight: int = Field(75, ge=0, le=100)
    result_length: int = Field(200, gt=0, description="Desired answer length in words")
    summarize_threshold: int = Field(500, gt=0, description="Word count above which answers are summarized")
    top_k: int = Field(3, gt=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def web_weight(self) -> int:
        return 100 - self.vector_weight


class TurnContext(BaseModel):
    """Configuration captured once at the start of a chat turn."""

    model_config = ConfigDict(frozen=True)

    config: RetrievalConfig
    credentials: dict[ProviderName, Credentials] = Field(default_factory=dict)
    web_search_provider: Literal["stub", "zai"] = "stub"

    def require(self, provider: ProviderName) -> Credentials:
        """Return credentials for ``provider``.

        Raises:
            AuthError: If no usable key was resolved
        """
        credentials = self.credentials.get(provider)
        if credentials is None or not credentials.key.strip():
            raise AuthError(f"No API key configured for {provider.value}", provider=provider.value)
        return credentials


class DocumentMetadata(BaseModel):
    """Metadata stored next to a document vector."""

    source: str
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    title: str | None = None


class Document(BaseModel):
    """An uploaded document, immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    metadata: DocumentMetadata


class ChatTurn(BaseModel):
    """Assistant output as shown in the transcript.

    ``is_summarized`` is true exactly when ``full_content`` is present.
    """

    model_config = ConfigDict(use_enum_values=True)

    display_content: str
    full_content: str | None = None
    is_summarized: bool = False
    role: MessageRole = MessageRole.ASSISTANT
    is_error: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def _check_summary_fields(self) -> "ChatTurn":
        if self.is_summarized != (self.full_content is not None):
            raise ValueError("is_summarized must be set iff full_content is present")
        return self

    def expanded(self) -> str:
        """Text to show after the user asks for more details."""
        return self.full_content if self.full_content is not None else self.display_content


class Notification(BaseModel):
    """Transient message for the user, never written to the transcript."""

    model_config = ConfigDict(use_enum_values=True)

    level: NotificationLevel
    message: str


class ComposedResponse(BaseModel):
    """Raw completion text plus what went into producing it."""

    content: str
    max_tokens: int
    messages: list[ConversationMessage]
    warnings: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class TurnResult(BaseModel):
    """Outcome of one chat submission."""

    accepted: bool = True
    turn: ChatTurn | None = None
    notifications: list[Notification] = Field(default_factory=list)


class IngestResult(BaseModel):
    """Outcome of uploading one document."""

    success: bool
    document_id: str | None = None
    source: str
    notifications: list[Notification] = Field(default_factory=list)
