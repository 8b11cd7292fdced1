"""Document upload: embed a file and store it in the vector store."""

import logging
import re
from pathlib import PurePath

from knowledge_clone.config.provider import ConfigProvider
from knowledge_clone.core import (
    Document,
    DocumentMetadata,
    IngestResult,
    KnowledgeCloneError,
    Notification,
    NotificationLevel,
    ProviderName,
    RetryPolicy,
)
from knowledge_clone.embeddings.base import EmbeddingClient
from knowledge_clone.retrieval.base import VectorStoreClient

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
UPLOAD_FAILED_MESSAGE = "Failed to upload file. Please check your API keys and try again."

_WHITESPACE = re.compile(r"\s+")


def derive_document_id(filename: str) -> str:
    """Lowercase the filename and replace whitespace runs with hyphens."""
    return _WHITESPACE.sub("-", filename).lower()


class DocumentIngestor:
    """Uploads files into the knowledge database."""

    def __init__(
        self,
        config_provider: ConfigProvider,
        embedding_client: EmbeddingClient,
        vector_store: VectorStoreClient,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.config_provider = config_provider
        self.embedding_client = embedding_client
        self.vector_store = vector_store
        self.retry_policy = retry_policy or RetryPolicy()

    def _failed(self, document_id: str, source: str) -> IngestResult:
        return IngestResult(
            success=False,
            document_id=document_id,
            source=source,
            notifications=[Notification(level=NotificationLevel.ERROR, message=UPLOAD_FAILED_MESSAGE)],
        )

    def build_document(self, filename: str, data: bytes, document_id: str | None = None) -> Document:
        """Decode file bytes into a Document.

        Raises:
            ValueError: If the file is empty or larger than 10 MB
        """
        name = PurePath(filename).name
        if not data:
            raise ValueError(f"{name} is empty")
        if len(data) > MAX_UPLOAD_BYTES:
            raise ValueError(f"{name} exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit")

        return Document(
            id=document_id or derive_document_id(name),
            content=data.decode("utf-8", errors="replace"),
            metadata=DocumentMetadata(source=name, title=name),
        )

    async def ingest(self, filename: str, data: bytes, document_id: str | None = None) -> IngestResult:
        """Embed and upsert one file, then record it as a knowledge source."""
        name = PurePath(filename).name

        try:
            document = self.build_document(filename, data, document_id)
        except ValueError as e:
            logger.warning("Rejected upload %s: %s", name, e)
            return IngestResult(
                success=False,
                source=name,
                notifications=[Notification(level=NotificationLevel.ERROR, message=str(e))],
            )

        context = self.config_provider.snapshot()
        try:
            embedding_credentials = context.require(ProviderName.EMBEDDING)
            store_credentials = context.require(ProviderName.VECTOR_STORE)
            vector = await self.retry_policy.call(
                self.embedding_client.embed, document.content, embedding_credentials
            )
            await self.retry_policy.call(self.vector_store.upsert, document, vector, store_credentials)
        except (KnowledgeCloneError, ValueError) as e:
            # ValueError: the store refused the vector (e.g. empty embedding)
            logger.error("Error uploading %s: %s", name, e)
            return self._failed(document.id, name)

        try:
            self.config_provider.add_knowledge_source(name)
        except OSError as e:
            logger.error("Uploaded %s but could not record it as a knowledge source: %s", name, e)
            return self._failed(document.id, name)

        logger.info("Uploaded %s as %s", name, document.id)
        return IngestResult(
            success=True,
            document_id=document.id,
            source=name,
            notifications=[
                Notification(
                    level=NotificationLevel.SUCCESS,
                    message=f"Successfully uploaded {name} to the vector database",
                )
            ],
        )
