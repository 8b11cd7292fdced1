"""Vector store backends."""

from knowledge_clone.retrieval.backends.pinecone_backend import PineconeVectorStore

__all__ = ["PineconeVectorStore"]
