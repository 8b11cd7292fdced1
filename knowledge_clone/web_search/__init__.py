"""Web retrieval module."""

from knowledge_clone.web_search.base import Retriever
from knowledge_clone.web_search.client import ZaiWebRetriever
from knowledge_clone.web_search.factory import WebRetrieverFactory
from knowledge_clone.web_search.stub import WEB_SEARCH_NOTICE, StubWebRetriever

__all__ = [
    "Retriever",
    "StubWebRetriever",
    "WEB_SEARCH_NOTICE",
    "WebRetrieverFactory",
    "ZaiWebRetriever",
]
