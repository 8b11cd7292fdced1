"""Placeholder web retriever."""

from knowledge_clone.web_search.base import Retriever

WEB_SEARCH_NOTICE = (
    "Web search is not connected yet. Answer from general knowledge where the "
    "knowledge database has no relevant information."
)


class StubWebRetriever(Retriever):
    """Deterministic stand-in returning a fixed notice for every query."""

    name = "stub"

    def __init__(self, notice: str = WEB_SEARCH_NOTICE) -> None:
        self.notice = notice
        self.call_count = 0

    async def search(self, query: str) -> str:
        self.call_count += 1
        return self.notice
