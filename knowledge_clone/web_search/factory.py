"""Select the web retriever named by the turn's configuration."""

import logging

import httpx

from knowledge_clone.core import ProviderName, TurnContext
from knowledge_clone.web_search.base import Retriever
from knowledge_clone.web_search.client import ZaiWebRetriever
from knowledge_clone.web_search.stub import StubWebRetriever

logger = logging.getLogger(__name__)


class WebRetrieverFactory:
    """Hands out the stub or the real retriever for a turn.

    At most one real retriever is open at a time. It is reused while the key
    stays the same so its cache survives across turns, and closed once the
    key changes.
    """

    def __init__(
        self,
        stub: Retriever | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.stub = stub or StubWebRetriever()
        self._transport = transport
        self._real: ZaiWebRetriever | None = None
        self._real_key: str | None = None

    async def select(self, context: TurnContext) -> Retriever:
        if context.web_search_provider != "zai":
            return self.stub

        credentials = context.credentials.get(ProviderName.WEB_SEARCH)
        if credentials is None or not credentials.key.strip():
            logger.warning("Web search provider 'zai' selected without an API key; using stub")
            return self.stub

        if self._real is not None and self._real_key != credentials.key:
            logger.info("Web search key changed; replacing retriever")
            await self._close_real()

        if self._real is None:
            self._real = ZaiWebRetriever(credentials, transport=self._transport)
            self._real_key = credentials.key
        return self._real

    async def _close_real(self) -> None:
        if self._real is not None:
            await self._real.close()
        self._real = None
        self._real_key = None

    async def close(self) -> None:
        await self._close_real()
        await self.stub.close()
