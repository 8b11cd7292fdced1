"""z.ai web search retriever with in-memory caching."""

import hashlib
import json
import logging
from typing import Any

import httpx
from cachetools import TTLCache

from knowledge_clone.core import Credentials, ServiceError
from knowledge_clone.core.http import post_json
from knowledge_clone.retrieval.models import CONTEXT_SEPARATOR
from knowledge_clone.web_search.base import Retriever

logger = logging.getLogger(__name__)


class ZaiWebRetriever(Retriever):
    """Web retriever backed by the z.ai search API."""

    name = "zai"

    BASE_URL = "https://open.z.ai/api/v1"
    PROVIDER = "zai"

    def __init__(
        self,
        credentials: Credentials,
        count: int = 5,
        cache_ttl: int = 86400,  # 24 hours
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize web retriever.

        Args:
            credentials: z.ai key
            count: Number of results to request per search
            cache_ttl: Cache TTL in seconds (default 24 hours)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        if not credentials.key.strip():
            raise ValueError("z.ai API key is required for web search")

        self.count = count
        self.cache_ttl = cache_ttl
        self._cache: TTLCache = TTLCache(maxsize=1000, ttl=cache_ttl)

        self.client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={"Authorization": f"Bearer {credentials.key}"},
            timeout=timeout,
            transport=transport,
        )

        self._total_searches = 0
        self._cache_hits = 0

    async def search(self, query: str) -> str:
        """Search the web and render results as context text."""
        cache_key = self._generate_cache_key(query, self.count)

        self._total_searches += 1
        cached = self._cache.get(cache_key)
        if cached is not None:
            self._cache_hits += 1
            return cached

        data = await post_json(
            self.client,
            "/search",
            {"query": query, "count": self.count},
            provider=self.PROVIDER,
        )

        try:
            context = self._render(data.get("results", []))
        except (KeyError, TypeError) as e:
            raise ServiceError(f"Malformed search response: {e}", provider=self.PROVIDER) from e

        self._cache[cache_key] = context
        return context

    def _render(self, results: list[dict[str, Any]]) -> str:
        blocks = [
            f"Title: {r['title']}\nURL: {r['url']}\n{r.get('snippet') or r.get('content') or ''}\n"
            for r in results
        ]
        return CONTEXT_SEPARATOR.join(blocks)

    def _generate_cache_key(self, query: str, count: int) -> str:
        """Generate cache key from search parameters.

        Returns:
            Cache key (SHA256 hash)
        """
        cache_data = {"query": query.lower().strip(), "count": count}
        cache_str = json.dumps(cache_data, sort_keys=True)
        return hashlib.sha256(cache_str.encode()).hexdigest()

    def get_cache_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        hit_rate = self._cache_hits / self._total_searches if self._total_searches > 0 else 0.0
        return {
            "total_searches": self._total_searches,
            "cache_hits": self._cache_hits,
            "hit_rate": round(hit_rate, 3),
        }

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()
