"""Web search providers (Bing Web Search and Google Custom Search) over aiohttp."""
import logging
from typing import Optional

import aiohttp

from slidethinker.core.errors import SearchProviderError

from .base import SearchResult

logger = logging.getLogger(__name__)

BING_ENDPOINT = "https://api.bing.microsoft.com/v7.0/search"
GOOGLE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"


class _HttpSearchProvider:
    """Shared GET-and-decode plumbing."""

    name = "http"

    def __init__(self, result_count: int = 5, timeout_seconds: int = 15):
        self._result_count = result_count
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def _fetch_json(
        self,
        url: str,
        params: dict,
        headers: Optional[dict] = None
    ) -> dict:
        """GET a JSON document, raising SearchProviderError on failure."""
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, params=params, headers=headers or {}) as resp:
                    if resp.status != 200:
                        body = await resp.text()
                        raise SearchProviderError(self.name, f"HTTP {resp.status}: {body[:200]}")
                    return await resp.json()
        except aiohttp.ClientError as e:
            raise SearchProviderError(self.name, str(e)) from e


class BingSearchProvider(_HttpSearchProvider):
    """Bing Web Search v7."""

    name = "bing"

    def __init__(self, api_key: str, result_count: int = 5, timeout_seconds: int = 15):
        super().__init__(result_count, timeout_seconds)
        self._api_key = api_key

    async def search(self, query: str) -> list[SearchResult]:
        data = await self._fetch_json(
            BING_ENDPOINT,
            params={"q": query, "count": self._result_count},
            headers={"Ocp-Apim-Subscription-Key": self._api_key},
        )
        pages = (data.get("webPages") or {}).get("value") or []
        return [
            SearchResult(
                title=page.get("name", ""),
                snippet=page.get("snippet", ""),
                url=page.get("url", ""),
            )
            for page in pages
        ]


class GoogleSearchProvider(_HttpSearchProvider):
    """Google Custom Search JSON API."""

    name = "google"

    def __init__(self, api_key: str, cx: str, result_count: int = 5, timeout_seconds: int = 15):
        super().__init__(result_count, timeout_seconds)
        self._api_key = api_key
        self._cx = cx

    async def search(self, query: str) -> list[SearchResult]:
        data = await self._fetch_json(
            GOOGLE_ENDPOINT,
            params={
                "key": self._api_key,
                "cx": self._cx,
                "q": query,
                # Google caps num at 10
                "num": min(self._result_count, 10),
            },
        )
        return [
            SearchResult(
                title=item.get("title", ""),
                snippet=item.get("snippet", ""),
                url=item.get("link", ""),
            )
            for item in data.get("items") or []
        ]
