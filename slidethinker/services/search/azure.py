"""
Azure AI Search provider.

Queries an Azure AI Search index of reference documents. The SDK client is
synchronous, so each query runs in a worker thread.
"""
import asyncio
import logging
from typing import Optional

from azure.core.credentials import AzureKeyCredential
from azure.core.exceptions import AzureError
from azure.search.documents import SearchClient

from slidethinker.core.config import Settings
from slidethinker.core.errors import SearchProviderError

from .base import SearchResult

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 400


class AzureSearchProvider:
    """Full-text search over an Azure AI Search index."""

    name = "azure"

    def __init__(self, settings: Settings):
        self._settings = settings
        self._client: Optional[SearchClient] = None

    @property
    def _search_client(self) -> SearchClient:
        """Get or create the Azure Search client."""
        if self._client is None:
            if not self._settings.has_azure_search:
                raise SearchProviderError(self.name, "Azure AI Search is not configured")

            self._client = SearchClient(
                endpoint=self._settings.azure_search_endpoint,
                index_name=self._settings.azure_search_index_name,
                credential=AzureKeyCredential(self._settings.azure_search_api_key)
            )
        return self._client

    def _search_sync(self, query: str) -> list[SearchResult]:
        results = []
        for doc in self._search_client.search(
            search_text=query,
            top=self._settings.search_results_per_query,
        ):
            content = doc.get("content") or doc.get("snippet") or ""
            results.append(SearchResult(
                title=doc.get("title", ""),
                snippet=content[:SNIPPET_LENGTH],
                url=doc.get("url") or doc.get("id", ""),
            ))
        return results

    async def search(self, query: str) -> list[SearchResult]:
        try:
            return await asyncio.to_thread(self._search_sync, query)
        except AzureError as e:
            raise SearchProviderError(self.name, str(e)) from e
