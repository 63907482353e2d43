"""Search provider package."""

from slidethinker.core.config import Settings, get_settings

from .azure import AzureSearchProvider
from .base import PlaceholderSearchProvider, SearchProvider, SearchResult
from .web import BingSearchProvider, GoogleSearchProvider


def select_search_provider(settings: Settings | None = None) -> SearchProvider:
    """
    Pick the first configured provider: Bing, then Google, then Azure AI Search.
    
    Falls back to the placeholder provider when nothing is configured.
    """
    settings = settings or get_settings()
    provider = settings.search_provider
    if provider == "bing":
        return BingSearchProvider(
            settings.bing_search_api_key,
            result_count=settings.search_results_per_query,
            timeout_seconds=settings.search_timeout_seconds,
        )
    if provider == "google":
        return GoogleSearchProvider(
            settings.google_search_api_key,
            settings.google_search_cx,
            result_count=settings.search_results_per_query,
            timeout_seconds=settings.search_timeout_seconds,
        )
    if provider == "azure":
        return AzureSearchProvider(settings)
    return PlaceholderSearchProvider()


__all__ = [
    "SearchResult",
    "SearchProvider",
    "PlaceholderSearchProvider",
    "BingSearchProvider",
    "GoogleSearchProvider",
    "AzureSearchProvider",
    "select_search_provider",
]
