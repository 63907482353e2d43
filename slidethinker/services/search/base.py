"""Search provider contract and the placeholder provider."""
import logging
from typing import Protocol

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class SearchResult(BaseModel):
    """One external snippet."""
    title: str = Field(default="", description="Page or document title")
    snippet: str = Field(default="", description="Text excerpt")
    url: str = Field(default="", description="Source location")

    def as_text(self) -> str:
        """Render for inclusion in a synthesis prompt."""
        return f"Source: {self.title}\nSnippet: {self.snippet}\nURL: {self.url}"


class SearchProvider(Protocol):
    """Anything that can turn a query into snippets."""

    name: str

    async def search(self, query: str) -> list[SearchResult]: ...


class PlaceholderSearchProvider:
    """
    Used when no search credential is configured.
    
    Returns one explicitly labeled synthetic result so downstream code always
    sees the same input shape.
    """

    name = "placeholder"

    async def search(self, query: str) -> list[SearchResult]:
        logger.warning("No search provider configured, using placeholder result")
        return [
            SearchResult(
                title=f"[Placeholder result for \"{query}\"]",
                snippet=(
                    "No search provider is configured. This is simulated data: "
                    "recent coverage suggests continued growth and adoption in this area."
                ),
                url="placeholder://simulated-data",
            )
        ]
