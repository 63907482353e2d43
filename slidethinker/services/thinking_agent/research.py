"""
Research Agent

Best-effort augmentation: propose search queries, run at most two of them
against the configured search provider, then synthesize the snippets into a
summary, data points and sources. No step here ever raises; an empty result
is a valid outcome.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from slidethinker.core.config import Settings
from slidethinker.services.llm.gateway import CompletionGateway
from slidethinker.services.search import SearchProvider, SearchResult, select_search_provider

from .base import ThinkingAgent
from .parsing import get_str, get_str_list, parse_json
from .prompts import (
    RESEARCH_AGENT_INSTRUCTIONS,
    build_research_synthesis_prompt,
    build_search_queries_prompt,
)

logger = logging.getLogger(__name__)

QUERIES_REQUESTED = 3
MAX_QUERIES_EXECUTED = 2
NO_DATA_SUMMARY = "No external data found."


@dataclass
class ResearchFindings:
    summary: str = NO_DATA_SUMMARY
    data_points: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    tokens_used: int = 0

    @property
    def has_content(self) -> bool:
        return bool(self.summary) and bool(self.sources)

    def to_research_text(self) -> str:
        """Render as the reference block handed to the generator ("" when nothing usable)."""
        if not self.has_content:
            return ""
        return (
            f"RESEARCH SUMMARY:\n{self.summary}\n\n"
            f"KEY DATA POINTS:\n" + "\n".join(self.data_points) + "\n\n"
            f"SOURCES:\n" + "\n".join(self.sources)
        )


class ResearchAgent(ThinkingAgent):
    """Gathers external facts to ground generated content."""

    agent_name = "ResearchAgent"
    instructions = RESEARCH_AGENT_INSTRUCTIONS
    settings_prefix = "research"

    def __init__(
        self,
        gateway: CompletionGateway,
        search_provider: Optional[SearchProvider] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(gateway, settings)
        self._search_provider = search_provider or select_search_provider(self._settings)

    @property
    def provider_name(self) -> str:
        return self._search_provider.name

    async def conduct_research(self, topic: str, key_questions: Optional[list[str]] = None) -> ResearchFindings:
        """Run the three-step research pipeline."""
        logger.info("Conducting research on: %s (provider: %s)", topic, self.provider_name)
        queries, query_tokens = await self._generate_queries(topic, key_questions or [])
        results = await self._search(queries)
        findings = await self._synthesize(topic, results)
        findings.tokens_used += query_tokens
        return findings

    async def _generate_queries(self, topic: str, questions: list[str]) -> tuple[list[str], int]:
        prompt = build_search_queries_prompt(topic, questions, QUERIES_REQUESTED)
        try:
            response = await self._call(prompt, task="research-queries")
        except Exception as e:
            logger.warning("Search query generation failed, using defaults: %s", e)
            return [topic, f"{topic} trends", f"{topic} data"], 0

        data = parse_json(response.text, {})
        queries = [q for q in get_str_list(data, "queries", []) if q.strip()]
        if not queries:
            queries = [topic, f"{topic} statistics", f"{topic} facts"]
        return queries, response.tokens_used

    async def _search(self, queries: list[str]) -> list[SearchResult]:
        results: list[SearchResult] = []
        for query in queries[:MAX_QUERIES_EXECUTED]:
            try:
                results.extend(await self._search_provider.search(query))
            except Exception as e:
                logger.warning("Search failed for query %r: %s", query, e)
        return results

    async def _synthesize(self, topic: str, results: list[SearchResult]) -> ResearchFindings:
        if not results:
            return ResearchFindings()

        combined = "\n\n".join(result.as_text() for result in results)
        try:
            response = await self._call(build_research_synthesis_prompt(topic, combined), task="research-synthesis")
        except Exception as e:
            logger.warning("Research synthesis failed: %s", e)
            return ResearchFindings(summary="Error analyzing search results.")

        data = parse_json(response.text, {})
        return ResearchFindings(
            summary=get_str(data, "summary", "Analysis of search results."),
            data_points=get_str_list(data, "dataPoints", []),
            sources=get_str_list(data, "sources", []),
            tokens_used=response.tokens_used,
        )
