"""
Unit tests for the Research Agent and the search providers.
"""
from unittest.mock import AsyncMock, Mock, patch

import pytest

from slidethinker.core.config import Settings
from slidethinker.core.errors import ModelGatewayError, SearchProviderError
from slidethinker.services.search import (
    AzureSearchProvider,
    BingSearchProvider,
    GoogleSearchProvider,
    PlaceholderSearchProvider,
    SearchResult,
    select_search_provider,
)
from slidethinker.services.thinking_agent.research import ResearchAgent, ResearchFindings


SYNTHESIS = {
    "summary": "Remote work raises output for focused tasks.",
    "dataPoints": ["- 13% productivity gain"],
    "sources": ["Stanford study"],
}


def provider_returning(*results):
    provider = Mock()
    provider.name = "mock"
    provider.search = AsyncMock(return_value=list(results))
    return provider


class TestResearchFindings:
    """Tests for the research text block."""

    def test_research_text(self):
        findings = ResearchFindings(summary="Summary", data_points=["a", "b"], sources=["s1"])
        assert findings.to_research_text() == (
            "RESEARCH SUMMARY:\nSummary\n\nKEY DATA POINTS:\na\nb\n\nSOURCES:\ns1"
        )

    def test_no_sources_means_no_text(self):
        assert ResearchFindings(summary="Summary").to_research_text() == ""
        assert ResearchFindings(summary="", sources=["s1"]).to_research_text() == ""


class TestResearchAgent:
    """Tests for the three-step research pipeline."""

    @pytest.mark.asyncio
    async def test_pipeline(self, make_gateway, settings):
        gateway = make_gateway({
            "research-queries": {"queries": ["q1", "q2", "q3"]},
            "research-synthesis": SYNTHESIS,
        })
        provider = provider_returning(SearchResult(title="T", snippet="S", url="https://x"))
        agent = ResearchAgent(gateway, provider, settings)

        findings = await agent.conduct_research("Remote Work Productivity", ["Async beats sync"])

        assert gateway.tasks == ["research-queries", "research-synthesis"]
        assert [c.args[0] for c in provider.search.call_args_list] == ["q1", "q2"]
        assert findings.summary == SYNTHESIS["summary"]
        assert findings.sources == ["Stanford study"]
        assert findings.tokens_used == 200
        assert "Source: T\nSnippet: S\nURL: https://x" in gateway.prompts_for("research-synthesis")[0]

    @pytest.mark.asyncio
    async def test_query_failure_uses_default_queries(self, make_gateway, settings):
        gateway = make_gateway({
            "research-queries": ModelGatewayError("timeout"),
            "research-synthesis": SYNTHESIS,
        })
        provider = provider_returning(SearchResult(title="T"))
        await ResearchAgent(gateway, provider, settings).conduct_research("Solar power")

        assert [c.args[0] for c in provider.search.call_args_list] == ["Solar power", "Solar power trends"]

    @pytest.mark.asyncio
    async def test_empty_queries_use_fallback_queries(self, make_gateway, settings):
        gateway = make_gateway({"research-queries": {"queries": []}})
        provider = provider_returning()
        await ResearchAgent(gateway, provider, settings).conduct_research("Solar power")

        assert [c.args[0] for c in provider.search.call_args_list] == ["Solar power", "Solar power statistics"]

    @pytest.mark.asyncio
    async def test_no_results_skips_synthesis(self, make_gateway, settings):
        gateway = make_gateway({"research-queries": {"queries": ["q1"]}})
        findings = await ResearchAgent(gateway, provider_returning(), settings).conduct_research("Solar power")

        assert "research-synthesis" not in gateway.tasks
        assert findings.summary == "No external data found."
        assert not findings.has_content

    @pytest.mark.asyncio
    async def test_search_errors_are_swallowed(self, make_gateway, settings):
        gateway = make_gateway({"research-queries": {"queries": ["q1", "q2"]}})
        provider = Mock()
        provider.name = "bing"
        provider.search = AsyncMock(side_effect=SearchProviderError("bing", "HTTP 500"))

        findings = await ResearchAgent(gateway, provider, settings).conduct_research("Solar power")

        assert provider.search.await_count == 2
        assert findings.to_research_text() == ""

    @pytest.mark.asyncio
    async def test_synthesis_failure(self, make_gateway, settings):
        gateway = make_gateway({
            "research-queries": {"queries": ["q1"]},
            "research-synthesis": ModelGatewayError("boom"),
        })
        findings = await ResearchAgent(gateway, provider_returning(SearchResult()), settings).conduct_research("Solar")

        assert findings.summary == "Error analyzing search results."
        assert findings.sources == []

    @pytest.mark.asyncio
    async def test_placeholder_provider_by_default(self, make_gateway, settings):
        agent = ResearchAgent(make_gateway(), settings=settings)
        assert agent.provider_name == "placeholder"


class TestSearchProviders:
    """Tests for provider selection and response mapping."""

    def test_selection_order(self, clean_environment):
        assert isinstance(select_search_provider(Settings(_env_file=None)), PlaceholderSearchProvider)

        azure = Settings(_env_file=None, azure_search_endpoint="https://s", azure_search_api_key="k")
        assert isinstance(select_search_provider(azure), AzureSearchProvider)

        google = Settings(
            _env_file=None,
            google_search_api_key="g",
            google_search_cx="cx",
            azure_search_endpoint="https://s",
            azure_search_api_key="k",
        )
        assert isinstance(select_search_provider(google), GoogleSearchProvider)

        bing = Settings(_env_file=None, bing_search_api_key="b", google_search_api_key="g", google_search_cx="cx")
        assert isinstance(select_search_provider(bing), BingSearchProvider)

    @pytest.mark.asyncio
    async def test_placeholder_result_is_labeled(self):
        results = await PlaceholderSearchProvider().search("solar")
        assert len(results) == 1
        assert results[0].url == "placeholder://simulated-data"
        assert "Placeholder" in results[0].title

    @pytest.mark.asyncio
    async def test_bing_mapping(self):
        provider = BingSearchProvider("key", result_count=3)
        payload = {"webPages": {"value": [{"name": "Page", "snippet": "Text", "url": "https://p"}]}}
        with patch.object(provider, "_fetch_json", AsyncMock(return_value=payload)) as fetch:
            results = await provider.search("solar")

        assert results == [SearchResult(title="Page", snippet="Text", url="https://p")]
        _, kwargs = fetch.call_args
        assert kwargs["params"] == {"q": "solar", "count": 3}
        assert kwargs["headers"] == {"Ocp-Apim-Subscription-Key": "key"}

    @pytest.mark.asyncio
    async def test_bing_without_pages(self):
        provider = BingSearchProvider("key")
        with patch.object(provider, "_fetch_json", AsyncMock(return_value={})):
            assert await provider.search("solar") == []

    @pytest.mark.asyncio
    async def test_google_mapping_caps_num(self):
        provider = GoogleSearchProvider("key", "cx", result_count=20)
        payload = {"items": [{"title": "Doc", "snippet": "Text", "link": "https://d"}]}
        with patch.object(provider, "_fetch_json", AsyncMock(return_value=payload)) as fetch:
            results = await provider.search("solar")

        assert results[0].url == "https://d"
        _, kwargs = fetch.call_args
        assert kwargs["params"]["num"] == 10

    @pytest.mark.asyncio
    async def test_azure_search_mapping(self, clean_environment):
        settings = Settings(_env_file=None, azure_search_endpoint="https://s", azure_search_api_key="k")
        provider = AzureSearchProvider(settings)
        client = Mock()
        client.search.return_value = [
            {"id": "doc-1", "title": "Report", "content": "y" * 500},
            {"id": "doc-2", "title": "Memo", "snippet": "short", "url": "https://m"},
        ]
        provider._client = client

        results = await provider.search("solar")

        assert results[0].url == "doc-1"
        assert len(results[0].snippet) == 400
        assert results[1] == SearchResult(title="Memo", snippet="short", url="https://m")
        client.search.assert_called_once_with(search_text="solar", top=settings.search_results_per_query)

    @pytest.mark.asyncio
    async def test_azure_search_not_configured(self, clean_environment):
        provider = AzureSearchProvider(Settings(_env_file=None))
        with pytest.raises(SearchProviderError, match="azure search failed"):
            await provider.search("solar")
