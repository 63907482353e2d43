"""
Unit tests for configuration module.
"""
import os
from unittest.mock import patch

import pytest

from slidethinker.core import Settings, get_settings


class TestSettings:
    """Tests for Settings class."""
    
    def test_default_values(self, clean_environment):
        """Test that default values are set correctly."""
        settings = Settings(_env_file=None)
        
        assert settings.app_name == "SlideThinker"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.azure_openai_deployment == "gpt-4o"
        assert settings.research_enabled is True
        assert settings.search_results_per_query == 5
    
    def test_agent_sampling_defaults(self, clean_environment):
        settings = Settings(_env_file=None)
        
        assert (settings.planner_temperature, settings.planner_max_tokens) == (0.7, 2000)
        assert (settings.generator_temperature, settings.generator_max_tokens) == (0.8, 2500)
        assert (settings.critic_temperature, settings.critic_max_tokens) == (0.5, 1500)
        assert (settings.research_temperature, settings.research_max_tokens) == (0.3, 1500)
    
    def test_range_validation(self):
        """Test that range validation works."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, search_results_per_query=0)
        
        with pytest.raises(ValueError):
            Settings(_env_file=None, critic_temperature=3.0)
    
    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level="chatty")
    
    @patch.dict(os.environ, {
        "AZURE_OPENAI_API_KEY": "test-key",
        "AZURE_OPENAI_ENDPOINT": "https://test.openai.azure.com/",
        "AZURE_OPENAI_DEPLOYMENT": "gpt-4",
    })
    def test_has_azure_openai(self):
        """Test Azure OpenAI detection."""
        settings = Settings(_env_file=None)
        
        assert settings.has_azure_openai is True
        assert settings.llm_provider == "azure"
        assert settings.azure_openai_deployment == "gpt-4"
    
    def test_no_provider(self, clean_environment):
        """Test when no LLM provider is configured."""
        settings = Settings(_env_file=None)
        
        assert settings.has_azure_openai is False
        assert settings.llm_provider == "none"
    
    def test_search_provider_priority(self, clean_environment):
        """First configured search provider wins."""
        assert Settings(_env_file=None).search_provider == "none"
        assert Settings(_env_file=None, google_search_api_key="g").search_provider == "none"
        assert Settings(_env_file=None, google_search_api_key="g", google_search_cx="cx").search_provider == "google"
        assert Settings(
            _env_file=None,
            bing_search_api_key="b",
            google_search_api_key="g",
            google_search_cx="cx",
        ).search_provider == "bing"
        assert Settings(
            _env_file=None,
            azure_search_endpoint="https://s.search.windows.net",
            azure_search_api_key="k",
        ).search_provider == "azure"
    
    @patch.dict(os.environ, {"RESEARCH_ENABLED": "false"})
    def test_research_switch_from_environment(self):
        assert Settings(_env_file=None).research_enabled is False


class TestGetSettings:
    """Tests for get_settings function."""
    
    def test_returns_settings_instance(self):
        """Test that get_settings returns a Settings instance."""
        settings = get_settings()
        assert isinstance(settings, Settings)
    
    def test_cached_instance(self):
        """Test that get_settings returns the same cached instance."""
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
