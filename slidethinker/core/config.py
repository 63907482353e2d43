"""
Application settings using Pydantic for validation and type safety.
Security: All sensitive values loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration with validation and security best practices."""

    # Application
    app_name: str = Field(default="SlideThinker", description="Application name")
    debug: bool = Field(default=False, description="Debug mode flag")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Azure OpenAI Configuration
    azure_openai_api_key: Optional[str] = Field(
        default=None,
        description="Azure OpenAI API key (sensitive)"
    )
    azure_openai_endpoint: Optional[str] = Field(
        default=None,
        description="Azure OpenAI endpoint URL"
    )
    azure_openai_deployment: str = Field(
        default="gpt-4o",
        description="Azure OpenAI deployment name used by every thinking agent"
    )
    azure_openai_api_version: str = Field(
        default="2024-10-21",
        description="Azure OpenAI API version"
    )

    # Per-agent sampling
    planner_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    planner_max_tokens: int = Field(default=2000, ge=100, le=16000)
    generator_temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    generator_max_tokens: int = Field(default=2500, ge=100, le=16000)
    critic_temperature: float = Field(
        default=0.5,
        ge=0.0,
        le=2.0,
        description="Lower temperature keeps evaluations consistent between passes"
    )
    critic_max_tokens: int = Field(default=1500, ge=100, le=16000)
    research_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    research_max_tokens: int = Field(default=1500, ge=100, le=16000)

    # Web Search Configuration (first configured provider wins)
    bing_search_api_key: Optional[str] = Field(
        default=None,
        description="Bing Web Search API key (sensitive)"
    )
    google_search_api_key: Optional[str] = Field(
        default=None,
        description="Google Custom Search API key (sensitive)"
    )
    google_search_cx: Optional[str] = Field(
        default=None,
        description="Google Custom Search engine id"
    )

    # Azure AI Search Configuration
    azure_search_endpoint: Optional[str] = Field(
        default=None,
        description="Azure AI Search endpoint URL"
    )
    azure_search_api_key: Optional[str] = Field(
        default=None,
        description="Azure AI Search API key (sensitive)"
    )
    azure_search_index_name: str = Field(
        default="knowledge",
        description="Azure AI Search index holding reference documents"
    )

    # Research Configuration
    research_enabled: bool = Field(
        default=True,
        description="Run the optional research phase before generation"
    )
    search_results_per_query: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum number of snippets fetched per search query"
    )
    search_timeout_seconds: int = Field(
        default=15,
        ge=1,
        le=120,
        description="Search provider request timeout in seconds"
    )

    @property
    def has_azure_openai(self) -> bool:
        """Check if Azure OpenAI is configured (key or Entra ID credential)."""
        return bool(self.azure_openai_endpoint and self.azure_openai_deployment)

    @property
    def llm_provider(self) -> str:
        """Get the active LLM provider name."""
        if self.has_azure_openai:
            return "azure"
        return "none"

    @property
    def has_bing_search(self) -> bool:
        return bool(self.bing_search_api_key)

    @property
    def has_google_search(self) -> bool:
        return bool(self.google_search_api_key and self.google_search_cx)

    @property
    def has_azure_search(self) -> bool:
        """Check if Azure AI Search is fully configured."""
        return bool(
            self.azure_search_endpoint
            and self.azure_search_api_key
            and self.azure_search_index_name
        )

    @property
    def search_provider(self) -> str:
        """Get the active search provider name (first configured wins)."""
        if self.has_bing_search:
            return "bing"
        if self.has_google_search:
            return "google"
        if self.has_azure_search:
            return "azure"
        return "none"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = ""
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
