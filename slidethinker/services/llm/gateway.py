"""
Model Gateway

Wraps a single chat-completion call behind `complete(prompt, options)`.
The rest of the system only ever sees raw text plus a token count; how the
call is transported (Microsoft Agent Framework over Azure OpenAI) stays here.

No retries happen at this level. Retry policy belongs to the job runner.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from agent_framework import ChatAgent, ChatMessage, Role
from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

from slidethinker.core.config import Settings, get_settings
from slidethinker.core.errors import ModelGatewayError

logger = logging.getLogger(__name__)

EMPTY_JSON = "{}"


@dataclass(frozen=True)
class ModelOptions:
    """Generation options for one call."""
    agent_name: str
    system_instruction: str
    task: str = "completion"
    temperature: float = 0.7
    max_tokens: int = 2000
    json_mode: bool = True
    model: Optional[str] = None


@dataclass(frozen=True)
class ModelResponse:
    text: str = EMPTY_JSON
    tokens_used: int = 0


class CompletionGateway(Protocol):
    """Anything that can answer a prompt (real gateway or a test double)."""

    async def complete(self, prompt: str, options: ModelOptions) -> ModelResponse: ...


class ModelGateway:
    """
    Chat-completion gateway backed by Azure OpenAI.
    
    One ChatAgent is created lazily per (agent name, system instruction) and
    reused for the lifetime of the gateway.
    """
    
    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the gateway."""
        self._settings = settings or get_settings()
        self._chat_client: Optional[AzureOpenAIChatClient] = None
        self._agents: dict[tuple[str, str], ChatAgent] = {}
    
    @property
    def is_available(self) -> bool:
        """Check if the gateway has a configured model endpoint."""
        return self._settings.has_azure_openai

    @property
    def model_name(self) -> str:
        return self._settings.azure_openai_deployment

    def _ensure_client(self) -> AzureOpenAIChatClient:
        """Ensure the chat client is initialized."""
        if self._chat_client is None:
            if not self.is_available:
                raise ModelGatewayError("Azure OpenAI is not configured")

            if self._settings.azure_openai_api_key:
                self._chat_client = AzureOpenAIChatClient(
                    api_key=self._settings.azure_openai_api_key,
                    endpoint=self._settings.azure_openai_endpoint,
                    deployment_name=self._settings.azure_openai_deployment,
                    api_version=self._settings.azure_openai_api_version,
                )
            else:
                self._chat_client = AzureOpenAIChatClient(
                    credential=DefaultAzureCredential(),
                    endpoint=self._settings.azure_openai_endpoint,
                    deployment_name=self._settings.azure_openai_deployment,
                    api_version=self._settings.azure_openai_api_version,
                )
        return self._chat_client

    def _get_agent(self, options: ModelOptions) -> ChatAgent:
        key = (options.agent_name, options.system_instruction)
        agent = self._agents.get(key)
        if agent is None:
            agent = self._ensure_client().create_agent(
                name=options.agent_name,
                instructions=options.system_instruction,
            )
            self._agents[key] = agent
        return agent

    async def complete(self, prompt: str, options: ModelOptions) -> ModelResponse:
        """
        Send one prompt and return the raw text and token usage.
        
        Args:
            prompt: User prompt text
            options: Agent name, system instruction and sampling options
            
        Returns:
            ModelResponse with the text ("{}" when the model said nothing)
            
        Raises:
            ModelGatewayError: On any provider or transport failure
        """
        agent = self._get_agent(options)

        run_kwargs: dict = {
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }
        if options.json_mode:
            run_kwargs["additional_chat_options"] = {"response_format": {"type": "json_object"}}
        if options.model:
            run_kwargs["model_id"] = options.model

        try:
            response = await agent.run(
                [ChatMessage(role=Role.USER, text=prompt)],
                **run_kwargs,
            )
        except Exception as e:
            logger.error("%s call failed during %s: %s", options.agent_name, options.task, e)
            raise ModelGatewayError(str(e)) from e

        text = (response.text or "").strip() or EMPTY_JSON
        usage = getattr(response, "usage_details", None)
        tokens = (getattr(usage, "total_token_count", None) or 0) if usage else 0
        logger.debug("%s %s used %d tokens", options.agent_name, options.task, tokens)
        return ModelResponse(text=text, tokens_used=tokens)


# Singleton instance
_model_gateway: Optional[ModelGateway] = None


def get_model_gateway() -> ModelGateway:
    """Get the singleton model gateway instance."""
    global _model_gateway
    if _model_gateway is None:
        _model_gateway = ModelGateway()
    return _model_gateway
