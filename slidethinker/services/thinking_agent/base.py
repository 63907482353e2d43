"""Shared plumbing for the thinking agents."""
import logging
from typing import Optional

from slidethinker.core.config import Settings, get_settings
from slidethinker.services.llm import ModelOptions, ModelResponse
from slidethinker.services.llm.gateway import CompletionGateway

logger = logging.getLogger(__name__)


class ThinkingAgent:
    """
    Base class binding an agent name, its instructions and its sampling settings.
    
    Subclasses set ``agent_name``, ``instructions`` and ``settings_prefix``;
    the prefix selects ``<prefix>_temperature`` and ``<prefix>_max_tokens``
    from Settings.
    """

    agent_name: str = "ThinkingAgent"
    instructions: str = ""
    settings_prefix: str = "planner"

    def __init__(self, gateway: CompletionGateway, settings: Optional[Settings] = None):
        self._gateway = gateway
        self._settings = settings or get_settings()

    def _options(self, task: str) -> ModelOptions:
        return ModelOptions(
            agent_name=self.agent_name,
            system_instruction=self.instructions,
            task=task,
            temperature=getattr(self._settings, f"{self.settings_prefix}_temperature"),
            max_tokens=getattr(self._settings, f"{self.settings_prefix}_max_tokens"),
            json_mode=True,
        )

    async def _call(self, prompt: str, task: str) -> ModelResponse:
        """Issue one model call; gateway errors propagate."""
        return await self._gateway.complete(prompt, self._options(task))
