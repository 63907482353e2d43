"""
Pytest configuration and fixtures.
"""
import json
from typing import Any, Callable, Union

import pytest

from slidethinker.core.config import Settings
from slidethinker.models import (
    CriteriaScore,
    EnhancedBlock,
    EnhancedPresentation,
    EnhancedSection,
    GenerationMetadata,
    GenerationResult,
    PresentationPlan,
    QualityBreakdown,
    QualityReport,
    ReflectionCriteria,
    ThinkingPhase,
    ThinkingState,
    ThinkingStep,
)
from slidethinker.services.llm import ModelOptions, ModelResponse

CRITERIA = (
    "clarity",
    "relevance",
    "engagement",
    "structure",
    "visual_appeal",
    "completeness",
    "audience_alignment",
)

Scripted = Union[str, dict, list, Exception, Callable[[str], Any]]


class ScriptedGateway:
    """
    Fake model gateway answering by ``ModelOptions.task``.

    A value may be a string, a dict (JSON-encoded), an exception (raised), a
    callable taking the prompt, or a list consumed one answer per call (the
    last answer repeats). Unknown tasks answer ``default``.
    """

    def __init__(self, responses: dict[str, Scripted] = None, default: str = "{}", tokens: int = 100):
        self.responses = dict(responses or {})
        self.default = default
        self.tokens = tokens
        self.calls: list[tuple[str, str, ModelOptions]] = []

    async def complete(self, prompt: str, options: ModelOptions) -> ModelResponse:
        self.calls.append((options.task, prompt, options))
        value = self.responses.get(options.task, self.default)
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            value = value(prompt)
        if not isinstance(value, str):
            value = json.dumps(value)
        return ModelResponse(text=value, tokens_used=self.tokens)

    @property
    def tasks(self) -> list[str]:
        return [task for task, _, _ in self.calls]

    def prompts_for(self, task: str) -> list[str]:
        return [prompt for t, prompt, _ in self.calls if t == task]


def critic_responses(
    score: float = 5,
    weaknesses: list[str] = None,
    improvements: list[dict] = None,
    **overrides: float,
) -> dict[str, Any]:
    """Scripted answers for a full reflection pass."""
    responses: dict[str, Any] = {
        f"evaluate-{name}": {"score": overrides.get(name, score), "feedback": f"{name} feedback"}
        for name in CRITERIA
    }
    responses["synthesis"] = {"strengths": ["Clear flow"], "weaknesses": weaknesses or []}
    responses["improvements"] = {"improvements": improvements or []}
    return responses


@pytest.fixture
def clean_environment(monkeypatch):
    """Provide a clean environment for tests."""
    env_vars = [
        "AZURE_OPENAI_API_KEY",
        "AZURE_OPENAI_ENDPOINT",
        "AZURE_OPENAI_DEPLOYMENT",
        "BING_SEARCH_API_KEY",
        "GOOGLE_SEARCH_API_KEY",
        "GOOGLE_SEARCH_CX",
        "AZURE_SEARCH_ENDPOINT",
        "AZURE_SEARCH_API_KEY",
        "RESEARCH_ENABLED",
        "LOG_LEVEL",
    ]
    for var in env_vars:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings(clean_environment):
    """Settings with no providers configured and research switched off."""
    return Settings(_env_file=None, research_enabled=False)


@pytest.fixture
def plan():
    """Plan with default strategy (question hook, call-to-action conclusion)."""
    return PresentationPlan(
        main_objective="Explain remote work productivity",
        estimated_slides=5,
        key_messages=["pricing", "onboarding"],
    )


def make_section(heading: str, text: str = "Body text", section_id: str = None) -> EnhancedSection:
    return EnhancedSection(
        id=section_id or f"section-{heading}",
        heading=heading,
        blocks=[EnhancedBlock(id=f"block-{heading}", type="paragraph", content=text)],
    )


@pytest.fixture
def presentation():
    return EnhancedPresentation(
        title="Pricing Strategy",
        subtitle="How we charge",
        sections=[
            make_section("Pricing Overview", "Tiers and plans"),
            make_section("Why It Matters", "Revenue growth"),
            make_section("Next Steps", "Talk to sales"),
        ],
    )


@pytest.fixture
def criteria():
    return ReflectionCriteria(**{name: CriteriaScore(score=8, feedback="ok") for name in CRITERIA})


@pytest.fixture
def generation_result(presentation):
    """A finished result as the orchestrator would return it."""
    step = ThinkingStep(step_number=1, phase=ThinkingPhase.PLANNING, thought="Planned", action="Plan")
    return GenerationResult(
        presentation=presentation,
        thinking_process=ThinkingState(
            session_id="session-1",
            current_phase=ThinkingPhase.COMPLETE,
            steps=[step],
            iterations=2,
            max_iterations=3,
            quality_score=7.8,
            target_quality_score=7.5,
        ),
        quality_report=QualityReport(
            overall_score=78.0,
            breakdown=QualityBreakdown(
                content_quality=80.0,
                structure_quality=70.0,
                engagement_potential=75.0,
                visual_richness=60.0,
                audience_alignment=90.0,
                originality=85.0,
            ),
            suggestions=["Visuals: Add a chart"],
            comparison_to_target=104.0,
            passed_threshold=True,
        ),
        metadata=GenerationMetadata(
            total_tokens_used=4200,
            thinking_iterations=2,
            total_time_ms=1500,
            model_used="gpt-4o",
            generate_images=False,
            stop_reason="target reached",
        ),
    )


@pytest.fixture
def make_gateway():
    """Factory for ScriptedGateway instances."""
    return ScriptedGateway


@pytest.fixture
def critic_script():
    """Factory for scripted reflection answers."""
    return critic_responses


@pytest.fixture
def section_factory():
    return make_section
