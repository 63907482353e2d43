"""
Planner Agent

Turns a topic and its constraints into a PresentationPlan with one
chain-of-thought model call. Every field of the response is defaulted on its
own, so a partial or malformed answer still yields a complete plan derived
from the request.
"""
import logging
from dataclasses import dataclass, field

from slidethinker.models import (
    AudienceProfile,
    ContentStrategy,
    GenerationParams,
    PresentationPlan,
    StructurePlan,
    ThinkingPhase,
    ThinkingStep,
    VisualStrategy,
)

from .base import ThinkingAgent
from .parsing import get_int, get_str, get_str_list, parse_json
from .prompts import PLANNER_AGENT_INSTRUCTIONS, build_plan_prompt

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_COUNT = 8
KNOWLEDGE_LEVELS = {"beginner", "intermediate", "expert"}
DATA_USAGE_LEVELS = {"minimal", "moderate", "heavy"}
DEFAULT_TRANSITIONS = ["After introduction", "Before conclusion"]
DEFAULT_LAYOUT_VARIETY = ["title-content", "two-column", "image-right"]


@dataclass
class PlanningOutcome:
    plan: PresentationPlan
    steps: list[ThinkingStep] = field(default_factory=list)
    tokens_used: int = 0


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def build_audience(data: dict, params: GenerationParams) -> AudienceProfile:
    level = get_str(data, "knowledgeLevel", "intermediate").lower()
    return AudienceProfile(
        type=get_str(data, "type", params.audience or "general"),
        knowledge_level=level if level in KNOWLEDGE_LEVELS else "intermediate",
        interests=get_str_list(data, "interests", []),
        pain_points=get_str_list(data, "painPoints", []),
        expected_outcome=get_str(data, "expectedOutcome", f"Learn about {params.topic}"),
    )


def build_content_strategy(data: dict) -> ContentStrategy:
    usage = get_str(data, "dataUsage", "moderate").lower()
    return ContentStrategy(
        narrative_arc=get_str(data, "narrativeArc", "Problem-Solution"),
        hook_type=get_str(data, "hookType", "question").lower(),
        conclusion_style=get_str(data, "conclusionStyle", "call-to-action").lower(),
        data_usage=usage if usage in DATA_USAGE_LEVELS else "moderate",
        storytelling_approach=get_str(data, "storytellingApproach", "Clear and engaging"),
    )


def build_structure_plan(data: dict, total_slides: int) -> StructurePlan:
    return StructurePlan(
        opening_slides=get_int(data, "openingSlides", 1, minimum=0),
        content_slides=get_int(data, "contentSlides", total_slides // 2, minimum=0),
        data_slides=get_int(data, "dataSlides", total_slides // 4, minimum=0),
        closing_slides=get_int(data, "closingSlides", 1, minimum=0),
        transition_points=get_str_list(data, "transitionPoints", DEFAULT_TRANSITIONS),
    )


def build_visual_strategy(data: dict) -> VisualStrategy:
    return VisualStrategy(
        color_mood=get_str(data, "colorMood", "professional"),
        image_style=get_str(data, "imageStyle", "photography"),
        chart_preference=get_str(data, "chartPreference", "clean-minimal"),
        layout_variety=get_str_list(data, "layoutVariety", DEFAULT_LAYOUT_VARIETY) or list(DEFAULT_LAYOUT_VARIETY),
    )


def identify_challenges(params: GenerationParams, audience: AudienceProfile) -> list[str]:
    """Deterministic risks derived from the request and the audience."""
    challenges = []
    if audience.knowledge_level == "beginner":
        challenges.append("Need to explain technical concepts simply")
    elif audience.knowledge_level == "expert":
        challenges.append("Need to provide advanced insights, not basics")

    length = params.length or DEFAULT_SLIDE_COUNT
    if length < 5:
        challenges.append("Limited slides - must be very concise")
    elif length > 15:
        challenges.append("Many slides - need to maintain engagement")

    if params.tone == "casual" and params.type == "pitch-deck":
        challenges.append("Balance casual tone with professional credibility")
    return challenges


def build_plan(data: dict, params: GenerationParams) -> PresentationPlan:
    """Assemble a plan from (possibly partial) model output."""
    total_slides = params.length or DEFAULT_SLIDE_COUNT
    audience = build_audience(_section(data, "targetAudience"), params)
    key_messages = [m for m in get_str_list(data, "keyMessages", []) if m.strip()]
    return PresentationPlan(
        main_objective=get_str(data, "mainObjective", params.topic),
        target_audience=audience,
        content_strategy=build_content_strategy(_section(data, "contentStrategy")),
        structure_plan=build_structure_plan(_section(data, "structurePlan"), total_slides),
        visual_strategy=build_visual_strategy(_section(data, "visualStrategy")),
        estimated_slides=total_slides,
        key_messages=key_messages or [params.topic],
        potential_challenges=identify_challenges(params, audience),
    )


class PlannerAgent(ThinkingAgent):
    """Creates the presentation plan before any content is generated."""

    agent_name = "PlannerAgent"
    instructions = PLANNER_AGENT_INSTRUCTIONS
    settings_prefix = "planner"

    async def create_plan(self, params: GenerationParams) -> PlanningOutcome:
        """Create a plan using one chain-of-thought call."""
        total_slides = params.length or DEFAULT_SLIDE_COUNT
        logger.info("Planning %d slides for topic: %s", total_slides, params.topic)

        response = await self._call(build_plan_prompt(params, total_slides), task="plan")
        plan = build_plan(parse_json(response.text, {}), params)

        steps = self._record_steps(plan, params)
        logger.info("Planning complete: %d key messages, %d steps", len(plan.key_messages), len(steps))
        return PlanningOutcome(plan=plan, steps=steps, tokens_used=response.tokens_used)

    def _record_steps(self, plan: PresentationPlan, params: GenerationParams) -> list[ThinkingStep]:
        audience = plan.target_audience
        strategy = plan.content_strategy
        structure = plan.structure_plan
        visual = plan.visual_strategy
        entries = [
            (
                f'Analyzed topic "{params.topic}" and settled on the main objective.',
                "Topic deep analysis",
                f"Main theme: {plan.main_objective}",
            ),
        ]
        if params.raw_data:
            entries.append((
                "Analyzed raw data input to extract structure and content hierarchy.",
                "Raw data analysis",
                f"Raw data length: {len(params.raw_data)} characters",
            ))
        entries.extend([
            (
                f'Profiled audience "{audience.type}" - knowledge level: {audience.knowledge_level}.',
                "Audience profiling",
                f"Pain points: {', '.join(audience.pain_points) or 'none identified'}",
            ),
            (
                f"Developed {strategy.narrative_arc} narrative arc with {strategy.hook_type} hook.",
                "Content strategy development",
                f"Storytelling approach: {strategy.storytelling_approach}",
            ),
            (
                f"Planned {plan.estimated_slides} slides "
                f"({structure.opening_slides} opening, {structure.content_slides} content, "
                f"{structure.data_slides} data, {structure.closing_slides} closing).",
                "Structure planning",
                f"Transition points: {', '.join(structure.transition_points) or 'none'}",
            ),
            (
                f"Defined {visual.color_mood} color mood with {visual.image_style} image style.",
                "Visual strategy definition",
                f"Layout variety: {', '.join(visual.layout_variety)}",
            ),
            (
                f"Synthesized plan with {len(plan.key_messages)} key messages.",
                "Plan synthesis",
                f"Potential challenges: {len(plan.potential_challenges)}",
            ),
        ])
        return [
            ThinkingStep(
                step_number=i + 1,
                phase=ThinkingPhase.PLANNING,
                thought=thought,
                action=action,
                observation=observation,
            )
            for i, (thought, action, observation) in enumerate(entries)
        ]
