"""
Generator Agent

Expands a plan into sections, one model call per section, strictly in order
since each prompt carries the headings of the two sections before it. Also
applies localized refinements: one section is rewritten per improvement and
swapped in by index.
"""
import logging
import math
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from slidethinker.models import (
    BlockFormatting,
    ChartData,
    EnhancedBlock,
    EnhancedPresentation,
    EnhancedSection,
    ImageSuggestion,
    ImprovementSuggestion,
    PresentationMetadata,
    PresentationPlan,
    ThinkingPhase,
    ThinkingStep,
)

from .base import ThinkingAgent
from .parsing import get_int, get_str, parse_json
from .prompts import (
    GENERATOR_AGENT_INSTRUCTIONS,
    build_refine_prompt,
    build_section_prompt,
    build_title_prompt,
)

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "title-content"
DEFAULT_TRANSITION = "fade"
DEFAULT_DURATION_SECONDS = 60
CONTINUITY_WINDOW = 2

HOOK_ROLES = {
    "question": "hook-question",
    "statistic": "hook-statistic",
    "story": "hook-story",
}

CONCLUSION_ROLES = {
    "call-to-action": "cta-conclusion",
    "vision": "vision-conclusion",
}

# (upper bound of fractional position, role); bounds are exclusive
BODY_ROLE_BANDS = (
    (0.3, "problem-setup"),
    (0.5, "solution-reveal"),
    (0.7, "evidence-data"),
    (0.85, "benefits-outcomes"),
)
FINAL_BODY_ROLE = "implementation-next-steps"

SECTION_LAYOUTS = {
    "hook-question": "title",
    "hook-statistic": "stats-grid",
    "hook-story": "quote-highlight",
    "title-intro": "title-subtitle",
    "problem-setup": "title-content",
    "solution-reveal": "image-right",
    "evidence-data": "chart-focus",
    "benefits-outcomes": "two-column",
    "implementation-next-steps": "timeline",
    "cta-conclusion": "title",
    "vision-conclusion": "image-full",
    "summary-conclusion": "title-content",
}

# Checked in order; first match wins
CATEGORY_KEYWORDS = {
    "Business": ["strategy", "marketing", "sales", "startup", "business", "company", "market"],
    "Technology": ["ai", "software", "tech", "digital", "data", "cloud", "api", "machine learning"],
    "Education": ["learn", "course", "training", "teach", "education", "student"],
    "Design": ["design", "ux", "ui", "creative", "visual", "brand"],
    "Science": ["research", "study", "experiment", "scientific", "analysis"],
}

DIFFICULTY_MAP = {
    "beginner": "beginner",
    "intermediate": "intermediate",
    "expert": "advanced",
}

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

_UNPARSED: dict = {}


def new_id() -> str:
    return str(uuid.uuid4())


def determine_section_role(index: int, total: int, plan: PresentationPlan) -> str:
    """Classify a slide's narrative role from its position."""
    if index == 0:
        return HOOK_ROLES.get(plan.content_strategy.hook_type, "title-intro")
    if index == total - 1:
        return CONCLUSION_ROLES.get(plan.content_strategy.conclusion_style, "summary-conclusion")

    position = index / (total - 1)
    for upper, role in BODY_ROLE_BANDS:
        if position < upper:
            return role
    return FINAL_BODY_ROLE


def layout_for_role(role: str) -> str:
    return SECTION_LAYOUTS.get(role, DEFAULT_LAYOUT)


def categorize(topic: str) -> str:
    lower_topic = topic.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword in lower_topic for keyword in keywords):
            return category
    return "General"


def build_metadata(plan: PresentationPlan, sections: list[EnhancedSection], topic: str) -> PresentationMetadata:
    total_seconds = sum(section.duration or DEFAULT_DURATION_SECONDS for section in sections)
    return PresentationMetadata(
        estimated_duration=math.ceil(total_seconds / 60),
        keywords=plan.key_messages[:5],
        summary=f"{plan.content_strategy.narrative_arc} presentation about {topic} for {plan.target_audience.type}",
        difficulty=DIFFICULTY_MAP.get(plan.target_audience.knowledge_level, "intermediate"),
        category=categorize(topic),
    )


def _validate_optional(model, raw: Any):
    """Validate a nested payload, dropping it when malformed."""
    if not isinstance(raw, dict):
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.debug("Dropping malformed %s: %s", model.__name__, e.error_count())
        return None


def build_block(raw: Any) -> EnhancedBlock:
    """Turn one model-produced block into an EnhancedBlock with a fresh id."""
    if not isinstance(raw, dict):
        return EnhancedBlock(id=new_id(), type="paragraph", content="" if raw is None else raw)
    content = raw.get("content")
    return EnhancedBlock(
        id=new_id(),
        type=get_str(raw, "type", "paragraph"),
        content="" if content is None else content,
        formatting=_validate_optional(BlockFormatting, raw.get("formatting")),
        chart_data=_validate_optional(ChartData, raw.get("chartData")),
    )


def build_blocks(raw_blocks: Any) -> list[EnhancedBlock]:
    if not isinstance(raw_blocks, list):
        return []
    return [build_block(raw) for raw in raw_blocks]


def fallback_section_data(index: int, layout: str) -> dict:
    return {
        "heading": f"Slide {index + 1}",
        "blocks": [{"type": "paragraph", "content": "Content for this slide"}],
        "layout": layout,
        "duration": DEFAULT_DURATION_SECONDS,
    }


def build_section(data: dict, index: int) -> EnhancedSection:
    """Build a section from parsed output, defaulting every missing field."""
    subheading = get_str(data, "subheading", "")
    notes = get_str(data, "speakerNotes", "")
    return EnhancedSection(
        id=new_id(),
        heading=get_str(data, "heading", f"Slide {index + 1}"),
        subheading=subheading or None,
        blocks=build_blocks(data.get("blocks")),
        layout=get_str(data, "layout", DEFAULT_LAYOUT),
        suggested_image=_validate_optional(ImageSuggestion, data.get("suggestedImage")),
        speaker_notes=notes or None,
        transition=get_str(data, "transition", DEFAULT_TRANSITION),
        duration=get_int(data, "duration", DEFAULT_DURATION_SECONDS),
    )


def merge_refinement(section: EnhancedSection, data: dict) -> EnhancedSection:
    """
    Apply a refinement response to a section.

    Only heading, blocks, layout and speaker notes change; the id,
    subheading, image suggestion, transition and duration carry over.
    """
    blocks = data.get("blocks")
    return section.model_copy(update={
        "heading": get_str(data, "heading", section.heading),
        "blocks": build_blocks(blocks) if isinstance(blocks, list) else section.blocks,
        "layout": get_str(data, "layout", section.layout),
        "speaker_notes": get_str(data, "speakerNotes", "") or section.speaker_notes,
    })


def sort_by_priority(improvements: list[ImprovementSuggestion]) -> list[ImprovementSuggestion]:
    """High before medium before low; input order kept within a priority."""
    return sorted(improvements, key=lambda i: PRIORITY_ORDER.get(i.priority, 2))


@dataclass
class GenerationOutcome:
    presentation: EnhancedPresentation
    steps: list[ThinkingStep] = field(default_factory=list)
    tokens_used: int = 0


class GeneratorAgent(ThinkingAgent):
    """Creates and refines presentation content."""

    agent_name = "GeneratorAgent"
    instructions = GENERATOR_AGENT_INSTRUCTIONS
    settings_prefix = "generator"

    async def generate_presentation(
        self,
        plan: PresentationPlan,
        topic: str,
        tone: Optional[str] = None,
        style: Optional[str] = None,
        raw_data: Optional[str] = None,
    ) -> GenerationOutcome:
        """
        Generate a complete presentation from the plan.

        Produces exactly ``plan.estimated_slides`` sections, in order.
        """
        start = time.monotonic()
        steps: list[ThinkingStep] = []
        tokens = 0

        title, subtitle, title_tokens = await self._generate_title(plan, topic)
        tokens += title_tokens
        steps.append(ThinkingStep(
            step_number=1,
            phase=ThinkingPhase.GENERATION,
            thought=f'Generated title: "{title}" with subtitle: "{subtitle}"',
            action="Title generation",
            observation=f"Title captures the main theme: {plan.main_objective}",
        ))

        sections: list[EnhancedSection] = []
        total = plan.estimated_slides
        for index in range(total):
            role = determine_section_role(index, total, plan)
            logger.info("Generating section %d/%d: %s", index + 1, total, role)
            section, section_tokens = await self._generate_section(
                plan,
                topic,
                index=index,
                total=total,
                role=role,
                previous_context=" -> ".join(s.heading for s in sections[-CONTINUITY_WINDOW:]),
                tone=tone or "professional",
                style=style or "professional",
                raw_data=raw_data or "",
            )
            sections.append(section)
            tokens += section_tokens
            steps.append(ThinkingStep(
                step_number=2 + index,
                phase=ThinkingPhase.GENERATION,
                thought=f'Generated {role} section: "{section.heading}" with {len(section.blocks)} blocks',
                action=f"Section {index + 1} generation",
                observation=f"Layout: {section.layout}, Duration: ~{section.duration}s",
            ))

        metadata = build_metadata(plan, sections, topic)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        steps.append(ThinkingStep(
            step_number=2 + total,
            phase=ThinkingPhase.GENERATION,
            thought=f"Generated metadata - Duration: {metadata.estimated_duration}min, Keywords: {len(metadata.keywords)}",
            action="Metadata generation",
            observation=f"Total generation time: {elapsed_ms}ms",
        ))

        logger.info("Generation complete: %d sections in %dms", len(sections), elapsed_ms)
        presentation = EnhancedPresentation(title=title, subtitle=subtitle, sections=sections, metadata=metadata)
        return GenerationOutcome(presentation=presentation, steps=steps, tokens_used=tokens)

    async def _generate_title(self, plan: PresentationPlan, topic: str) -> tuple[str, str, int]:
        response = await self._call(build_title_prompt(plan, topic), task="title")
        data = parse_json(response.text, {})
        title = get_str(data, "title", topic)
        subtitle = get_str(data, "subtitle", f"A comprehensive overview for {plan.target_audience.type}")
        return title, subtitle, response.tokens_used

    async def _generate_section(
        self,
        plan: PresentationPlan,
        topic: str,
        *,
        index: int,
        total: int,
        role: str,
        previous_context: str,
        tone: str,
        style: str,
        raw_data: str,
    ) -> tuple[EnhancedSection, int]:
        layout = layout_for_role(role)
        prompt = build_section_prompt(
            plan,
            topic,
            index=index,
            total=total,
            role=role,
            previous_context=previous_context,
            key_message=plan.key_messages[index % len(plan.key_messages)],
            tone=tone,
            style=style,
            layout=layout,
            raw_data=raw_data,
        )
        response = await self._call(prompt, task="section")
        data = parse_json(response.text, fallback_section_data(index, layout))
        return build_section(data, index), response.tokens_used

    async def apply_refinements(
        self,
        presentation: EnhancedPresentation,
        improvements: list[ImprovementSuggestion],
    ) -> GenerationOutcome:
        """
        Rewrite the sections named by each improvement, highest priority first.

        Sections are replaced by index on the given presentation, which is
        mutated and returned. Out-of-range indices are skipped.
        """
        steps: list[ThinkingStep] = []
        tokens = 0

        for improvement in sort_by_priority(improvements):
            logger.info("Applying %s priority improvement: %s", improvement.priority, improvement.area)
            for index in improvement.affected_sections:
                if not 0 <= index < len(presentation.sections):
                    logger.debug("Skipping out-of-range section %d for %s", index, improvement.area)
                    continue
                refined, refine_tokens = await self.refine_section(presentation.sections[index], improvement)
                presentation.sections[index] = refined
                tokens += refine_tokens
                steps.append(ThinkingStep(
                    step_number=len(steps) + 1,
                    phase=ThinkingPhase.REFINEMENT,
                    thought=f"Applied {improvement.priority} priority improvement to section {index}: {improvement.area}",
                    action=improvement.suggested_change,
                    observation=f'Section "{refined.heading}" updated',
                ))

        return GenerationOutcome(presentation=presentation, steps=steps, tokens_used=tokens)

    async def refine_section(
        self,
        section: EnhancedSection,
        improvement: ImprovementSuggestion,
    ) -> tuple[EnhancedSection, int]:
        """Return a replacement for one section (the original when the answer is unusable)."""
        response = await self._call(build_refine_prompt(section, improvement), task="refine")
        data = parse_json(response.text, _UNPARSED)
        if data is _UNPARSED:
            return section, response.tokens_used
        return merge_refinement(section, data), response.tokens_used
