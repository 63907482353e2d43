"""
Critic Agent

Scores a presentation on seven fixed criteria, one model call each and
issued sequentially, then aggregates a weighted overall score, synthesizes
strengths and weaknesses and proposes targeted improvements.
"""
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any

from slidethinker.models import (
    CriteriaScore,
    EnhancedPresentation,
    ImprovementSuggestion,
    PresentationPlan,
    QualityBreakdown,
    QualityReport,
    ReflectionCriteria,
    ReflectionResult,
    ThinkingPhase,
    ThinkingStep,
)

from .base import ThinkingAgent
from .content import block_content_text
from .parsing import get_str, get_str_list, parse_json
from .prompts import (
    CRITIC_AGENT_INSTRUCTIONS,
    build_audience_prompt,
    build_completeness_prompt,
    build_criterion_prompt,
    build_improvements_prompt,
    build_structure_prompt,
    build_synthesis_prompt,
    build_visual_prompt,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 10.0
FALLBACK_SCORE = 5.0
STRENGTH_THRESHOLD = 7
NO_FEEDBACK = "No feedback available"
PRIORITIES = {"high", "medium", "low"}

CRITERIA_WEIGHTS = {
    "clarity": 0.15,
    "relevance": 0.15,
    "engagement": 0.15,
    "structure": 0.15,
    "visual_appeal": 0.10,
    "completeness": 0.15,
    "audience_alignment": 0.15,
}

CRITERIA_LABELS = {
    "clarity": "Clarity",
    "relevance": "Relevance",
    "engagement": "Engagement",
    "structure": "Structure",
    "visual_appeal": "Visual appeal",
    "completeness": "Completeness",
    "audience_alignment": "Audience alignment",
}

CLARITY_DESCRIPTION = (
    "How clear and easy to understand is the content? "
    "Consider language simplicity, logical flow, and jargon usage."
)
ENGAGEMENT_DESCRIPTION = (
    "How engaging is this presentation? "
    "Consider hooks, storytelling, visual variety, and audience interaction potential."
)


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves away from zero for positive scores (5.75 -> 5.8)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5 + 1e-9) / factor


def clamp_score(value: Any) -> float:
    """Coerce a model-reported score into [1, 10]; non-numeric values become 5."""
    if isinstance(value, bool):
        return FALLBACK_SCORE
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return FALLBACK_SCORE
    if not isinstance(value, (int, float)) or math.isnan(value):
        return FALLBACK_SCORE
    return float(max(MIN_SCORE, min(MAX_SCORE, value)))


def calculate_overall_score(criteria: ReflectionCriteria) -> float:
    """Weighted mean of the seven criteria, rounded to one decimal."""
    weighted = sum(getattr(criteria, name).score * weight for name, weight in CRITERIA_WEIGHTS.items())
    return round_half_up(weighted, 1)


def covered_key_messages(presentation: EnhancedPresentation, key_messages: list[str]) -> list[str]:
    """Key messages found (case-insensitively) in any heading or block content."""
    texts = []
    for section in presentation.sections:
        texts.append(section.heading.lower())
        texts.extend(block_content_text(block.content).lower() for block in section.blocks)
    return [message for message in key_messages if any(message.lower() in text for text in texts)]


def should_refine(overall_score: float, target_score: float, improvements: list[ImprovementSuggestion]) -> bool:
    return overall_score < target_score or any(i.priority == "high" for i in improvements)


def build_improvement(raw: Any) -> ImprovementSuggestion:
    """Default every field of one suggested improvement."""
    data = raw if isinstance(raw, dict) else {}
    priority = get_str(data, "priority", "medium").lower()
    affected = data.get("affectedSections")
    indices = []
    if isinstance(affected, list):
        indices = [i for i in affected if isinstance(i, int) and not isinstance(i, bool)]
    return ImprovementSuggestion(
        area=get_str(data, "area", "General"),
        current_state=get_str(data, "currentState", "Needs improvement"),
        suggested_change=get_str(data, "suggestedChange", "Review and enhance"),
        priority=priority if priority in PRIORITIES else "medium",
        affected_sections=indices,
    )


def criteria_lines(criteria: ReflectionCriteria, below: float | None = None) -> list[str]:
    lines = []
    for name in CRITERIA_WEIGHTS:
        entry: CriteriaScore = getattr(criteria, name)
        if below is None or entry.score < below:
            lines.append(f"{name}: {entry.score}/10 - {entry.feedback}")
    return lines


def build_quality_report(reflection: ReflectionResult, target_score: float) -> QualityReport:
    """Project a reflection onto the external 0-100 quality report."""
    c = reflection.criteria
    breakdown = QualityBreakdown(
        content_quality=round((c.clarity.score + c.relevance.score) / 2 * 10, 1),
        structure_quality=round(c.structure.score * 10, 1),
        engagement_potential=round(c.engagement.score * 10, 1),
        visual_richness=round(c.visual_appeal.score * 10, 1),
        audience_alignment=round(c.audience_alignment.score * 10, 1),
        originality=round(c.completeness.score * 10, 1),
    )
    return QualityReport(
        overall_score=round(reflection.overall_score * 10, 1),
        breakdown=breakdown,
        suggestions=[f"{i.area}: {i.suggested_change}" for i in reflection.improvements],
        comparison_to_target=round(reflection.overall_score / target_score * 100, 1),
        passed_threshold=not reflection.should_refine,
    )


@dataclass
class ReflectionOutcome:
    reflection: ReflectionResult
    steps: list[ThinkingStep] = field(default_factory=list)
    tokens_used: int = 0


class CriticAgent(ThinkingAgent):
    """Evaluates generated content and proposes improvements."""

    agent_name = "CriticAgent"
    instructions = CRITIC_AGENT_INSTRUCTIONS
    settings_prefix = "critic"

    async def reflect(
        self,
        presentation: EnhancedPresentation,
        plan: PresentationPlan,
        topic: str,
        target_score: float,
    ) -> ReflectionOutcome:
        """
        Perform one full reflection pass.

        Args:
            presentation: Presentation to evaluate
            plan: Plan it was generated from
            topic: Requested topic
            target_score: Session target; below it the result asks for refinement

        Returns:
            ReflectionOutcome with a fresh should_refine decision
        """
        start = time.monotonic()
        steps: list[ThinkingStep] = []
        tokens = 0
        scores: dict[str, CriteriaScore] = {}

        for name, prompt in self._evaluation_prompts(presentation, plan, topic):
            label = CRITERIA_LABELS[name]
            logger.info("Evaluating %s...", label.lower())
            score, used = await self._evaluate(prompt, name)
            scores[name] = score
            tokens += used
            steps.append(ThinkingStep(
                step_number=len(steps) + 1,
                phase=ThinkingPhase.REFLECTION,
                thought=f"{label} score: {score.score:g}/10 - {score.feedback}",
                action=f"{label} evaluation",
                observation=score.feedback,
            ))

        criteria = ReflectionCriteria(**scores)
        strengths, weaknesses, synthesis_tokens = await self._synthesize(presentation, criteria, topic)
        improvements, improvement_tokens = await self._generate_improvements(presentation, criteria, weaknesses, topic)
        tokens += synthesis_tokens + improvement_tokens
        steps.append(ThinkingStep(
            step_number=len(steps) + 1,
            phase=ThinkingPhase.REFLECTION,
            thought=f"Synthesized {len(strengths)} strengths and {len(weaknesses)} weaknesses",
            action="Synthesis and improvement generation",
            observation=f"Generated {len(improvements)} improvement suggestions",
        ))

        overall = calculate_overall_score(criteria)
        refine = should_refine(overall, target_score, improvements)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        steps.append(ThinkingStep(
            step_number=len(steps) + 1,
            phase=ThinkingPhase.REFLECTION,
            thought=f"Overall score: {overall:.1f}/10. Should refine: {str(refine).lower()}",
            action="Final reflection synthesis",
            observation=f"Total reflection time: {elapsed_ms}ms",
        ))
        logger.info("Reflection complete: score %.1f/10 in %dms", overall, elapsed_ms)

        reflection = ReflectionResult(
            overall_score=overall,
            criteria=criteria,
            strengths=strengths,
            weaknesses=weaknesses,
            improvements=improvements,
            should_refine=refine,
        )
        return ReflectionOutcome(reflection=reflection, steps=steps, tokens_used=tokens)

    def generate_quality_report(self, reflection: ReflectionResult, target_score: float) -> QualityReport:
        return build_quality_report(reflection, target_score)

    def _evaluation_prompts(
        self,
        presentation: EnhancedPresentation,
        plan: PresentationPlan,
        topic: str,
    ) -> list[tuple[str, str]]:
        """Criterion name and prompt for each evaluation, in evaluation order."""
        layouts = list(dict.fromkeys(section.layout for section in presentation.sections))
        covered = covered_key_messages(presentation, plan.key_messages)
        relevance = (
            f'How relevant is the content to the topic "{topic}" '
            f'and the target audience "{plan.target_audience.type}"?'
        )
        return [
            ("clarity", build_criterion_prompt(presentation, "clarity", CLARITY_DESCRIPTION)),
            ("relevance", build_criterion_prompt(presentation, "relevance", relevance)),
            ("engagement", build_criterion_prompt(presentation, "engagement", ENGAGEMENT_DESCRIPTION)),
            ("structure", build_structure_prompt(presentation, plan)),
            ("visual_appeal", build_visual_prompt(
                plan.visual_strategy,
                layouts_used=layouts,
                section_count=len(presentation.sections),
                has_images=any(s.suggested_image for s in presentation.sections),
                notes_count=sum(1 for s in presentation.sections if s.speaker_notes),
            )),
            ("completeness", build_completeness_prompt(presentation, plan, covered)),
            ("audience_alignment", build_audience_prompt(presentation, plan.target_audience)),
        ]

    async def _evaluate(self, prompt: str, criterion: str) -> tuple[CriteriaScore, int]:
        label = CRITERIA_LABELS[criterion].lower()
        response = await self._call(prompt, task=f"evaluate-{criterion}")
        data = parse_json(response.text, {"score": FALLBACK_SCORE, "feedback": f"Unable to evaluate {label}"})
        score = CriteriaScore(
            score=clamp_score(data.get("score")),
            feedback=get_str(data, "feedback", NO_FEEDBACK),
        )
        return score, response.tokens_used

    async def _synthesize(
        self,
        presentation: EnhancedPresentation,
        criteria: ReflectionCriteria,
        topic: str,
    ) -> tuple[list[str], list[str], int]:
        prompt = build_synthesis_prompt(presentation, criteria_lines(criteria), topic)
        response = await self._call(prompt, task="synthesis")
        data = parse_json(response.text, {"strengths": [], "weaknesses": []})
        return (
            get_str_list(data, "strengths", []),
            get_str_list(data, "weaknesses", []),
            response.tokens_used,
        )

    async def _generate_improvements(
        self,
        presentation: EnhancedPresentation,
        criteria: ReflectionCriteria,
        weaknesses: list[str],
        topic: str,
    ) -> tuple[list[ImprovementSuggestion], int]:
        if not weaknesses:
            return [], 0

        prompt = build_improvements_prompt(
            presentation,
            weaknesses,
            criteria_lines(criteria, below=STRENGTH_THRESHOLD),
            topic,
        )
        response = await self._call(prompt, task="improvements")
        data = parse_json(response.text, {"improvements": []})
        raw_items = data.get("improvements")
        if not isinstance(raw_items, list):
            raw_items = []
        return [build_improvement(raw) for raw in raw_items], response.tokens_used
