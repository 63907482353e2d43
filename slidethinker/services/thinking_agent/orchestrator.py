"""
Thinking Orchestrator

Drives one session through plan -> (research) -> generate -> reflect ->
refine, stopping on the first condition of the StopPolicy. Also offers a
quick single-pass path, a streaming variant and a quick-vs-thinking
quality comparison.
"""
import asyncio
import logging
import time
from typing import AsyncIterator, Optional

from slidethinker.core.config import Settings, get_settings
from slidethinker.core.errors import ThinkingInvariantError
from slidethinker.models import (
    AudienceProfile,
    ContentStrategy,
    EnhancedPresentation,
    GenerationMetadata,
    GenerationParams,
    GenerationResult,
    ImprovementSuggestion,
    PresentationPlan,
    QualityBreakdown,
    QualityLevel,
    QualityReport,
    ReflectionResult,
    StructurePlan,
    ThinkingPhase,
    VisualStrategy,
)
from slidethinker.services.llm import get_model_gateway
from slidethinker.services.llm.gateway import CompletionGateway
from slidethinker.services.search import SearchProvider

from .critic import CriticAgent
from .events import ThinkingEvent, presentation_event, state_event, step_event
from .generator import GeneratorAgent
from .planner import DEFAULT_LAYOUT_VARIETY, DEFAULT_TRANSITIONS, PlannerAgent
from .policies import StopPolicy, StopReason, planning_token_cost, resolve_limits
from .research import ResearchAgent
from .state import ThinkingSession

logger = logging.getLogger(__name__)

BANNER = "=" * 40
QUICK_DEFAULT_LENGTH = 6
QUICK_TARGET_SCORE = 7.5
RESEARCH_MIN_TOPIC_LENGTH = 5
RESEARCH_KEY_QUESTIONS = 3
REFINE_PRIORITIES = {"high", "medium"}
FALLBACK_CRITERION_SCORE = 70.0
LEGACY_COMPARISON_BASE = 8

PHASE_DESCRIPTIONS = {
    ThinkingPhase.PLANNING: "Analyzing topic, profiling audience, and creating content strategy...",
    ThinkingPhase.RESEARCH: "Gathering relevant information and context...",
    ThinkingPhase.GENERATION: "Creating presentation content section by section...",
    ThinkingPhase.REFLECTION: "Evaluating quality and identifying improvements...",
    ThinkingPhase.REFINEMENT: "Applying improvements and enhancing content...",
    ThinkingPhase.COMPLETE: "Thinking process complete!",
}


def build_quick_plan(params: GenerationParams) -> PresentationPlan:
    """Fixed plan used by the quick path; no model call."""
    slides = params.length or QUICK_DEFAULT_LENGTH
    return PresentationPlan(
        main_objective=params.topic,
        target_audience=AudienceProfile(
            type=params.audience or "general",
            knowledge_level="intermediate",
            expected_outcome=f"Learn about {params.topic}",
        ),
        content_strategy=ContentStrategy(),
        structure_plan=StructurePlan(
            opening_slides=1,
            content_slides=max(slides - 2, 0),
            data_slides=1,
            closing_slides=1,
            transition_points=list(DEFAULT_TRANSITIONS),
        ),
        visual_strategy=VisualStrategy(layout_variety=list(DEFAULT_LAYOUT_VARIETY)),
        estimated_slides=slides,
        key_messages=[params.topic],
    )


def refinement_targets(reflection: ReflectionResult) -> list[ImprovementSuggestion]:
    """Improvements worth a refinement pass (high and medium priority)."""
    return [i for i in reflection.improvements if i.priority in REFINE_PRIORITIES]


def fallback_quality_report(score: float, target_score: float) -> QualityReport:
    """Report used when no reflection was recorded."""
    flat = FALLBACK_CRITERION_SCORE
    return QualityReport(
        overall_score=round(score * 10, 1),
        breakdown=QualityBreakdown(
            content_quality=flat,
            structure_quality=flat,
            engagement_potential=flat,
            visual_richness=flat,
            audience_alignment=flat,
            originality=flat,
        ),
        suggestions=[],
        comparison_to_target=round(score / LEGACY_COMPARISON_BASE * 100, 1),
        passed_threshold=score >= target_score,
    )


class ThinkingOrchestrator:
    """
    Coordinates the planner, research, generator and critic agents.

    Holds no per-session state: every call creates its own ThinkingSession,
    so one orchestrator can serve concurrent sessions.
    """

    def __init__(
        self,
        gateway: Optional[CompletionGateway] = None,
        settings: Optional[Settings] = None,
        search_provider: Optional[SearchProvider] = None,
        planner: Optional[PlannerAgent] = None,
        generator: Optional[GeneratorAgent] = None,
        critic: Optional[CriticAgent] = None,
        research: Optional[ResearchAgent] = None,
    ):
        self._settings = settings or get_settings()
        gateway = gateway or get_model_gateway()
        self.planner = planner or PlannerAgent(gateway, self._settings)
        self.generator = generator or GeneratorAgent(gateway, self._settings)
        self.critic = critic or CriticAgent(gateway, self._settings)
        self.research = research or ResearchAgent(gateway, search_provider, self._settings)

    def get_phase_description(self, phase: ThinkingPhase) -> str:
        return PHASE_DESCRIPTIONS[ThinkingPhase(phase)]

    def _should_research(self, params: GenerationParams) -> bool:
        return (
            self._settings.research_enabled
            and not params.raw_data
            and len(params.topic) > RESEARCH_MIN_TOPIC_LENGTH
            and not params.use_thinking_mode
        )

    async def _run_research(self, session: ThinkingSession, params: GenerationParams, plan: PresentationPlan) -> str:
        """Best-effort research; any failure leaves the session without research text."""
        logger.info(BANNER)
        logger.info("PHASE 1.5: RESEARCH")
        logger.info(BANNER)
        session.transition(ThinkingPhase.RESEARCH)
        try:
            findings = await self.research.conduct_research(params.topic, plan.key_messages[:RESEARCH_KEY_QUESTIONS])
        except Exception as e:
            logger.warning("Research phase failed (non-critical): %s", e)
            return ""

        session.add_tokens(findings.tokens_used)
        text = findings.to_research_text()
        if text:
            session.add_step(
                thought=(
                    f'Conducted web research on "{params.topic}" to ensure factual accuracy. '
                    f"Found {len(findings.sources)} sources."
                ),
                action="Web Research",
                observation=f"Key data points: {len(findings.data_points)} found.",
            )
            logger.info("Research complete: %d sources found", len(findings.sources))
        return text

    async def generate_with_thinking(
        self,
        params: GenerationParams,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationResult:
        """
        Run the full thinking loop for one request.

        Args:
            params: Validated generation parameters
            cancel_event: Optional event checked at every phase boundary

        Returns:
            GenerationResult with the final presentation, trace and report

        Raises:
            ModelGatewayError: A planning, generation or reflection call failed
            ThinkingCancelledError: cancel_event was set
            ThinkingInvariantError: An internal contract was violated
        """
        start = time.monotonic()
        limits = resolve_limits(params)
        session = ThinkingSession(limits.max_iterations, limits.target_score, cancel_event=cancel_event)
        policy = StopPolicy(limits)
        presentation: Optional[EnhancedPresentation] = None
        last_reflection: Optional[ReflectionResult] = None
        stop_reason: Optional[StopReason] = None

        logger.info("Starting thinking loop [session: %s]", session.session_id)
        logger.info("Target quality: %s/10, max iterations: %d", limits.target_score, limits.max_iterations)
        logger.info("Token budget: %d tokens", limits.token_budget)

        try:
            logger.info(BANNER)
            logger.info("PHASE 1: PLANNING")
            logger.info(BANNER)
            session.check_cancelled()
            planning = await self.planner.create_plan(params)
            plan = planning.plan
            session.record(planning.steps)
            session.add_tokens(planning_token_cost(planning.tokens_used, len(planning.steps)))
            logger.info("Planning complete: %d steps", len(planning.steps))

            research_text = params.raw_data or ""
            if self._should_research(params):
                session.check_cancelled()
                research_text = await self._run_research(session, params, plan)

            while session.iterations < session.max_iterations:
                session.check_cancelled()
                iteration = session.begin_iteration()
                logger.info("=== ITERATION %d/%d ===", iteration, session.max_iterations)

                session.transition(ThinkingPhase.GENERATION)
                if iteration == 1:
                    if plan is None:
                        raise ThinkingInvariantError("Generation reached without a plan")
                    logger.info("PHASE 2: GENERATION")
                    generation = await self.generator.generate_presentation(
                        plan,
                        params.topic,
                        tone=params.tone,
                        style=params.style,
                        raw_data=research_text,
                    )
                    presentation = generation.presentation
                    session.record(generation.steps)
                    session.add_tokens(generation.tokens_used)

                if presentation is None:
                    raise ThinkingInvariantError("No presentation available for reflection")
                logger.info("Presentation has %d sections", len(presentation.sections))

                session.check_cancelled()
                session.transition(ThinkingPhase.REFLECTION)
                logger.info("PHASE 3: REFLECTION")
                outcome = await self.critic.reflect(presentation, plan, params.topic, limits.target_score)
                last_reflection = outcome.reflection
                session.record(outcome.steps)
                session.add_tokens(outcome.tokens_used)
                session.quality_score = last_reflection.overall_score
                logger.info(
                    "Quality score: %.1f/10 (target: %s)",
                    last_reflection.overall_score, limits.target_score,
                )

                # With the iteration cap at 3 the max-iterations stop always precedes a plateau stop.
                stop_reason = policy.check(
                    iteration,
                    last_reflection.overall_score,
                    last_reflection.should_refine,
                    session.tokens_used,
                )
                if stop_reason is not None:
                    logger.info("Stopping: %s", stop_reason)
                    break
                logger.info("Token usage: %d/%d", session.tokens_used, limits.token_budget)

                session.check_cancelled()
                session.transition(ThinkingPhase.REFINEMENT)
                logger.info("PHASE 4: REFINEMENT")
                targets = refinement_targets(last_reflection)
                if targets:
                    logger.info("Applying %d improvements...", len(targets))
                    refinement = await self.generator.apply_refinements(presentation, targets)
                    presentation = refinement.presentation
                    session.record(refinement.steps)
                    session.add_tokens(refinement.tokens_used)
                else:
                    logger.info("No high-priority improvements to apply.")
        except Exception:
            logger.exception("Thinking loop failed [session: %s]", session.session_id)
            raise

        if presentation is None:
            raise ThinkingInvariantError("Thinking loop finished without a presentation")

        session.complete()
        total_ms = int((time.monotonic() - start) * 1000)
        if last_reflection is not None:
            report = self.critic.generate_quality_report(last_reflection, limits.target_score)
        else:
            report = fallback_quality_report(session.quality_score, limits.target_score)

        logger.info(BANNER)
        logger.info("THINKING LOOP COMPLETE")
        logger.info(BANNER)
        logger.info("Final quality score: %.1f/10", session.quality_score)
        logger.info("Total iterations: %d, steps: %d", session.iterations, len(session.steps))
        logger.info("Total time: %.1fs, tokens used: %d", total_ms / 1000, session.tokens_used)

        return GenerationResult(
            presentation=presentation,
            thinking_process=session.snapshot(),
            quality_report=report,
            metadata=GenerationMetadata(
                total_tokens_used=session.tokens_used,
                thinking_iterations=session.iterations,
                total_time_ms=total_ms,
                model_used=self._settings.azure_openai_deployment,
                fallback_used=False,
                generate_images=params.generate_images,
                stop_reason=str(stop_reason or StopReason.MAX_ITERATIONS),
            ),
        )

    async def generate_quick(self, params: GenerationParams) -> GenerationResult:
        """Single generate + reflect pass on a fixed plan; the reflection is for reporting only."""
        start = time.monotonic()
        target = params.target_quality_score or QUICK_TARGET_SCORE
        session = ThinkingSession(max_iterations=1, target_score=target)
        logger.info("Quick generation mode [session: %s]", session.session_id)

        plan = build_quick_plan(params)
        session.add_step(
            thought="Quick planning with minimal analysis",
            action="Quick plan creation",
            observation=f"Created plan for {plan.estimated_slides} slides",
        )

        session.begin_iteration()
        session.transition(ThinkingPhase.GENERATION)
        generation = await self.generator.generate_presentation(
            plan,
            params.topic,
            tone=params.tone,
            style=params.style,
            raw_data=params.raw_data,
        )
        session.record(generation.steps)
        session.add_tokens(generation.tokens_used)

        session.transition(ThinkingPhase.REFLECTION)
        outcome = await self.critic.reflect(generation.presentation, plan, params.topic, target)
        session.record(outcome.steps)
        session.add_tokens(outcome.tokens_used)
        session.quality_score = outcome.reflection.overall_score
        session.complete()

        return GenerationResult(
            presentation=generation.presentation,
            thinking_process=session.snapshot(),
            quality_report=self.critic.generate_quality_report(outcome.reflection, target),
            metadata=GenerationMetadata(
                total_tokens_used=session.tokens_used,
                thinking_iterations=1,
                total_time_ms=int((time.monotonic() - start) * 1000),
                model_used=self._settings.azure_openai_deployment,
                fallback_used=False,
                generate_images=params.generate_images,
                stop_reason="quick generation",
            ),
        )

    async def stream_thinking(
        self,
        params: GenerationParams,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncIterator[ThinkingEvent]:
        """
        Yield progress events for one session.

        Runs planning, optional research, one generation and one reflection,
        then at most one refinement pass when the critic asks for it.
        """
        limits = resolve_limits(params)
        session = ThinkingSession(limits.max_iterations, limits.target_score, cancel_event=cancel_event)
        yield state_event(session.snapshot())

        session.check_cancelled()
        planning = await self.planner.create_plan(params)
        plan = planning.plan
        for step in session.record(planning.steps):
            yield step_event(step)
        session.add_tokens(planning_token_cost(planning.tokens_used, len(planning.steps)))

        research_text = params.raw_data or ""
        if self._should_research(params):
            session.check_cancelled()
            session.transition(ThinkingPhase.RESEARCH)
            yield state_event(session.snapshot())
            before = len(session.steps)
            research_text = await self._run_research(session, params, plan)
            for step in session.steps[before:]:
                yield step_event(step)

        session.check_cancelled()
        session.begin_iteration()
        session.transition(ThinkingPhase.GENERATION)
        yield state_event(session.snapshot())
        generation = await self.generator.generate_presentation(
            plan,
            params.topic,
            tone=params.tone,
            style=params.style,
            raw_data=research_text,
        )
        presentation = generation.presentation
        session.add_tokens(generation.tokens_used)
        for step in session.record(generation.steps):
            yield step_event(step)
        yield presentation_event(presentation)

        session.check_cancelled()
        session.transition(ThinkingPhase.REFLECTION)
        yield state_event(session.snapshot())
        outcome = await self.critic.reflect(presentation, plan, params.topic, limits.target_score)
        session.add_tokens(outcome.tokens_used)
        for step in session.record(outcome.steps):
            yield step_event(step)
        session.quality_score = outcome.reflection.overall_score

        if outcome.reflection.should_refine and session.iterations < session.max_iterations:
            session.check_cancelled()
            session.transition(ThinkingPhase.REFINEMENT)
            yield state_event(session.snapshot())
            targets = refinement_targets(outcome.reflection)
            if targets:
                refinement = await self.generator.apply_refinements(presentation, targets)
                session.add_tokens(refinement.tokens_used)
                for step in session.record(refinement.steps):
                    yield step_event(step)
                yield presentation_event(refinement.presentation)

        session.complete()
        yield state_event(session.snapshot())

    async def compare_quality(self, topic: str, audience: Optional[str] = None) -> dict:
        """Run the quick path and a high-quality thinking session on the same request."""
        base = {"topic": topic, "audience": audience, "length": QUICK_DEFAULT_LENGTH}
        quick = await self.generate_quick(GenerationParams(**base))
        thinking = await self.generate_with_thinking(
            GenerationParams(**base, quality_level=QualityLevel.HIGH)
        )
        quick_score = quick.quality_report.overall_score
        thinking_score = thinking.quality_report.overall_score
        improvement = round((thinking_score - quick_score) / quick_score * 100, 1) if quick_score else 0.0
        return {
            "thinking": {"score": thinking_score, "time": thinking.metadata.total_time_ms},
            "quick": {"score": quick_score, "time": quick.metadata.total_time_ms},
            "improvement": improvement,
        }
