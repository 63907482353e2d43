"""Owned per-session state with an enforced phase machine."""
import asyncio
import logging
import uuid
from typing import Optional

from slidethinker.core.errors import ThinkingCancelledError, ThinkingInvariantError
from slidethinker.models import ThinkingPhase, ThinkingState, ThinkingStep, utc_now

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    ThinkingPhase.PLANNING: {ThinkingPhase.RESEARCH, ThinkingPhase.GENERATION},
    ThinkingPhase.RESEARCH: {ThinkingPhase.GENERATION},
    ThinkingPhase.GENERATION: {ThinkingPhase.REFLECTION},
    ThinkingPhase.REFLECTION: {ThinkingPhase.REFINEMENT, ThinkingPhase.COMPLETE},
    ThinkingPhase.REFINEMENT: {ThinkingPhase.GENERATION, ThinkingPhase.COMPLETE},
    ThinkingPhase.COMPLETE: set(),
}


class ThinkingSession:
    """
    The single mutable record of one run.
    
    Owned by one orchestrator call; never shared between sessions. The step
    log only grows, the iteration counter never passes the cap, and phases
    only move along ALLOWED_TRANSITIONS.
    """

    def __init__(
        self,
        max_iterations: int,
        target_score: float,
        session_id: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        self._state = ThinkingState(
            session_id=session_id or str(uuid.uuid4()),
            max_iterations=max_iterations,
            target_quality_score=target_score,
        )
        self._cancel_event = cancel_event
        self.tokens_used = 0

    @property
    def session_id(self) -> str:
        return self._state.session_id

    @property
    def phase(self) -> ThinkingPhase:
        return self._state.current_phase

    @property
    def iterations(self) -> int:
        return self._state.iterations

    @property
    def max_iterations(self) -> int:
        return self._state.max_iterations

    @property
    def target_score(self) -> float:
        return self._state.target_quality_score

    @property
    def quality_score(self) -> float:
        return self._state.quality_score

    @quality_score.setter
    def quality_score(self, value: float) -> None:
        self._state.quality_score = value

    @property
    def steps(self) -> list[ThinkingStep]:
        return list(self._state.steps)

    def transition(self, phase: ThinkingPhase) -> None:
        """Move to ``phase``; staying in the current phase is a no-op."""
        current = self._state.current_phase
        if phase == current:
            return
        if phase not in ALLOWED_TRANSITIONS[current]:
            raise ThinkingInvariantError(f"Illegal phase transition: {current} -> {phase}")
        logger.debug("Session %s: %s -> %s", self.session_id, current, phase)
        self._state.current_phase = phase

    def begin_iteration(self) -> int:
        if self._state.iterations >= self._state.max_iterations:
            raise ThinkingInvariantError(
                f"Iteration cap exceeded ({self._state.max_iterations})"
            )
        self._state.iterations += 1
        return self._state.iterations

    def record(self, steps: list[ThinkingStep]) -> list[ThinkingStep]:
        """Append agent steps, renumbered to continue the session log."""
        recorded = []
        for step in steps:
            numbered = step.model_copy(update={"step_number": len(self._state.steps) + 1})
            self._state.steps.append(numbered)
            recorded.append(numbered)
        return recorded

    def add_step(self, thought: str, action: str, observation: str) -> ThinkingStep:
        """Append a step in the current phase, numbered after the existing log."""
        step = ThinkingStep(
            step_number=len(self._state.steps) + 1,
            phase=self._state.current_phase,
            thought=thought,
            action=action,
            observation=observation,
        )
        self._state.steps.append(step)
        return step

    def add_tokens(self, count: int) -> None:
        self.tokens_used += count

    def check_cancelled(self) -> None:
        """Raise if the caller asked to stop; checked at phase boundaries."""
        if self._cancel_event is not None and self._cancel_event.is_set():
            logger.info("Session %s cancelled during %s", self.session_id, self.phase)
            raise ThinkingCancelledError(f"Session {self.session_id} cancelled during {self.phase}")

    def complete(self) -> None:
        self.transition(ThinkingPhase.COMPLETE)
        self._state.end_time = utc_now()

    def snapshot(self) -> ThinkingState:
        """Independent copy, safe to hand to callers."""
        return self._state.model_copy(deep=True)
