"""Quality-level limits and the stopping policy of the thinking loop."""
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from slidethinker.models import GenerationParams, QualityLevel

logger = logging.getLogger(__name__)

LEVEL_MAX_ITERATIONS = {
    QualityLevel.STANDARD: 1,
    QualityLevel.HIGH: 3,
    QualityLevel.PREMIUM: 5,
}

LEVEL_TARGET_SCORES = {
    QualityLevel.STANDARD: 6.0,
    QualityLevel.HIGH: 7.5,
    QualityLevel.PREMIUM: 9.0,
}

# Cumulative token budget per session
TOKEN_BUDGETS = {
    QualityLevel.STANDARD: 15000,
    QualityLevel.HIGH: 35000,
    QualityLevel.PREMIUM: 60000,
}

MAX_ITERATIONS_CAP = 3
TARGET_SCORE_CAP = 8.5
PLATEAU_MIN_IMPROVEMENT = 0.3
PLATEAU_LIMIT = 2
PLANNING_TOKENS_PER_STEP = 500
SCORE_EPSILON = 1e-9


@dataclass(frozen=True)
class SessionLimits:
    max_iterations: int
    target_score: float
    token_budget: int


def resolve_limits(params: GenerationParams) -> SessionLimits:
    """Resolve iteration cap, target and budget, then apply the hard caps."""
    level = params.quality_level
    max_iterations = params.max_thinking_iterations or LEVEL_MAX_ITERATIONS[level]
    target = params.target_quality_score or LEVEL_TARGET_SCORES[level]
    return SessionLimits(
        max_iterations=min(max_iterations, MAX_ITERATIONS_CAP),
        target_score=min(target, TARGET_SCORE_CAP),
        token_budget=TOKEN_BUDGETS[level],
    )


def planning_token_cost(measured: int, step_count: int) -> int:
    """Measured planning usage, or the per-step estimate when nothing was reported."""
    return measured if measured > 0 else step_count * PLANNING_TOKENS_PER_STEP


class StopReason(StrEnum):
    TARGET_REACHED = "target reached"
    NO_REFINEMENT_NEEDED = "no further refinement needed"
    MAX_ITERATIONS = "max iterations reached"
    PLATEAU = "quality plateaued"
    BUDGET_EXHAUSTED = "budget exhausted"


class StopPolicy:
    """
    Decides after each reflection whether the loop ends.
    
    Conditions are checked in a fixed order: target reached, no refinement
    needed, iteration cap, plateau, token budget. Plateau tracking carries
    state across iterations, so use one policy per session.
    """

    def __init__(self, limits: SessionLimits):
        self._limits = limits
        self._last_score = 0.0
        self._plateau_count = 0

    @property
    def plateau_count(self) -> int:
        return self._plateau_count

    def check(
        self,
        iteration: int,
        score: float,
        should_refine: bool,
        tokens_used: int,
    ) -> Optional[StopReason]:
        """Return the reason to stop, or None to continue refining."""
        if score >= self._limits.target_score:
            return StopReason.TARGET_REACHED
        if not should_refine:
            return StopReason.NO_REFINEMENT_NEEDED
        if iteration >= self._limits.max_iterations:
            return StopReason.MAX_ITERATIONS

        improvement = score - self._last_score
        if iteration > 1 and improvement < PLATEAU_MIN_IMPROVEMENT - SCORE_EPSILON:
            self._plateau_count += 1
            logger.info(
                "Minimal improvement detected (%+.2f). Plateau count: %d/%d",
                improvement, self._plateau_count, PLATEAU_LIMIT,
            )
            if self._plateau_count >= PLATEAU_LIMIT:
                return StopReason.PLATEAU
        else:
            self._plateau_count = 0
        self._last_score = score

        if tokens_used >= self._limits.token_budget:
            return StopReason.BUDGET_EXHAUSTED
        return None
