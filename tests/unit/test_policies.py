"""
Unit tests for session limits, the stop policy and the session state machine.
"""
import asyncio

import pytest

from slidethinker.core.errors import ThinkingCancelledError, ThinkingInvariantError
from slidethinker.models import GenerationParams, QualityLevel, ThinkingPhase, ThinkingStep
from slidethinker.services.thinking_agent.policies import (
    SessionLimits,
    StopPolicy,
    StopReason,
    planning_token_cost,
    resolve_limits,
)
from slidethinker.services.thinking_agent.state import ThinkingSession


class TestResolveLimits:
    """Tests for quality-level mapping and hard caps."""

    @pytest.mark.parametrize("level, iterations, target, budget", [
        (QualityLevel.STANDARD, 1, 6.0, 15000),
        (QualityLevel.HIGH, 3, 7.5, 35000),
        (QualityLevel.PREMIUM, 3, 8.5, 60000),
    ])
    def test_levels(self, level, iterations, target, budget):
        limits = resolve_limits(GenerationParams(topic="Topic", quality_level=level))
        assert limits == SessionLimits(iterations, target, budget)

    def test_explicit_values_are_capped(self):
        params = GenerationParams(topic="Topic", max_thinking_iterations=10, target_quality_score=9.5)
        limits = resolve_limits(params)
        assert limits.max_iterations == 3
        assert limits.target_score == 8.5

    def test_explicit_values_below_caps(self):
        params = GenerationParams(topic="Topic", max_thinking_iterations=2, target_quality_score=6.5)
        limits = resolve_limits(params)
        assert limits.max_iterations == 2
        assert limits.target_score == 6.5

    def test_planning_token_cost(self):
        assert planning_token_cost(1234, 6) == 1234
        assert planning_token_cost(0, 6) == 3000


class TestStopPolicy:
    """Tests for stop-condition order and plateau detection."""

    def test_target_wins_over_refinement_request(self):
        policy = StopPolicy(SessionLimits(3, 7.5, 35000))
        assert policy.check(1, 8.0, should_refine=True, tokens_used=0) == StopReason.TARGET_REACHED

    def test_no_refinement_needed(self):
        policy = StopPolicy(SessionLimits(3, 7.5, 35000))
        assert policy.check(1, 7.0, should_refine=False, tokens_used=99999) == StopReason.NO_REFINEMENT_NEEDED

    def test_max_iterations_before_budget(self):
        policy = StopPolicy(SessionLimits(1, 7.5, 100))
        assert policy.check(1, 5.0, should_refine=True, tokens_used=500) == StopReason.MAX_ITERATIONS

    def test_budget_exhausted(self):
        policy = StopPolicy(SessionLimits(3, 7.5, 1000))
        assert policy.check(1, 5.0, should_refine=True, tokens_used=999) is None
        assert policy.check(2, 6.0, should_refine=True, tokens_used=1000) == StopReason.BUDGET_EXHAUSTED

    def test_plateau_triggers_on_second_small_gain(self):
        policy = StopPolicy(SessionLimits(5, 9.0, 10**6))
        reasons = [policy.check(i + 1, score, True, 0) for i, score in enumerate([5.0, 5.2, 5.3])]
        assert reasons == [None, None, StopReason.PLATEAU]

    def test_steady_gains_never_plateau(self):
        policy = StopPolicy(SessionLimits(5, 9.0, 10**6))
        reasons = [policy.check(i + 1, score, True, 0) for i, score in enumerate([5.0, 5.5, 6.0, 6.5])]
        assert reasons == [None, None, None, None]
        assert policy.plateau_count == 0

    def test_exact_threshold_gain_resets_counter(self):
        policy = StopPolicy(SessionLimits(5, 9.0, 10**6))
        policy.check(1, 5.0, True, 0)
        policy.check(2, 5.1, True, 0)
        assert policy.plateau_count == 1
        assert policy.check(3, 5.4, True, 0) is None
        assert policy.plateau_count == 0


class TestThinkingSession:
    """Tests for the owned session state."""

    def test_legal_path(self):
        session = ThinkingSession(max_iterations=2, target_score=7.5)
        for phase in (
            ThinkingPhase.RESEARCH,
            ThinkingPhase.GENERATION,
            ThinkingPhase.REFLECTION,
            ThinkingPhase.REFINEMENT,
            ThinkingPhase.GENERATION,
            ThinkingPhase.REFLECTION,
        ):
            session.transition(phase)
        session.complete()
        snapshot = session.snapshot()
        assert snapshot.current_phase == ThinkingPhase.COMPLETE
        assert snapshot.end_time is not None

    def test_same_phase_is_a_no_op(self):
        session = ThinkingSession(max_iterations=1, target_score=7.5)
        session.transition(ThinkingPhase.PLANNING)
        assert session.phase == ThinkingPhase.PLANNING

    @pytest.mark.parametrize("path", [
        [ThinkingPhase.REFLECTION],
        [ThinkingPhase.GENERATION, ThinkingPhase.RESEARCH],
        [ThinkingPhase.GENERATION, ThinkingPhase.COMPLETE],
    ])
    def test_illegal_transitions(self, path):
        session = ThinkingSession(max_iterations=1, target_score=7.5)
        with pytest.raises(ThinkingInvariantError):
            for phase in path:
                session.transition(phase)

    def test_iteration_cap(self):
        session = ThinkingSession(max_iterations=1, target_score=7.5)
        assert session.begin_iteration() == 1
        with pytest.raises(ThinkingInvariantError):
            session.begin_iteration()
        assert session.iterations == 1

    def test_record_renumbers_steps(self):
        session = ThinkingSession(max_iterations=1, target_score=7.5)
        session.add_step("first", "a", "o")
        recorded = session.record([
            ThinkingStep(step_number=1, phase=ThinkingPhase.PLANNING, thought="x"),
            ThinkingStep(step_number=2, phase=ThinkingPhase.PLANNING, thought="y"),
        ])
        assert [s.step_number for s in recorded] == [2, 3]
        assert [s.thought for s in session.steps] == ["first", "x", "y"]

    def test_snapshot_is_independent(self):
        session = ThinkingSession(max_iterations=1, target_score=7.5)
        snapshot = session.snapshot()
        session.add_step("later", "a", "o")
        assert snapshot.steps == []

    def test_cancellation(self):
        event = asyncio.Event()
        session = ThinkingSession(max_iterations=1, target_score=7.5, cancel_event=event)
        session.check_cancelled()
        event.set()
        with pytest.raises(ThinkingCancelledError):
            session.check_cancelled()
