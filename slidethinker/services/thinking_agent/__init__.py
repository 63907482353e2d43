"""Plan, generate, reflect and refine presentations with cooperating model agents."""

from .critic import CriticAgent
from .events import ThinkingEvent
from .generator import GeneratorAgent
from .jobs import (
    CreateProjectOptions,
    PresentationSink,
    ProjectRecord,
    ThinkingGenerationJob,
    run_thinking_job,
)
from .mapper import to_api_result
from .orchestrator import ThinkingOrchestrator
from .planner import PlannerAgent
from .policies import SessionLimits, StopPolicy, StopReason, resolve_limits
from .research import ResearchAgent, ResearchFindings
from .state import ThinkingSession

__all__ = [
    "CriticAgent",
    "GeneratorAgent",
    "PlannerAgent",
    "ResearchAgent",
    "ResearchFindings",
    "ThinkingOrchestrator",
    "ThinkingSession",
    "ThinkingEvent",
    "SessionLimits",
    "StopPolicy",
    "StopReason",
    "resolve_limits",
    "ThinkingGenerationJob",
    "CreateProjectOptions",
    "ProjectRecord",
    "PresentationSink",
    "run_thinking_job",
    "to_api_result",
]
