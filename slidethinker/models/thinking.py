"""Thinking loop models: phases, trace steps, reflections, reports and results."""
from datetime import datetime, timezone
from enum import StrEnum
from typing import Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from .base import CamelModel
from .presentation import EnhancedPresentation

Priority = Literal["high", "medium", "low"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ThinkingPhase(StrEnum):
    """Phases of one thinking session."""
    PLANNING = "planning"
    RESEARCH = "research"
    GENERATION = "generation"
    REFLECTION = "reflection"
    REFINEMENT = "refinement"
    COMPLETE = "complete"


class QualityLevel(StrEnum):
    """Requested quality tier; selects iteration cap, target score and token budget."""
    STANDARD = "standard"
    HIGH = "high"
    PREMIUM = "premium"


class ThinkingStep(CamelModel):
    """One immutable trace entry."""
    model_config = ConfigDict(frozen=True)

    step_number: int
    phase: ThinkingPhase
    thought: str
    action: Optional[str] = None
    observation: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)


class ThinkingState(CamelModel):
    """Snapshot-able record of one session."""
    session_id: str
    current_phase: ThinkingPhase = ThinkingPhase.PLANNING
    steps: list[ThinkingStep] = Field(default_factory=list)
    iterations: int = 0
    max_iterations: int = 1
    quality_score: float = 0.0
    target_quality_score: float = 7.0
    start_time: datetime = Field(default_factory=utc_now)
    end_time: Optional[datetime] = None


class CriteriaScore(CamelModel):
    score: float = Field(..., ge=1, le=10)
    feedback: str


class ReflectionCriteria(CamelModel):
    """The seven fixed evaluation criteria."""
    clarity: CriteriaScore
    relevance: CriteriaScore
    engagement: CriteriaScore
    structure: CriteriaScore
    visual_appeal: CriteriaScore
    completeness: CriteriaScore
    audience_alignment: CriteriaScore


class ImprovementSuggestion(CamelModel):
    area: str = "General"
    current_state: str = "Needs improvement"
    suggested_change: str = "Review and enhance"
    priority: Priority = "medium"
    affected_sections: list[int] = Field(default_factory=list)


class ReflectionResult(CamelModel):
    """One critic pass over a presentation."""
    overall_score: float
    criteria: ReflectionCriteria
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    improvements: list[ImprovementSuggestion] = Field(default_factory=list)
    should_refine: bool


class QualityBreakdown(CamelModel):
    content_quality: float
    structure_quality: float
    engagement_potential: float
    visual_richness: float
    audience_alignment: float
    originality: float


class QualityReport(CamelModel):
    """External-facing summary derived from the latest reflection (0-100 scale)."""
    overall_score: float
    breakdown: QualityBreakdown
    suggestions: list[str] = Field(default_factory=list)
    comparison_to_target: float
    passed_threshold: bool


class BrandGuidelines(CamelModel):
    colors: list[str] = Field(default_factory=list)
    fonts: list[str] = Field(default_factory=list)
    tone: Optional[str] = None
    logos: list[str] = Field(default_factory=list)
    restrictions: list[str] = Field(default_factory=list)


class GenerationParams(CamelModel):
    """Input contract for one generation request."""
    topic: str = Field(..., min_length=1, description="What the presentation is about")
    tone: Optional[str] = None
    audience: Optional[str] = None
    length: Optional[int] = Field(default=None, ge=1, le=50, description="Requested slide count")
    type: Optional[str] = Field(default=None, description="presentation, document, pitch-deck or report")
    style: Optional[str] = None
    generate_images: bool = False
    use_thinking_mode: bool = False
    quality_level: QualityLevel = QualityLevel.HIGH
    max_thinking_iterations: Optional[int] = Field(default=None, ge=1)
    target_quality_score: Optional[float] = Field(default=None, gt=0, le=10)
    additional_context: Optional[str] = None
    raw_data: Optional[str] = None
    brand_guidelines: Optional[BrandGuidelines] = None

    @field_validator("topic")
    @classmethod
    def validate_topic(cls, v: str) -> str:
        """Reject whitespace-only topics."""
        topic = v.strip()
        if not topic:
            raise ValueError("Topic must not be empty")
        return topic


class GenerationMetadata(CamelModel):
    total_tokens_used: int = 0
    thinking_iterations: int = 0
    total_time_ms: int = 0
    model_used: str = ""
    fallback_used: bool = False
    generate_images: Optional[bool] = None
    stop_reason: Optional[str] = None


class GenerationResult(CamelModel):
    """Everything one session hands back to its caller."""
    presentation: EnhancedPresentation
    thinking_process: ThinkingState
    quality_report: QualityReport
    metadata: GenerationMetadata
