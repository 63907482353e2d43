"""Pydantic models and schemas for type-safe data handling."""

from .base import CamelModel
from .plan import (
    AudienceProfile,
    ContentStrategy,
    PresentationPlan,
    StructurePlan,
    VisualStrategy,
)
from .presentation import (
    BlockFormatting,
    ChartData,
    ChartDataset,
    EnhancedBlock,
    EnhancedPresentation,
    EnhancedSection,
    ImageSuggestion,
    PresentationMetadata,
)
from .thinking import (
    BrandGuidelines,
    CriteriaScore,
    GenerationMetadata,
    GenerationParams,
    GenerationResult,
    ImprovementSuggestion,
    QualityBreakdown,
    QualityLevel,
    QualityReport,
    ReflectionCriteria,
    ReflectionResult,
    ThinkingPhase,
    ThinkingState,
    ThinkingStep,
    utc_now,
)

__all__ = [
    "CamelModel",
    # Plan models
    "AudienceProfile",
    "ContentStrategy",
    "StructurePlan",
    "VisualStrategy",
    "PresentationPlan",
    # Presentation models
    "BlockFormatting",
    "ChartData",
    "ChartDataset",
    "ImageSuggestion",
    "EnhancedBlock",
    "EnhancedSection",
    "PresentationMetadata",
    "EnhancedPresentation",
    # Thinking models
    "ThinkingPhase",
    "QualityLevel",
    "ThinkingStep",
    "ThinkingState",
    "CriteriaScore",
    "ReflectionCriteria",
    "ImprovementSuggestion",
    "ReflectionResult",
    "QualityBreakdown",
    "QualityReport",
    "BrandGuidelines",
    "GenerationParams",
    "GenerationMetadata",
    "GenerationResult",
    "utc_now",
]
