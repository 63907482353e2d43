"""Presentation plan models produced by the planning phase."""
from pydantic import Field

from .base import CamelModel


class AudienceProfile(CamelModel):
    """Who the presentation is for."""
    type: str = Field(default="general", description="Audience type description")
    knowledge_level: str = Field(default="intermediate", description="beginner, intermediate or expert")
    interests: list[str] = Field(default_factory=list)
    pain_points: list[str] = Field(default_factory=list)
    expected_outcome: str = Field(default="", description="What the audience wants to achieve")


class ContentStrategy(CamelModel):
    """Narrative choices for the deck."""
    narrative_arc: str = "Problem-Solution"
    hook_type: str = Field(default="question", description="question, statistic, story, quote or provocation")
    conclusion_style: str = Field(default="call-to-action", description="call-to-action, summary, vision or challenge")
    data_usage: str = Field(default="moderate", description="minimal, moderate or heavy")
    storytelling_approach: str = "Clear and engaging"


class StructurePlan(CamelModel):
    """Slide counts by role plus the planned transition points."""
    opening_slides: int = 1
    content_slides: int = 4
    data_slides: int = 2
    closing_slides: int = 1
    transition_points: list[str] = Field(default_factory=list)


class VisualStrategy(CamelModel):
    """Look and feel of the deck."""
    color_mood: str = "professional"
    image_style: str = "photography"
    chart_preference: str = "clean-minimal"
    layout_variety: list[str] = Field(default_factory=list)


class PresentationPlan(CamelModel):
    """Complete plan driving generation and evaluation."""
    main_objective: str = Field(..., description="Central message of the presentation")
    target_audience: AudienceProfile = Field(default_factory=AudienceProfile)
    content_strategy: ContentStrategy = Field(default_factory=ContentStrategy)
    structure_plan: StructurePlan = Field(default_factory=StructurePlan)
    visual_strategy: VisualStrategy = Field(default_factory=VisualStrategy)
    estimated_slides: int = Field(..., ge=1, description="Number of sections to generate")
    key_messages: list[str] = Field(..., min_length=1, description="Messages seeded cyclically into sections")
    potential_challenges: list[str] = Field(default_factory=list)
