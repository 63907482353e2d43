"""Presentation models: the evolving work product of the thinking loop."""
from typing import Any, Optional, Union

from pydantic import Field

from .base import CamelModel


class BlockFormatting(CamelModel):
    """Optional rendering hints for a block."""
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = None
    size: Optional[str] = None
    alignment: Optional[str] = None
    variant: Optional[str] = None


class ChartDataset(CamelModel):
    label: str = ""
    data: list[float] = Field(default_factory=list)
    background_color: Optional[Union[str, list[str]]] = None
    border_color: Optional[Union[str, list[str]]] = None


class ChartData(CamelModel):
    """Chart payload attached to a chart block."""
    type: str = "bar"
    labels: list[str] = Field(default_factory=list)
    datasets: list[ChartDataset] = Field(default_factory=list)
    options: Optional[dict[str, Any]] = None


class ImageSuggestion(CamelModel):
    prompt: str = ""
    style: str = ""
    placement: str = ""


class EnhancedBlock(CamelModel):
    """One atomic content unit within a section."""
    id: str = Field(..., description="Stable block identifier")
    type: str = Field(default="paragraph", description="heading, paragraph, chart, quote, ...")
    content: Any = Field(default="", description="String, list or object depending on type")
    formatting: Optional[BlockFormatting] = None
    chart_data: Optional[ChartData] = None


class EnhancedSection(CamelModel):
    """One slide-equivalent unit of the presentation."""
    id: str = Field(..., description="Stable section identifier")
    heading: str
    subheading: Optional[str] = None
    blocks: list[EnhancedBlock] = Field(default_factory=list)
    layout: str = "title-content"
    suggested_image: Optional[ImageSuggestion] = None
    speaker_notes: Optional[str] = None
    transition: str = "fade"
    duration: int = Field(default=60, description="Estimated speaking time in seconds")


class PresentationMetadata(CamelModel):
    estimated_duration: int = Field(default=10, description="Minutes")
    keywords: list[str] = Field(default_factory=list)
    summary: str = ""
    difficulty: str = "intermediate"
    category: str = "General"


class EnhancedPresentation(CamelModel):
    """Title, ordered sections and derived metadata."""
    title: str
    subtitle: Optional[str] = None
    sections: list[EnhancedSection] = Field(default_factory=list)
    metadata: PresentationMetadata = Field(default_factory=PresentationMetadata)
