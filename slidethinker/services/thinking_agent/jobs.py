"""
Job boundary for background thinking generation.

A job carries one GenerationParams record and either returns the mapped
result or hands the presentation to a PresentationSink for persistence. The
job holds no side effects of its own, so a failed job can be re-run from
scratch.
"""
import logging
from typing import Literal, Optional, Protocol

from pydantic import BaseModel, Field

from slidethinker.models import CamelModel, EnhancedPresentation, GenerationParams

from .mapper import to_api_result
from .orchestrator import ThinkingOrchestrator

logger = logging.getLogger(__name__)


class CreateProjectOptions(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    theme_id: Optional[str] = None


class ProjectRecord(BaseModel):
    """What the sink reports back after persisting a presentation."""
    project_id: str
    slide_count: int
    block_count: int


class ThinkingGenerationJob(CamelModel):
    action: Literal["generate", "generate-and-create"] = "generate"
    params: GenerationParams
    create_project_options: CreateProjectOptions = Field(default_factory=CreateProjectOptions)


class PresentationSink(Protocol):
    """Persistence boundary: turns a presentation into an ordered slide and block record."""

    async def create_project(
        self,
        presentation: EnhancedPresentation,
        options: CreateProjectOptions,
        generate_images: bool = False,
    ) -> ProjectRecord: ...


async def run_thinking_job(
    job: ThinkingGenerationJob,
    orchestrator: ThinkingOrchestrator,
    sink: Optional[PresentationSink] = None,
) -> dict:
    """
    Execute one job.

    Raises:
        ValueError: ``generate-and-create`` was requested without a sink
    """
    if job.action == "generate-and-create" and sink is None:
        raise ValueError("generate-and-create requires a presentation sink")

    logger.info("Processing thinking job (%s) for topic: %s", job.action, job.params.topic)
    result = await orchestrator.generate_with_thinking(job.params)

    if job.action == "generate":
        return {"kind": "generate", "result": to_api_result(result)}

    options = CreateProjectOptions(
        title=job.create_project_options.title or result.presentation.title,
        description=job.create_project_options.description or result.presentation.metadata.summary,
        theme_id=job.create_project_options.theme_id,
    )
    record = await sink.create_project(result.presentation, options, generate_images=job.params.generate_images)
    logger.info("Created project %s with %d slides", record.project_id, record.slide_count)

    return {
        "kind": "generate-and-create",
        "result": {
            "projectId": record.project_id,
            "slideCount": record.slide_count,
            "blockCount": record.block_count,
            "qualityScore": result.quality_report.overall_score,
            "generationTimeMs": result.metadata.total_time_ms,
            "tokensUsed": result.metadata.total_tokens_used,
        },
    }
