"""Projection of a GenerationResult onto the external camelCase result shape."""
from typing import Any

from slidethinker.models import EnhancedPresentation, GenerationResult, QualityReport

QUALITY_BASELINE = 7
DEFAULT_DURATION_MINUTES = 10
DEFAULT_CATEGORY = "presentation"

CATEGORY_FIELDS = (
    ("Content Quality", "content_quality"),
    ("Structure Quality", "structure_quality"),
    ("Engagement Potential", "engagement_potential"),
    ("Visual Richness", "visual_richness"),
    ("Audience Alignment", "audience_alignment"),
    ("Originality", "originality"),
)


def map_presentation(presentation: EnhancedPresentation) -> dict[str, Any]:
    data = presentation.to_wire()
    metadata = presentation.metadata
    data["metadata"] = {
        "estimatedDuration": metadata.estimated_duration or DEFAULT_DURATION_MINUTES,
        "keywords": list(metadata.keywords),
        "summary": metadata.summary,
        "difficulty": metadata.difficulty or "intermediate",
        "category": metadata.category or DEFAULT_CATEGORY,
    }
    return data


def map_quality_report(report: QualityReport) -> dict[str, Any]:
    """Six category scores on a 0-10 scale plus one generic improvement per suggestion."""
    category_scores = []
    for label, field_name in CATEGORY_FIELDS:
        value = getattr(report.breakdown, field_name)
        category_scores.append({
            "criterion": label,
            "score": value / 10,
            "maxScore": 10,
            "feedback": f"{label.capitalize()} score: {value:g}/100",
        })

    improvements = [
        {
            "area": f"Area {index + 1}",
            "currentState": "Current implementation",
            "suggestedChange": suggestion,
            "priority": "medium",
            "affectedSections": [],
        }
        for index, suggestion in enumerate(report.suggestions)
    ]

    return {
        "overallScore": report.overall_score / 10,
        "categoryScores": category_scores,
        "improvements": improvements,
        "passedQualityThreshold": report.passed_threshold,
        "summary": f"Overall quality score: {report.overall_score:g}/100",
    }


def to_api_result(result: GenerationResult) -> dict[str, Any]:
    steps = [step.to_wire() for step in result.thinking_process.steps]
    metadata = {
        "totalIterations": result.thinking_process.iterations,
        "totalTokensUsed": result.metadata.total_tokens_used,
        "generationTimeMs": result.metadata.total_time_ms,
        "qualityImprovement": round(result.quality_report.overall_score / 10 - QUALITY_BASELINE, 2),
    }
    if result.metadata.generate_images is not None:
        metadata["generateImages"] = result.metadata.generate_images
    return {
        "presentation": map_presentation(result.presentation),
        "qualityReport": map_quality_report(result.quality_report),
        "thinkingSteps": steps,
        "thinkingProcess": {"steps": steps},
        "metadata": metadata,
    }
