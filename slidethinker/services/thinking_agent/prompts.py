"""Agent instructions and prompt builders for the thinking loop."""
import json

from slidethinker.models import (
    AudienceProfile,
    EnhancedPresentation,
    EnhancedSection,
    GenerationParams,
    ImprovementSuggestion,
    PresentationPlan,
    VisualStrategy,
)

from .content import block_content_text

# =============================================================================
# Agent Instructions
# =============================================================================

PLANNER_AGENT_INSTRUCTIONS = """You are an expert content strategist and presentation planner.
Always respond with valid JSON. Think through problems step by step before answering."""

GENERATOR_AGENT_INSTRUCTIONS = """You are an expert presentation creator.
Always respond with valid JSON. Be creative, engaging, and professional."""

CRITIC_AGENT_INSTRUCTIONS = """You are an expert presentation critic and quality evaluator.
Be thorough but constructive. Always respond with valid JSON."""

RESEARCH_AGENT_INSTRUCTIONS = """You are a research assistant who finds and summarizes factual, current information.
Always respond with valid JSON."""

RAW_DATA_PLANNING_LIMIT = 5000
RAW_DATA_SECTION_LIMIT = 3000
SEARCH_RESULTS_PROMPT_LIMIT = 6000
BLOCK_PREVIEW_LENGTH = 100
EVAL_BLOCK_PREVIEW_LENGTH = 200
EVAL_BLOCKS_PER_SECTION = 3

SCORE_RESPONSE_FORMAT = """Return JSON:
{
  "reasoning": "Your step-by-step evaluation...",
  "score": 7.5,
  "feedback": "Specific, actionable feedback"
}"""


def _or_none(values: list[str]) -> str:
    return ", ".join(values) if values else "none specified"


# =============================================================================
# Planner
# =============================================================================

def build_plan_prompt(params: GenerationParams, total_slides: int) -> str:
    """Single chain-of-thought planning prompt covering every plan section."""
    context = f"\nADDITIONAL CONTEXT: {params.additional_context}" if params.additional_context else ""
    raw_data = ""
    if params.raw_data:
        truncated = " (truncated)" if len(params.raw_data) > RAW_DATA_PLANNING_LIMIT else ""
        raw_data = f'\nRAW DATA{truncated}:\n"{params.raw_data[:RAW_DATA_PLANNING_LIMIT]}"'
    brand = ""
    if params.brand_guidelines and params.brand_guidelines.colors:
        brand = f"\nBRAND COLORS: {', '.join(params.brand_guidelines.colors)}"

    return f"""Plan a presentation.

TOPIC: "{params.topic}"
AUDIENCE: {params.audience or 'general'}
TONE: {params.tone or 'professional'}
STYLE: {params.style or 'professional'}
CONTENT TYPE: {params.type or 'presentation'}
TOTAL SLIDES: {total_slides}{context}{raw_data}{brand}

Think step by step:
1. What is the core theme and which key concepts must be explained?
2. Who is the audience: knowledge level, interests, pain points, expected outcome?
3. Which narrative arc, hook and conclusion style work best, and how much data to use?
4. How should the {total_slides} slides split into opening, content, data and closing slides?
5. Which color mood, image style, chart style and layouts fit the content?
6. Which 3-5 key messages must the audience remember?

Return JSON:
{{
  "reasoning": "Your step-by-step thought process...",
  "mainObjective": "The central message",
  "targetAudience": {{
    "type": "audience type description",
    "knowledgeLevel": "beginner|intermediate|expert",
    "interests": ["interest1", "interest2"],
    "painPoints": ["pain1", "pain2"],
    "expectedOutcome": "what they want to achieve"
  }},
  "contentStrategy": {{
    "narrativeArc": "chosen narrative structure",
    "hookType": "question|statistic|story|quote|provocation",
    "conclusionStyle": "call-to-action|summary|vision|challenge",
    "dataUsage": "minimal|moderate|heavy",
    "storytellingApproach": "description of approach"
  }},
  "structurePlan": {{
    "openingSlides": 1,
    "contentSlides": 4,
    "dataSlides": 2,
    "closingSlides": 1,
    "transitionPoints": ["After intro to problem", "After solution reveal"]
  }},
  "visualStrategy": {{
    "colorMood": "professional|vibrant|minimal|warm|cool|bold",
    "imageStyle": "photography|illustration|abstract|iconographic|mixed",
    "chartPreference": "clean-minimal|detailed|infographic|animated",
    "layoutVariety": ["layout1", "layout2"]
  }},
  "keyMessages": ["message1", "message2", "message3"]
}}"""


# =============================================================================
# Generator
# =============================================================================

def build_title_prompt(plan: PresentationPlan, topic: str) -> str:
    return f"""Create a compelling presentation title.

TOPIC: "{topic}"
MAIN OBJECTIVE: {plan.main_objective}
AUDIENCE: {plan.target_audience.type} ({plan.target_audience.knowledge_level})
HOOK TYPE: {plan.content_strategy.hook_type}
KEY MESSAGES: {', '.join(plan.key_messages[:3])}

Think step by step:
1. What words will immediately grab attention?
2. What promise or value can we convey?
3. How do we make it memorable?

Return JSON:
{{
  "reasoning": "Your title creation process...",
  "title": "Main compelling title",
  "subtitle": "Supporting subtitle with more detail"
}}"""


def build_section_prompt(
    plan: PresentationPlan,
    topic: str,
    *,
    index: int,
    total: int,
    role: str,
    previous_context: str,
    key_message: str,
    tone: str,
    style: str,
    layout: str,
    raw_data: str = "",
) -> str:
    """Prompt for one slide, carrying position, role and continuity context."""
    reference = ""
    if raw_data:
        reference = f'\nRAW DATA REFERENCE: "{raw_data[:RAW_DATA_SECTION_LIMIT]}..."'

    return f"""Generate ONE visually rich slide.

TOPIC: "{topic}"
SLIDE POSITION: {index + 1} of {total}
SLIDE TYPE: {role}
PREVIOUS CONTEXT: {previous_context or 'This is the first slide'}
KEY MESSAGE TO CONVEY: {key_message}
TONE: {tone}
STYLE: {style}
AUDIENCE: {plan.target_audience.type} ({plan.target_audience.knowledge_level} level)
NARRATIVE ARC: {plan.content_strategy.narrative_arc}
SUGGESTED LAYOUT: {layout}{reference}

Guidelines:
1. If the slide discusses data, trends or comparisons, include a "chart" block with realistic "chartData".
2. Use paragraph blocks with "variant": "card" formatting for key concepts.
3. Give detailed content (50-75 words per paragraph), not brief summaries.

Return JSON:
{{
  "heading": "Compelling heading",
  "subheading": "Subheading explaining the context",
  "blocks": [
    {{
      "type": "chart",
      "content": "Description of the chart",
      "chartData": {{
        "type": "bar|line|pie|doughnut",
        "labels": ["Q1", "Q2", "Q3", "Q4"],
        "datasets": [{{"label": "Sales", "data": [10, 25, 40, 30]}}]
      }}
    }},
    {{
      "type": "paragraph",
      "content": "Detailed explanation...",
      "formatting": {{"variant": "card", "bold": true}}
    }}
  ],
  "layout": "{layout}",
  "suggestedImage": {{"prompt": "Detailed image description", "style": "photography", "placement": "right"}},
  "speakerNotes": "Notes for the presenter...",
  "transition": "fade",
  "duration": 90
}}"""


def build_refine_prompt(section: EnhancedSection, improvement: ImprovementSuggestion) -> str:
    """Prompt asking for a complete replacement of one section."""
    blocks = [block.model_dump(mode="json", by_alias=True, exclude_none=True) for block in section.blocks]
    return f"""Improve this slide based on feedback.

CURRENT SLIDE:
- Heading: {section.heading}
- Blocks: {json.dumps(blocks, ensure_ascii=False)}
- Layout: {section.layout}
- Speaker Notes: {section.speaker_notes or 'none'}

IMPROVEMENT NEEDED:
- Area: {improvement.area}
- Current State: {improvement.current_state}
- Suggested Change: {improvement.suggested_change}

Apply the improvement while keeping the slide's purpose. Return the ENTIRE improved slide.

Return JSON:
{{
  "reasoning": "How you improved the slide...",
  "heading": "Improved heading",
  "blocks": [{{"type": "paragraph", "content": "..."}}],
  "layout": "improved layout if needed",
  "speakerNotes": "Updated speaker notes"
}}"""


# =============================================================================
# Critic
# =============================================================================

def summarize_presentation(presentation: EnhancedPresentation) -> str:
    """Title, section count and truncated block previews for evaluators."""
    lines = [
        f"Title: {presentation.title}",
        f"Sections: {len(presentation.sections)}",
        "Content Summary: " + "; ".join(
            f'"{s.heading}": {len(s.blocks)} blocks' for s in presentation.sections
        ),
        "",
        "Full Content:",
    ]
    for i, section in enumerate(presentation.sections):
        lines.append(f"{i + 1}. {section.heading}")
        for block in section.blocks[:EVAL_BLOCKS_PER_SECTION]:
            text = block_content_text(block.content)[:EVAL_BLOCK_PREVIEW_LENGTH]
            lines.append(f"   - [{block.type}] {text}")
    return "\n".join(lines)


def build_criterion_prompt(presentation: EnhancedPresentation, criterion: str, description: str) -> str:
    return f"""Evaluate this presentation on {criterion}.

PRESENTATION:
{summarize_presentation(presentation)}

EVALUATION CRITERIA: {description}

Think step by step:
1. What works well for this criterion?
2. What could be improved?
3. How does it compare to excellent presentations?

{SCORE_RESPONSE_FORMAT}"""


def build_structure_prompt(presentation: EnhancedPresentation, plan: PresentationPlan) -> str:
    strategy = plan.content_strategy
    structure = plan.structure_plan
    actual = "\n".join(
        f'{i + 1}. "{s.heading}" (Layout: {s.layout}, Blocks: {len(s.blocks)})'
        for i, s in enumerate(presentation.sections)
    )
    return f"""Evaluate how well this presentation follows the planned structure.

PLANNED STRUCTURE:
- Narrative Arc: {strategy.narrative_arc}
- Hook Type: {strategy.hook_type}
- Conclusion Style: {strategy.conclusion_style}
- Opening Slides: {structure.opening_slides}
- Content Slides: {structure.content_slides}
- Data Slides: {structure.data_slides}
- Closing Slides: {structure.closing_slides}
- Key Transitions: {_or_none(structure.transition_points)}

ACTUAL STRUCTURE:
{actual}

Think step by step:
1. Does the presentation follow the narrative arc?
2. Is the hook effective?
3. Are transitions smooth?
4. Is the conclusion impactful?

{SCORE_RESPONSE_FORMAT}"""


def build_visual_prompt(
    visual_strategy: VisualStrategy,
    *,
    layouts_used: list[str],
    section_count: int,
    has_images: bool,
    notes_count: int,
) -> str:
    return f"""Evaluate the visual design strategy.

PLANNED VISUAL STRATEGY:
- Color Mood: {visual_strategy.color_mood}
- Image Style: {visual_strategy.image_style}
- Layout Variety: {_or_none(visual_strategy.layout_variety)}

ACTUAL VISUALS:
- Layouts Used: {', '.join(layouts_used)}
- Layout Variety: {len(layouts_used)} unique layouts out of {section_count} slides
- Has Image Suggestions: {str(has_images).lower()}
- Sections with Speaker Notes: {notes_count}

Think step by step:
1. Is there enough layout variety?
2. Are images and visuals appropriately placed?
3. Does the design support the content?

{SCORE_RESPONSE_FORMAT}"""


def build_completeness_prompt(
    presentation: EnhancedPresentation,
    plan: PresentationPlan,
    covered: list[str],
) -> str:
    return f"""Check whether all important aspects are covered.

KEY MESSAGES PLANNED: {'; '.join(plan.key_messages)}
KEY MESSAGES FOUND IN CONTENT: {'; '.join(covered) or 'none'}
COVERAGE: {len(covered)}/{len(plan.key_messages)}
PLANNED SLIDES: {plan.estimated_slides}
ACTUAL SLIDES: {len(presentation.sections)}
MAIN OBJECTIVE: {plan.main_objective}
PRESENTATION TITLE: {presentation.title}

Think step by step:
1. Are all key messages addressed?
2. Is any critical information missing?
3. Is the main objective fulfilled?

{SCORE_RESPONSE_FORMAT}"""


def flatten_content(presentation: EnhancedPresentation) -> str:
    """One line per section: heading plus the first characters of every block."""
    return "\n".join(
        f'"{s.heading}": ' + " | ".join(
            block_content_text(b.content)[:BLOCK_PREVIEW_LENGTH] for b in s.blocks
        )
        for s in presentation.sections
    )


def build_audience_prompt(presentation: EnhancedPresentation, audience: AudienceProfile) -> str:
    return f"""Evaluate how well this presentation fits its target audience.

TARGET AUDIENCE:
- Type: {audience.type}
- Knowledge Level: {audience.knowledge_level}
- Interests: {_or_none(audience.interests)}
- Pain Points: {_or_none(audience.pain_points)}

PRESENTATION CONTENT:
{flatten_content(presentation)}

Think step by step:
1. Is the language appropriate for the knowledge level?
2. Are the interests addressed?
3. Are pain points acknowledged and solved?

{SCORE_RESPONSE_FORMAT}"""


def build_synthesis_prompt(presentation: EnhancedPresentation, criteria_lines: list[str], topic: str) -> str:
    scores = "\n".join(criteria_lines)
    return f"""Based on these evaluation scores, identify strengths and weaknesses.

TOPIC: {topic}
TITLE: {presentation.title}
SLIDES: {len(presentation.sections)}

CRITERIA SCORES:
{scores}

Synthesize into clear strengths (scores >= 7) and weaknesses (scores < 7).

Return JSON:
{{
  "reasoning": "Your synthesis process...",
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"]
}}"""


def build_improvements_prompt(
    presentation: EnhancedPresentation,
    weaknesses: list[str],
    low_criteria_lines: list[str],
    topic: str,
) -> str:
    numbered = "\n".join(f"{i + 1}. {w}" for i, w in enumerate(weaknesses))
    sections = "\n".join(f'{i}. "{s.heading}"' for i, s in enumerate(presentation.sections))
    low = "\n".join(low_criteria_lines) or "none"
    return f"""Generate specific, actionable improvements.

TOPIC: {topic}

WEAKNESSES IDENTIFIED:
{numbered}

CURRENT SECTIONS (0-based index):
{sections}

LOW SCORING CRITERIA:
{low}

Generate specific improvements for each weakness. Be precise about what to change and where.

Return JSON:
{{
  "reasoning": "Your improvement generation process...",
  "improvements": [
    {{
      "area": "specific area to improve",
      "currentState": "what's wrong now",
      "suggestedChange": "exactly what to do",
      "priority": "high|medium|low",
      "affectedSections": [0, 2]
    }}
  ]
}}"""


# =============================================================================
# Research
# =============================================================================

def build_search_queries_prompt(topic: str, questions: list[str], count: int) -> str:
    focus = f"\nFocus on answering: {', '.join(questions)}" if questions else ""
    return f"""Generate {count} effective search queries to find current data and facts about: "{topic}".{focus}

Return JSON:
{{
  "queries": ["query1", "query2", "query3"]
}}"""


def build_research_synthesis_prompt(topic: str, combined_results: str) -> str:
    return f"""Analyze these search results for the topic "{topic}":

{combined_results[:SEARCH_RESULTS_PROMPT_LIMIT]}

Provide:
1. A comprehensive summary suitable for a presentation.
2. A list of key data points and statistics found.
3. A list of sources.

Return JSON:
{{
  "summary": "string",
  "dataPoints": ["string"],
  "sources": ["string"]
}}"""
