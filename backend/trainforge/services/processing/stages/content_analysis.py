"""
Content Analysis Stage

Produces the summary, key topics, learning stage and suggested title for an
uploaded document. Two prompting strategies are used:

- Real content: summarise only what the extracted text says.
- Degraded content (placeholder or too little text): synthesise plausible
  training material from the cleaned file name, flagged as speculative.
  The suggested title is always the cleaned file name on this path.

Every field of the model's answer is validated independently and replaced
by a safe default when missing or invalid. Malformed output never raises;
a failed model call does.

Usage:
    from trainforge.services.processing.stages.content_analysis import analyze_document

    analysis, usages = await analyze_document(text, "onboarding.pdf", llm_client)
    print(f"Stage: {analysis.learning_stage}, topics: {analysis.key_topics}")
"""

import logging
from typing import Any

from trainforge.config.processing import processing_settings
from trainforge.enums.training import LearningStage
from trainforge.models.training import AnalysisResult
from trainforge.services.llm.client import ModelClient
from trainforge.services.llm.usage import LLMUsage
from trainforge.services.processing.stages.text_extraction import (
    DEFAULT_FILE_NAME,
    PLACEHOLDER_MARKERS,
    clean_title_from_filename,
)
from trainforge.utils.text_utils import unwrap_llm_single_object_response

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY = "No summary available"

_VALID_STAGES = {e.value for e in LearningStage}

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert training content analyzer. Analyze documents and provide "
    "structured insights for creating effective corporate training modules."
)

CONTENT_ANALYSIS_PROMPT = """Analyze the following training document and describe it for a training module.

Document Name: {file_name}

Content (truncated to {truncate_limit} chars):
{content}

Provide analysis in JSON format:
{{
  "summary": "A 2-3 paragraph summary of the ACTUAL content above",
  "key_topics": ["5-10 specific topics actually covered in the content"],
  "learning_stage": "{stage_options}",
  "suggested_title": "A descriptive module title based on the content"
}}

Learning stage rubric:
- "onboarding": company policies, orientation, introductory material
- "foundational": basic technical concepts and fundamental skills
- "intermediate": topics that require some prior knowledge
- "advanced": expert-level content and specialized skills

Base the analysis STRICTLY on the content provided. Do not invent facts that are not in the text.
"""

DEGRADED_ANALYSIS_PROMPT = """No readable text could be extracted from a training document, so only its title is known.

Document Title: "{title}"

Create realistic, professional corporate training material that a document with this title would plausibly contain.
This material is SPECULATIVE: it is inferred from the title alone and will be reviewed by an editor.

Provide analysis in JSON format:
{{
  "summary": "A 2-3 paragraph summary of what this document would likely cover",
  "key_topics": ["5-10 realistic topics this document would cover"],
  "learning_stage": "{stage_options}",
  "suggested_title": "{title}"
}}

Learning stage rubric:
- "onboarding": company policies, orientation, introductory material
- "foundational": basic technical concepts and fundamental skills
- "intermediate": topics that require some prior knowledge
- "advanced": expert-level content and specialized skills
"""


def is_degraded_text(text: str) -> bool:
    """
    Whether extracted text is too poor to summarise directly.

    True for extraction placeholders and for text shorter than
    DEGRADED_TEXT_THRESHOLD characters.
    """
    if not text:
        return True
    if any(marker in text for marker in PLACEHOLDER_MARKERS):
        return True
    return len(text.strip()) < processing_settings.DEGRADED_TEXT_THRESHOLD


async def analyze_document(
    text: str,
    original_name: str,
    llm_client: ModelClient,
) -> tuple[AnalysisResult, list[LLMUsage]]:
    """
    Analyze extracted document text.

    Args:
        text: Output of the text extraction stage
        original_name: File name as uploaded
        llm_client: Injected model client

    Returns:
        Tuple of (AnalysisResult, list of LLMUsage for cost tracking)

    Raises:
        LLMError: If the model call fails (after retries for transient errors)
    """
    original_name = original_name.strip() or DEFAULT_FILE_NAME
    degraded = is_degraded_text(text)
    clean_title = clean_title_from_filename(original_name)
    stage_options = "|".join(e.value for e in LearningStage)

    if degraded:
        logger.info(f"Degraded content for {original_name}, analysing from title '{clean_title}'")
        prompt = DEGRADED_ANALYSIS_PROMPT.format(title=clean_title, stage_options=stage_options)
    else:
        truncate_limit = processing_settings.ANALYSIS_TRUNCATE
        prompt = CONTENT_ANALYSIS_PROMPT.format(
            file_name=original_name,
            content=text[:truncate_limit],
            truncate_limit=truncate_limit,
            stage_options=stage_options,
        )

    data, usage = await llm_client.analyze(prompt, system_prompt=ANALYSIS_SYSTEM_PROMPT)

    result = _build_analysis(data, original_name, clean_title, degraded)
    logger.debug(
        f"Analysis for {original_name}: stage={result.learning_stage.value}, "
        f"topics={len(result.key_topics)}, degraded={degraded}"
    )
    return result, [usage]


def _build_analysis(
    data: Any, original_name: str, clean_title: str, degraded: bool
) -> AnalysisResult:
    """Validate each field of the model output, defaulting where needed."""
    payload = unwrap_llm_single_object_response(data)
    if not payload:
        logger.warning(f"Malformed analysis output for {original_name}, using defaults")

    summary = _first_present(payload, "summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = DEFAULT_SUMMARY

    if degraded:
        title = clean_title
    else:
        title = _first_present(payload, "suggested_title", "suggestedTitle", "title")
        if not isinstance(title, str) or not title.strip():
            title = original_name

    return AnalysisResult(
        summary=summary.strip(),
        key_topics=normalize_topics(_first_present(payload, "key_topics", "keyTopics")),
        learning_stage=_validate_stage(
            _first_present(payload, "learning_stage", "learningStage")
        ),
        suggested_title=title.strip(),
        degraded=degraded,
    )


def normalize_topics(raw: Any) -> list[str]:
    """
    Clean a key topic list.

    Non-strings and blanks are dropped, case-insensitive duplicates removed
    (first spelling wins) and the list clamped to TOPICS_MAX.
    """
    if not isinstance(raw, list):
        return []

    topics: list[str] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, str):
            continue
        topic = " ".join(item.split())
        if not topic or topic.lower() in seen:
            continue
        seen.add(topic.lower())
        topics.append(topic)

    return topics[: processing_settings.TOPICS_MAX]


def _validate_stage(stage: Any) -> LearningStage:
    """Validate and normalize a learning stage."""
    if isinstance(stage, str) and stage.strip().lower() in _VALID_STAGES:
        return LearningStage(stage.strip().lower())
    return LearningStage.FOUNDATIONAL


def _first_present(payload: dict, *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None
