"""
Review Suggestion Policy

Decides whether a learner should review material after a quiz attempt
and, if so, which catalog modules to suggest.

Policy:
- Review is recommended iff score / total_questions < REVIEW_THRESHOLD
  (0.8 by default; exactly 80% passes)
- A passing score never calls the model
- Suggestions are capped at REVIEW_MAX_SUGGESTIONS and always come from
  the catalog; ids the model invents are dropped
- The module the quiz belongs to is never suggested for its own review

Usage:
    from trainforge.services.learning.review_suggestions import suggest_review

    result = await suggest_review(6, 10, "Workplace Safety", catalog, llm_client)
    if result.should_review:
        print(result.suggested_modules)
"""

import logging
from typing import Any, Optional

from trainforge.config.processing import processing_settings
from trainforge.middleware.error_handling import ValidationError
from trainforge.models.training import CatalogEntry, SuggestionResult
from trainforge.services.llm.client import ModelClient
from trainforge.utils.text_utils import normalize_llm_json_response

logger = logging.getLogger(__name__)

REVIEW_SYSTEM_PROMPT = (
    "You are an educational advisor. Suggest relevant review materials "
    "based on quiz performance."
)

REVIEW_SUGGESTION_PROMPT = """A learner scored {score} out of {total} ({percentage:.1f}%) on the quiz for "{module_title}".

Available modules for review:
{catalog}

Suggest up to {max_suggestions} modules from the list above that would help the learner improve.
Prefer earlier-stage or foundational modules that cover prerequisites of "{module_title}".
Only use IDs that appear in the list.

Return as JSON:
{{
  "suggested_modules": [module IDs]
}}
"""


def needs_review(score: int, total_questions: int) -> bool:
    """
    Whether a quiz result calls for review.

    Raises:
        ValidationError: If total_questions <= 0 or score is outside [0, total]
    """
    if total_questions <= 0:
        raise ValidationError(
            "total_questions must be positive",
            details={"total_questions": total_questions},
        )
    if score < 0 or score > total_questions:
        raise ValidationError(
            "score must be between 0 and total_questions",
            details={"score": score, "total_questions": total_questions},
        )
    return score / total_questions < processing_settings.REVIEW_THRESHOLD


async def suggest_review(
    score: int,
    total_questions: int,
    module_title: str,
    catalog: list[CatalogEntry],
    llm_client: ModelClient,
    exclude_module_id: Optional[int] = None,
) -> SuggestionResult:
    """
    Recommend review modules after a quiz attempt.

    Args:
        score: Correct answers
        total_questions: Questions in the quiz
        module_title: Title of the module the quiz belongs to
        catalog: Modules that may be suggested
        llm_client: Injected model client
        exclude_module_id: Module the quiz belongs to; never suggested

    Returns:
        SuggestionResult

    Raises:
        ValidationError: Invalid score/total
        LLMError: The model call failed
    """
    if not needs_review(score, total_questions):
        return SuggestionResult(should_review=False, suggested_modules=[])

    candidates = [entry for entry in catalog if entry.id != exclude_module_id]
    if not candidates:
        logger.info(f"Review recommended for '{module_title}' but catalog is empty")
        return SuggestionResult(should_review=True, suggested_modules=[])

    max_suggestions = processing_settings.REVIEW_MAX_SUGGESTIONS
    prompt = REVIEW_SUGGESTION_PROMPT.format(
        score=score,
        total=total_questions,
        percentage=score / total_questions * 100,
        module_title=module_title,
        catalog="\n".join(
            f"ID: {e.id}, Title: {e.title}, Stage: {e.learning_stage.value}"
            for e in candidates
        ),
        max_suggestions=max_suggestions,
    )

    data, _ = await llm_client.suggest_modules(prompt, system_prompt=REVIEW_SYSTEM_PROMPT)

    suggested = filter_suggestions(data, {e.id for e in candidates}, max_suggestions)
    logger.info(f"Suggested {len(suggested)} review modules for '{module_title}' ({score}/{total_questions})")
    return SuggestionResult(should_review=True, suggested_modules=suggested)


def filter_suggestions(data: Any, catalog_ids: set[int], limit: int) -> list[int]:
    """
    Turn model output into a clean list of catalog ids.

    Ids are coerced to int, de-duplicated in order, restricted to the
    catalog and truncated to limit.
    """
    payload = normalize_llm_json_response(data, "suggested_modules")
    raw_ids = payload.get("suggested_modules", payload.get("suggestedModules"))
    if not isinstance(raw_ids, list):
        logger.warning("Malformed review suggestion output, suggesting nothing")
        return []

    suggested: list[int] = []
    for raw_id in raw_ids:
        module_id = _coerce_id(raw_id)
        if module_id is None or module_id in suggested:
            continue
        if module_id not in catalog_ids:
            logger.debug(f"Dropping suggested module {raw_id!r}: not in catalog")
            continue
        suggested.append(module_id)
        if len(suggested) >= limit:
            break

    return suggested


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    if isinstance(value, dict):
        return _coerce_id(value.get("id"))
    return None
