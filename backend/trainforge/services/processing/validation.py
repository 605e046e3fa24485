"""
Module Output Validation

Checks previews and commit requests for problems the editor should see.
Preview issues are advisory and travel with the preview; commit issues
block persistence.

Usage:
    from trainforge.services.processing.validation import validate_preview

    issues = validate_preview(preview)
    if issues:
        print(f"Quality issues: {issues}")
"""

import logging

from trainforge.config.processing import processing_settings
from trainforge.models.training import GeneratedQuestion, ModuleFields, PreviewResult
from trainforge.services.processing.stages.content_analysis import DEFAULT_SUMMARY

logger = logging.getLogger(__name__)


def validate_preview(preview: PreviewResult) -> list[str]:
    """
    Collect advisory quality issues for a preview.

    Checks:
    - Whether the analysis was synthesised from the file name
    - Summary and topic presence
    - Quiz size

    Args:
        preview: PreviewResult to validate

    Returns:
        List of issue descriptions (empty if all valid)
    """
    issues = []

    analysis = preview.analysis
    if analysis.degraded:
        issues.append(
            "No readable text was extracted; summary and topics are inferred from the file name"
        )
    if analysis.summary == DEFAULT_SUMMARY:
        issues.append("No summary generated")
    if not analysis.key_topics:
        issues.append("No key topics identified")

    issues.extend(_validate_quiz(preview.questions, preview.quiz_generation_failed))

    return issues


def _validate_quiz(questions: list[GeneratedQuestion], generation_failed: bool) -> list[str]:
    """Validate quiz size."""
    if generation_failed:
        return ["Quiz generation failed; add questions manually or regenerate the quiz"]

    min_questions = processing_settings.QUIZ_MIN
    if len(questions) < min_questions:
        return [f"Quiz has {len(questions)} questions (min: {min_questions})"]
    return []


def validate_module_fields(module: ModuleFields) -> list[str]:
    """
    Validate editor-approved module fields before commit.

    Returns:
        List of blocking issues (empty if the module can be persisted)
    """
    issues = []

    if not module.title or not module.title.strip():
        issues.append("Module title is required")
    elif len(module.title) > 500:
        issues.append("Module title exceeds 500 characters")

    if any(not isinstance(t, str) or not t.strip() for t in module.key_topics):
        issues.append("Key topics must be non-empty strings")

    return issues
