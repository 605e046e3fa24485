"""
Pipeline-related enums.

Defines enums for pipeline identification and LLM operations.
"""

from enum import Enum


class PipelineName(str, Enum):
    """
    Pipeline names for cost tracking and attribution.

    Used by LLMClient for cost attribution in usage records.
    """

    MODULE_BUILDER = "MODULE_BUILDER"
    QUIZ_REVIEW = "QUIZ_REVIEW"


class PipelineOperation(str, Enum):
    """
    Operation types for LLM calls.

    Used for both:
    1. Model selection: LLMClient uses this to pick the right model for each task
    2. Cost tracking: Operations are logged for fine-grained cost analysis
    """

    CONTENT_ANALYSIS = "CONTENT_ANALYSIS"
    QUIZ_GENERATION = "QUIZ_GENERATION"
    REVIEW_SUGGESTION = "REVIEW_SUGGESTION"
