"""
Processing stages of the module pipeline.

Each stage is a plain function. The model-backed stages take an injected
ModelClient and return (result, list[LLMUsage]).
"""

from trainforge.services.processing.stages.content_analysis import (
    analyze_document,
    is_degraded_text,
)
from trainforge.services.processing.stages.quiz_generation import generate_quiz
from trainforge.services.processing.stages.text_extraction import (
    clean_title_from_filename,
    extract_text,
)

__all__ = [
    "analyze_document",
    "clean_title_from_filename",
    "extract_text",
    "generate_quiz",
    "is_degraded_text",
]
