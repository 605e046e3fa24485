"""
Processing Pipeline Configuration

Configuration settings for the training-module pipeline. These settings
control model selection, prompt limits, quiz sizing, review thresholds,
and LLM call resilience.

All settings can be overridden via environment variables with PROCESSING_ prefix.

Usage:
    from trainforge.config.processing import processing_settings

    threshold = processing_settings.REVIEW_THRESHOLD
    quiz_max = processing_settings.QUIZ_MAX
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class ProcessingSettings(BaseSettings):
    """
    Processing pipeline configuration.

    Attributes are grouped by category:
    - LLM model configuration
    - Content analysis
    - Quiz generation
    - Preview output
    - Review suggestions
    - Processing timeouts
    """

    # =========================================================================
    # LLM MODEL CONFIGURATION
    # =========================================================================
    # Model identifiers use LiteLLM format: provider/model-name.
    # None falls back to settings.TEXT_MODEL.

    MODEL_ANALYSIS: Optional[str] = None
    MODEL_QUIZ: Optional[str] = None
    MODEL_REVIEW: Optional[str] = None

    # =========================================================================
    # CONTENT ANALYSIS
    # =========================================================================

    # Characters of extracted text sent to the analysis prompt
    ANALYSIS_TRUNCATE: int = 4000
    ANALYSIS_TEMPERATURE: float = 0.3
    ANALYSIS_MAX_TOKENS: int = 1000

    # Extracted text shorter than this is treated as degraded
    DEGRADED_TEXT_THRESHOLD: int = 50

    # Key topics kept after normalisation
    TOPICS_MAX: int = 10

    # =========================================================================
    # QUIZ GENERATION
    # =========================================================================

    QUIZ_MIN: int = 10
    QUIZ_MAX: int = 15

    # Max chars of module summary included in the quiz prompt
    QUIZ_SUMMARY_TRUNCATE: int = 3000

    QUIZ_TEMPERATURE: float = 0.4
    QUIZ_MAX_TOKENS: int = 2000

    # =========================================================================
    # PREVIEW OUTPUT
    # =========================================================================

    # Characters of extracted text returned to the editor with a preview
    PREVIEW_SAMPLE_CHARS: int = 1000

    # =========================================================================
    # REVIEW SUGGESTIONS
    # =========================================================================

    # Score ratio below which review is recommended (exclusive)
    REVIEW_THRESHOLD: float = 0.8
    REVIEW_MAX_SUGGESTIONS: int = 3
    REVIEW_TEMPERATURE: float = 0.2
    REVIEW_MAX_TOKENS: int = 300

    # =========================================================================
    # PROCESSING TIMEOUTS
    # =========================================================================

    # Maximum time for single LLM call (seconds)
    LLM_TIMEOUT_SECONDS: int = 60

    # Maximum attempts for transient LLM failures
    MAX_LLM_RETRIES: int = 3

    class Config:
        env_prefix = "PROCESSING_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_processing_settings() -> ProcessingSettings:
    """Get cached processing settings instance."""
    return ProcessingSettings()


# Convenience instance
processing_settings = get_processing_settings()
