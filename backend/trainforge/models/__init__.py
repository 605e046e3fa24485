"""
Pydantic models for pipeline data flow and API contracts.

Usage:
    from trainforge.models import AnalysisResult, GeneratedQuestion
"""

from trainforge.models.base import StrictRequest, StrictResponse
from trainforge.models.training import (
    AnalysisResult,
    CatalogEntry,
    DocumentRecord,
    FileInfo,
    GeneratedQuestion,
    ModuleFields,
    ModuleRecord,
    PersistedResult,
    PreviewResult,
    QuestionRecord,
    SuggestionResult,
)

__all__ = [
    "StrictRequest",
    "StrictResponse",
    "AnalysisResult",
    "CatalogEntry",
    "DocumentRecord",
    "FileInfo",
    "GeneratedQuestion",
    "ModuleFields",
    "ModuleRecord",
    "PersistedResult",
    "PreviewResult",
    "QuestionRecord",
    "SuggestionResult",
]
