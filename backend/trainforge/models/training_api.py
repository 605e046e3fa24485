"""
Training Module API Models

Request and response bodies for the /api/modules endpoints.
"""

from typing import Optional

from pydantic import Field

from trainforge.models.base import StrictRequest, StrictResponse
from trainforge.models.training import (
    FileInfo,
    GeneratedQuestion,
    ModuleFields,
    QuestionRecord,
)


class CommitModuleRequest(StrictRequest):
    """Body of POST /api/modules: an editor-approved preview."""

    module: ModuleFields
    file_info: FileInfo
    questions: list[GeneratedQuestion] = Field(default_factory=list)
    created_by: Optional[str] = None


class ReviewSuggestionRequest(StrictRequest):
    """Body of POST /api/modules/review-suggestions."""

    score: int
    total_questions: int
    module_title: str
    module_id: Optional[int] = None


class RegeneratedQuizResponse(StrictResponse):
    module_id: int
    questions: list[GeneratedQuestion]


class ModuleQuestionsResponse(StrictResponse):
    module_id: int
    questions: list[QuestionRecord]
