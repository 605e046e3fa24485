"""
Training Module Data Models (Pydantic)

Pydantic models for the module-building pipeline. Each stage produces
structured output that the assembler, the API and the editor can rely on.

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for data validation and pipeline flow.
    The corresponding SQLAlchemy tables live in trainforge/db/models.py.

    Data flows: LLM Output → Pydantic → ModuleAssembler → SQLAlchemy → Database

Models:
- AnalysisResult: Summary, topics, stage and title for an uploaded document
- GeneratedQuestion: One quiz question with a type-consistent answer
- FileInfo: Where a staged upload lives and who uploaded it
- ModuleFields: Editor-approved module fields sent on commit
- PreviewResult: Everything the editor needs to review before commit
- DocumentRecord / ModuleRecord / QuestionRecord: Persisted rows read back
- PersistedResult: Output of a successful commit
- CatalogEntry: Module summary offered to the review-suggestion policy
- SuggestionResult: Review decision plus suggested module ids
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trainforge.enums.training import (
    FileKind,
    LearningStage,
    ModuleStatus,
    QuestionType,
)
from trainforge.models.base import StrictResponse

TRUE_FALSE_OPTIONS = ["True", "False"]
MULTIPLE_CHOICE_OPTION_COUNT = 4


class AnalysisResult(BaseModel):
    """
    Result of document analysis.

    Attributes:
        summary: Two or three sentence description of the training content
        key_topics: Ordered, de-duplicated topics covered by the document
        learning_stage: Difficulty stage used to place the module
        suggested_title: Title proposed for the module
        degraded: True when the analysis was synthesised from the filename
            because no usable text could be extracted
    """

    summary: str
    key_topics: list[str] = Field(default_factory=list)
    learning_stage: LearningStage = LearningStage.FOUNDATIONAL
    suggested_title: str
    degraded: bool = False


class GeneratedQuestion(BaseModel):
    """
    A single quiz question.

    The answer domain depends on the question type:
    - multiple_choice: exactly four distinct options (ignoring case),
      correct_answer is one of them
    - true_false: options are ["True", "False"], correct_answer is one of them

    The same rules apply to generated questions and to questions the editor
    submits on commit.
    """

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    question_text: str = Field(min_length=1)
    question_type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answer: str
    explanation: str = ""

    @model_validator(mode="after")
    def check_answer_domain(self) -> "GeneratedQuestion":
        if self.question_type == QuestionType.MULTIPLE_CHOICE:
            if len(self.options) != MULTIPLE_CHOICE_OPTION_COUNT:
                raise ValueError(
                    f"multiple_choice questions need exactly "
                    f"{MULTIPLE_CHOICE_OPTION_COUNT} options, got {len(self.options)}"
                )
            if any(not option.strip() for option in self.options):
                raise ValueError("multiple_choice options must not be blank")
            if len({option.casefold() for option in self.options}) != len(self.options):
                raise ValueError("multiple_choice options must be distinct")
            if self.correct_answer not in self.options:
                raise ValueError("correct_answer must be one of the options")
        else:
            if self.correct_answer not in TRUE_FALSE_OPTIONS:
                raise ValueError('true_false correct_answer must be "True" or "False"')
            self.options = list(TRUE_FALSE_OPTIONS)
        return self


class FileInfo(BaseModel):
    """
    Staged upload metadata.

    Returned with a preview and sent back unchanged on commit so the
    Document row can point at the staged file.
    """

    file_name: str
    original_name: str
    file_kind: FileKind
    file_path: str
    file_size: int = Field(ge=0)
    uploaded_by: Optional[str] = None


class ModuleFields(BaseModel):
    """Module fields as approved (and possibly edited) by the editor."""

    title: str
    description: str = ""
    learning_stage: LearningStage = LearningStage.FOUNDATIONAL
    key_topics: list[str] = Field(default_factory=list)


class PreviewResult(BaseModel):
    """
    Output of ModuleAssembler.preview.

    Nothing in a preview has been persisted.
    """

    analysis: AnalysisResult
    questions: list[GeneratedQuestion] = Field(default_factory=list)
    extracted_text_sample: str = ""
    file_info: Optional[FileInfo] = None
    quiz_generation_failed: bool = False
    quality_issues: list[str] = Field(default_factory=list)
    estimated_cost_usd: float = 0.0


class DocumentRecord(StrictResponse):
    id: int
    file_name: str
    original_name: str
    file_kind: FileKind
    file_path: str
    file_size: int
    uploaded_by: Optional[str] = None
    ai_summary: Optional[str] = None
    key_topics: list[str] = Field(default_factory=list)
    created_at: datetime


class ModuleRecord(StrictResponse):
    id: int
    title: str
    description: Optional[str] = None
    learning_stage: LearningStage
    status: ModuleStatus
    document_id: Optional[int] = None
    created_by: Optional[str] = None
    ai_generated: bool
    created_at: datetime
    updated_at: datetime


class QuestionRecord(StrictResponse):
    id: int
    module_id: int
    question_text: str
    question_type: QuestionType
    options: list[str] = Field(default_factory=list)
    correct_answer: str
    explanation: Optional[str] = None
    order: int


class PersistedResult(BaseModel):
    """Rows written by a successful commit."""

    document: DocumentRecord
    module: ModuleRecord
    questions: list[QuestionRecord] = Field(default_factory=list)


class CatalogEntry(StrictResponse):
    """A module as seen by the review-suggestion policy."""

    id: int
    title: str
    learning_stage: LearningStage


class SuggestionResult(BaseModel):
    """Review decision after a quiz attempt."""

    should_review: bool
    suggested_modules: list[int] = Field(default_factory=list)
