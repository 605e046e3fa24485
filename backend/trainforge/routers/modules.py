"""
Training Module API Router

Exposes the preview-then-commit module workflow and quiz review decisions.

Endpoints:
- POST /api/modules/preview - Upload a file and preview the generated module
- POST /api/modules - Commit an approved preview
- POST /api/modules/{module_id}/quiz/regenerate - Generate a fresh quiz
- GET /api/modules/{module_id}/questions - Questions in display order
- POST /api/modules/review-suggestions - Review decision after a quiz

Usage:
    # Preview
    POST /api/modules/preview  (multipart: file, uploaded_by)

    # Commit what the editor approved
    POST /api/modules
    {"module": {...}, "file_info": {...}, "questions": [...]}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from trainforge.db.base import get_db
from trainforge.dependencies import get_llm_client, get_module_assembler
from trainforge.middleware.error_handling import NotFoundError
from trainforge.models.training import (
    PersistedResult,
    PreviewResult,
    QuestionRecord,
    SuggestionResult,
)
from trainforge.models.training_api import (
    CommitModuleRequest,
    ModuleQuestionsResponse,
    RegeneratedQuizResponse,
    ReviewSuggestionRequest,
)
from trainforge.services.learning.review_suggestions import suggest_review
from trainforge.services.llm.client import ModelClient
from trainforge.services.processing.pipeline import ModuleAssembler
from trainforge.services.storage import (
    get_module,
    get_module_questions,
    list_module_catalog,
)
from trainforge.services.uploads import read_upload, resolve_file_kind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/modules", tags=["modules"])


@router.post("/preview", response_model=PreviewResult)
async def preview_module(
    file: UploadFile = File(..., description="PDF, Word document or video"),
    uploaded_by: Optional[str] = Form(None, description="Uploader id"),
    assembler: ModuleAssembler = Depends(get_module_assembler),
):
    """
    Upload a file and preview the module that would be created from it.

    The file is staged but no database rows are written. The returned
    file_info must be sent back on commit.

    Raises:
        UnsupportedFileTypeError: 415 for types outside the allow-list
        FileTooLargeError: 413 for files over the size limit
        LLMError: 502/503 when analysis fails
    """
    resolve_file_kind(file.content_type)
    content = await read_upload(file)

    return await assembler.preview_upload(
        content,
        file.content_type,
        file.filename or "upload",
        uploaded_by,
    )


@router.post("", response_model=PersistedResult, status_code=status.HTTP_201_CREATED)
async def commit_module(
    request: CommitModuleRequest,
    assembler: ModuleAssembler = Depends(get_module_assembler),
):
    """
    Persist an approved preview as a draft module.

    Document, module and questions are written in one transaction. An
    empty question list is accepted.
    """
    return await assembler.commit(
        request.module,
        request.file_info,
        request.questions,
        created_by=request.created_by,
    )


@router.post("/{module_id}/quiz/regenerate", response_model=RegeneratedQuizResponse)
async def regenerate_module_quiz(
    module_id: int,
    assembler: ModuleAssembler = Depends(get_module_assembler),
):
    """Generate a fresh question set for an existing module without saving it."""
    questions = await assembler.regenerate_quiz(module_id)
    return RegeneratedQuizResponse(module_id=module_id, questions=questions)


@router.get("/{module_id}/questions", response_model=ModuleQuestionsResponse)
async def list_module_questions(
    module_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Return a module's questions ordered 1..N."""
    if await get_module(db, module_id) is None:
        raise NotFoundError(f"Training module {module_id} not found")

    rows = await get_module_questions(db, module_id)
    return ModuleQuestionsResponse(
        module_id=module_id,
        questions=[QuestionRecord.model_validate(row) for row in rows],
    )


@router.post("/review-suggestions", response_model=SuggestionResult)
async def review_suggestions(
    request: ReviewSuggestionRequest,
    db: AsyncSession = Depends(get_db),
    llm_client: ModelClient = Depends(get_llm_client),
):
    """
    Decide whether a learner should review after a quiz attempt.

    The catalog is every non-archived module except the one the quiz
    belongs to.
    """
    catalog = await list_module_catalog(db, exclude_module_id=request.module_id)
    return await suggest_review(
        request.score,
        request.total_questions,
        request.module_title,
        catalog,
        llm_client,
        exclude_module_id=request.module_id,
    )
