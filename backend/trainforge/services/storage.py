"""
Storage Service

Persistence and lookup of documents, training modules and quiz questions.

Write helpers add and flush but never commit: the caller owns the
transaction, so a module, its document and its questions are committed
(or rolled back) together.

Usage:
    from trainforge.services.storage import get_module_questions

    async with async_session_maker() as session:
        questions = await get_module_questions(session, module_id)
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from trainforge.db.models import Document, QuizQuestion, TrainingModule
from trainforge.enums.training import ModuleStatus
from trainforge.models.training import (
    CatalogEntry,
    FileInfo,
    GeneratedQuestion,
    ModuleFields,
)

logger = logging.getLogger(__name__)


async def add_training_module(
    session: AsyncSession,
    module_fields: ModuleFields,
    file_info: FileInfo,
    questions: list[GeneratedQuestion],
    created_by: Optional[str] = None,
) -> tuple[Document, TrainingModule, list[QuizQuestion]]:
    """
    Stage a document, its draft module and the module's questions.

    Operations performed:
        1. Adds the Document (AI summary/topics taken from the module fields)
        2. Flushes to obtain the document id
        3. Adds the TrainingModule (draft, ai_generated) pointing at it
        4. Flushes to obtain the module id
        5. Adds the questions with orders 1..N in input order
        6. Flushes so constraint violations surface before commit

    Args:
        session: Active database session (caller commits or rolls back)
        module_fields: Editor-approved module fields
        file_info: Staged upload the document refers to
        questions: Questions in display order
        created_by: Module creator; defaults to the uploader

    Returns:
        Tuple of (Document, TrainingModule, list of QuizQuestion) with ids set
    """
    document = Document(
        file_name=file_info.file_name,
        original_name=file_info.original_name,
        file_kind=file_info.file_kind.value,
        file_path=file_info.file_path,
        file_size=file_info.file_size,
        uploaded_by=file_info.uploaded_by,
        ai_summary=module_fields.description,
        key_topics=list(module_fields.key_topics),
    )
    session.add(document)
    await session.flush()

    module = TrainingModule(
        title=module_fields.title.strip(),
        description=module_fields.description,
        learning_stage=module_fields.learning_stage.value,
        status=ModuleStatus.DRAFT.value,
        document_id=document.id,
        created_by=created_by or file_info.uploaded_by,
        ai_generated=True,
    )
    session.add(module)
    await session.flush()

    rows = [
        QuizQuestion(
            module_id=module.id,
            question_text=q.question_text,
            question_type=q.question_type.value,
            options=list(q.options),
            correct_answer=q.correct_answer,
            explanation=q.explanation,
            order=index,
        )
        for index, q in enumerate(questions, start=1)
    ]
    session.add_all(rows)
    await session.flush()

    logger.debug(
        f"Staged module {module.id} (document {document.id}) with {len(rows)} questions"
    )
    return document, module, rows


async def get_module(session: AsyncSession, module_id: int) -> Optional[TrainingModule]:
    """Load a training module by id."""
    return await session.get(TrainingModule, module_id)


async def get_document(session: AsyncSession, document_id: int) -> Optional[Document]:
    """Load a document by id."""
    return await session.get(Document, document_id)


async def get_module_questions(session: AsyncSession, module_id: int) -> list[QuizQuestion]:
    """Load a module's questions in display order."""
    result = await session.execute(
        select(QuizQuestion)
        .where(QuizQuestion.module_id == module_id)
        .order_by(QuizQuestion.order)
    )
    return list(result.scalars().all())


async def list_module_catalog(
    session: AsyncSession, exclude_module_id: Optional[int] = None
) -> list[CatalogEntry]:
    """
    List modules that may be suggested for review.

    Archived modules are left out.
    """
    query = (
        select(TrainingModule)
        .where(TrainingModule.status != ModuleStatus.ARCHIVED.value)
        .order_by(TrainingModule.id)
    )
    if exclude_module_id is not None:
        query = query.where(TrainingModule.id != exclude_module_id)

    result = await session.execute(query)
    return [CatalogEntry.model_validate(m) for m in result.scalars().all()]
