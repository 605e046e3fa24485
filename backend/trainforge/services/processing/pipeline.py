"""
Module Pipeline Orchestrator

Coordinates the stages that turn an upload into a training module and
owns the transaction that persists it.

Pipeline shape (preview, then commit):
1. Upload validation and staging
2. Text Extraction - never fails; degraded files yield a placeholder
3. Content Analysis - summary, topics, stage, title (failure aborts the preview)
4. Quiz Generation - 10-15 questions (failure yields an empty quiz)
5. Editor review (outside this service)
6. Commit - Document, draft TrainingModule and ordered questions in one
   transaction

Nothing is persisted until commit. Each run is independent; uploading the
same file twice produces two modules.

Cost Tracking:
    Every model call returns an LLMUsage. A preview reports their summed
    cost as estimated_cost_usd.

Usage:
    from trainforge.services.processing import ModuleAssembler

    assembler = ModuleAssembler(llm_client)
    preview = await assembler.preview_upload(data, "application/pdf", "safety.pdf", "editor-1")
    persisted = await assembler.commit(module_fields, preview.file_info, preview.questions)
"""

import logging
import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trainforge.config.processing import processing_settings
from trainforge.enums.training import FileKind
from trainforge.middleware.error_handling import (
    LLMError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from trainforge.models.training import (
    DocumentRecord,
    FileInfo,
    GeneratedQuestion,
    ModuleFields,
    ModuleRecord,
    PersistedResult,
    PreviewResult,
    QuestionRecord,
)
from trainforge.services.llm.client import ModelClient
from trainforge.services.llm.usage import LLMUsage, total_cost
from trainforge.services.processing.stages.content_analysis import analyze_document
from trainforge.services.processing.stages.quiz_generation import generate_quiz
from trainforge.services.processing.stages.text_extraction import extract_text
from trainforge.services.processing.validation import (
    validate_module_fields,
    validate_preview,
)
from trainforge.services.storage import (
    add_training_module,
    get_document,
    get_module,
)
from trainforge.services.uploads import (
    discard_upload,
    stage_upload,
    validate_upload,
    verify_staged_upload,
)
from trainforge.utils.text_utils import truncate_text

logger = logging.getLogger(__name__)


class ModuleAssembler:
    """
    Builds training modules from uploaded documents.

    Args:
        llm_client: Injected model client used by analysis and quiz stages
        session_factory: Async session factory for commit and lookups
            (defaults to the application's session maker)
    """

    def __init__(
        self,
        llm_client: ModelClient,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        if session_factory is None:
            from trainforge.db.base import async_session_maker

            session_factory = async_session_maker
        self.llm_client = llm_client
        self.session_factory = session_factory

    async def preview_upload(
        self,
        file_content: bytes,
        mime_type: Optional[str],
        original_name: str,
        uploaded_by: Optional[str] = None,
    ) -> PreviewResult:
        """
        Validate and stage an upload, then preview it.

        Raises:
            UnsupportedFileTypeError, FileTooLargeError, ValidationError:
                The upload was rejected; nothing was written
            LLMError: Analysis failed; the staged file was discarded
        """
        file_kind = validate_upload(mime_type, len(file_content))
        file_info = await stage_upload(file_content, original_name, file_kind, uploaded_by)
        return await self.preview(file_content, file_kind, original_name, file_info=file_info)

    async def preview(
        self,
        file_content: bytes,
        file_kind: FileKind,
        original_name: str,
        file_info: Optional[FileInfo] = None,
    ) -> PreviewResult:
        """
        Run extraction, analysis and quiz generation without persisting.

        Args:
            file_content: Raw file bytes
            file_kind: Kind resolved from the upload's MIME type
            original_name: File name as uploaded
            file_info: Staged upload, returned with the preview for commit

        Returns:
            PreviewResult for editor review

        Raises:
            LLMError: If analysis fails. A staged file is discarded first.
        """
        start_time = time.perf_counter()
        usages: list[LLMUsage] = []

        logger.info(f"Previewing {original_name} ({file_kind.value}, {len(file_content)} bytes)")

        # Stage 1: extraction (never raises)
        text = extract_text(file_content, file_kind, original_name)

        # Stage 2: analysis (required)
        try:
            analysis, analysis_usages = await analyze_document(
                text, original_name, self.llm_client
            )
        except LLMError:
            logger.error(f"Analysis failed for {original_name}, aborting preview")
            if file_info is not None:
                await discard_upload(file_info)
            raise
        usages.extend(analysis_usages)

        # Stage 3: quiz (optional)
        quiz_failed = False
        try:
            questions, quiz_usages = await generate_quiz(
                analysis.summary, analysis.key_topics, self.llm_client
            )
            usages.extend(quiz_usages)
        except LLMError as e:
            logger.error(f"Quiz generation failed for {original_name}, continuing without questions: {e}")
            questions, quiz_failed = [], True

        preview = PreviewResult(
            analysis=analysis,
            questions=questions,
            extracted_text_sample=truncate_text(text, processing_settings.PREVIEW_SAMPLE_CHARS),
            file_info=file_info,
            quiz_generation_failed=quiz_failed,
            estimated_cost_usd=total_cost(usages),
        )
        preview.quality_issues = validate_preview(preview)
        if preview.quality_issues:
            logger.warning(f"Quality issues for {original_name}: {preview.quality_issues}")

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Preview of {original_name} ready in {elapsed:.2f}s: "
            f"stage={analysis.learning_stage.value}, questions={len(questions)}, "
            f"cost=${preview.estimated_cost_usd:.4f}"
        )
        return preview

    async def commit(
        self,
        module_fields: ModuleFields,
        file_info: FileInfo,
        questions: list[GeneratedQuestion],
        created_by: Optional[str] = None,
    ) -> PersistedResult:
        """
        Persist an approved preview atomically.

        Writes the Document, a draft TrainingModule referencing it and the
        questions (orders 1..N in input order) in a single transaction. An
        empty question list is valid.

        Raises:
            ValidationError: Module fields or file info rejected; nothing was written
            PersistenceError: The transaction failed and was rolled back
        """
        issues = validate_module_fields(module_fields)
        if issues:
            raise ValidationError("Module cannot be saved", details={"issues": issues})
        await verify_staged_upload(file_info)

        async with self.session_factory() as session:
            try:
                document, module, rows = await add_training_module(
                    session, module_fields, file_info, questions, created_by
                )
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Commit of module '{module_fields.title}' failed, rolled back: {e}")
                raise PersistenceError(
                    "Failed to save training module", details={"reason": str(e)}
                ) from e

        logger.info(
            f"Committed module {module.id} '{module.title}' "
            f"(document {document.id}, {len(rows)} questions)"
        )
        return PersistedResult(
            document=DocumentRecord.model_validate(document),
            module=ModuleRecord.model_validate(module),
            questions=[QuestionRecord.model_validate(row) for row in rows],
        )

    async def regenerate_quiz(self, module_id: int) -> list[GeneratedQuestion]:
        """
        Generate a fresh question set for an existing module.

        The module's description and its document's key topics feed the
        quiz prompt. Nothing is persisted.

        Raises:
            NotFoundError: Unknown module id
            LLMError: The model call failed
        """
        async with self.session_factory() as session:
            module = await get_module(session, module_id)
            if module is None:
                raise NotFoundError(f"Training module {module_id} not found")
            document = (
                await get_document(session, module.document_id)
                if module.document_id is not None
                else None
            )

        key_topics = list(document.key_topics or []) if document else []
        if not key_topics:
            key_topics = [module.title]
        content = module.description or (document.ai_summary if document else None) or module.title

        questions, _ = await generate_quiz(content, key_topics, self.llm_client)
        logger.info(f"Regenerated {len(questions)} questions for module {module_id}")
        return questions
