"""
Centralized enum definitions for the application.

All enums are organized by domain:
- pipeline.py: Pipeline names and LLM operations
- training.py: File kinds, learning stages, module status, question types

Usage:
    from trainforge.enums import LearningStage, PipelineOperation

    # Or import from specific module
    from trainforge.enums.training import QuestionType
"""

from trainforge.enums.pipeline import PipelineName, PipelineOperation
from trainforge.enums.training import (
    FileKind,
    LearningStage,
    ModuleStatus,
    QuestionType,
)

__all__ = [
    # Pipeline
    "PipelineName",
    "PipelineOperation",
    # Training
    "FileKind",
    "LearningStage",
    "ModuleStatus",
    "QuestionType",
]
