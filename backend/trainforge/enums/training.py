"""
Training content enums.

Defines the closed value sets for uploaded files, training modules and
quiz questions. Values match what is persisted in the database.
"""

from enum import Enum


class FileKind(str, Enum):
    """Kinds of source files accepted by the upload boundary."""

    PDF = "pdf"
    DOCX = "docx"
    VIDEO = "video"


class LearningStage(str, Enum):
    """
    Difficulty stage of a training module.

    - onboarding: policy and orientation material
    - foundational: basic technical concepts
    - intermediate: concepts requiring prior knowledge
    - advanced: expert or specialized material
    """

    ONBOARDING = "onboarding"
    FOUNDATIONAL = "foundational"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ModuleStatus(str, Enum):
    """Lifecycle status of a training module."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class QuestionType(str, Enum):
    """Supported quiz question formats."""

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
