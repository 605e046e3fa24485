"""
SQLAlchemy Database Models

These models define the relational schema for training content.

Tables:
- documents: Uploaded source files and their AI-derived summary/topics
- training_modules: Modules built from documents (created as drafts)
- quiz_questions: Ordered quiz questions belonging to a module

Enum-valued columns store the enum's string value so the schema does not
depend on database-native enum types.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trainforge.db.base import Base
from trainforge.enums.training import LearningStage, ModuleStatus


class Document(Base):
    """
    Uploaded source documents.

    A document may exist without a module; at most one module refers to it.
    Only the AI-derived fields (summary, key topics) change after creation.
    """

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(primary_key=True)

    # File identification
    file_name: Mapped[str] = mapped_column(String(255))  # Stored (uuid) name
    original_name: Mapped[str] = mapped_column(String(500))
    file_kind: Mapped[str] = mapped_column(String(20))  # pdf, docx, video
    file_path: Mapped[str] = mapped_column(String(1000))
    file_size: Mapped[int] = mapped_column(Integer)
    uploaded_by: Mapped[Optional[str]] = mapped_column(String(255))

    # AI-derived fields
    ai_summary: Mapped[Optional[str]] = mapped_column(Text)
    key_topics: Mapped[list] = mapped_column(JSON, default=list)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    module: Mapped[Optional["TrainingModule"]] = relationship(back_populates="document")


class TrainingModule(Base):
    """
    Training modules.

    Created in draft status by the module assembler; publishing and
    archiving happen elsewhere.
    """

    __tablename__ = "training_modules"

    id: Mapped[int] = mapped_column(primary_key=True)

    title: Mapped[str] = mapped_column(String(500))
    description: Mapped[Optional[str]] = mapped_column(Text)
    learning_stage: Mapped[str] = mapped_column(
        String(20), default=LearningStage.FOUNDATIONAL.value
    )
    status: Mapped[str] = mapped_column(String(20), default=ModuleStatus.DRAFT.value)

    document_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("documents.id"), unique=True
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(255))
    ai_generated: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    document: Mapped[Optional["Document"]] = relationship(back_populates="module")
    questions: Mapped[List["QuizQuestion"]] = relationship(
        back_populates="module", order_by="QuizQuestion.order"
    )


class QuizQuestion(Base):
    """
    Quiz questions of a module.

    Orders are 1-based and unique within a module.
    """

    __tablename__ = "quiz_questions"
    __table_args__ = (
        UniqueConstraint("module_id", "order", name="uq_quiz_questions_module_order"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    module_id: Mapped[int] = mapped_column(ForeignKey("training_modules.id"))

    question_text: Mapped[str] = mapped_column(Text)
    question_type: Mapped[str] = mapped_column(String(20))  # multiple_choice, true_false
    options: Mapped[list] = mapped_column(JSON, default=list)
    correct_answer: Mapped[str] = mapped_column(Text)
    explanation: Mapped[Optional[str]] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    module: Mapped["TrainingModule"] = relationship(back_populates="questions")
