"""
Test data builders shared by the unit tests.

Raw dicts mimic what a model returns; make_questions builds validated
GeneratedQuestion objects as the editor would submit them.
"""

from io import BytesIO
from typing import Optional

import fitz
from docx import Document

from trainforge.enums.training import QuestionType
from trainforge.models.training import GeneratedQuestion
from trainforge.services.llm.usage import LLMUsage


def make_usage(cost: float = 0.001, operation: Optional[str] = None) -> LLMUsage:
    """Create an LLMUsage as returned by a successful model call."""
    return LLMUsage(
        model="openai/gpt-4o",
        provider="openai",
        prompt_tokens=100,
        completion_tokens=50,
        total_tokens=150,
        cost_usd=cost,
        operation=operation,
    )


def make_mc_question(n: int = 1) -> dict:
    """Create a raw multiple-choice question as a model would return it."""
    return {
        "question_text": f"Which step comes first in procedure {n}?",
        "question_type": "multiple_choice",
        "options": ["Inspect", "Report", "Ignore", "Restart"],
        "correct_answer": "Inspect",
        "explanation": "Inspection always precedes the other steps.",
    }


def make_tf_question(n: int = 1, answer="True") -> dict:
    """Create a raw true/false question as a model would return it."""
    return {
        "question_text": f"Statement {n} about safety is correct.",
        "question_type": "true_false",
        "correct_answer": answer,
        "explanation": "Covered in the safety section.",
    }


def make_quiz_response(count: int = 12) -> dict:
    """Create a quiz response alternating multiple-choice and true/false."""
    return {
        "questions": [
            make_mc_question(i) if i % 2 else make_tf_question(i)
            for i in range(1, count + 1)
        ]
    }


def make_analysis_response(
    summary: str = "Covers hazard reporting and protective equipment.",
    key_topics: Optional[list] = None,
    learning_stage: str = "onboarding",
    suggested_title: str = "Workplace Safety Basics",
) -> dict:
    """Create a standard analysis response dict."""
    return {
        "summary": summary,
        "key_topics": key_topics if key_topics is not None else ["Hazards", "PPE"],
        "learning_stage": learning_stage,
        "suggested_title": suggested_title,
    }


def make_questions(count: int = 3) -> list[GeneratedQuestion]:
    """Create validated questions, alternating types."""
    questions = []
    for i in range(1, count + 1):
        if i % 2:
            questions.append(
                GeneratedQuestion(
                    question_text=f"Question {i}?",
                    question_type=QuestionType.MULTIPLE_CHOICE,
                    options=["A1", "B1", "C1", "D1"],
                    correct_answer="C1",
                    explanation=f"Explanation {i}",
                )
            )
        else:
            questions.append(
                GeneratedQuestion(
                    question_text=f"Question {i}?",
                    question_type=QuestionType.TRUE_FALSE,
                    correct_answer="False",
                    explanation=f"Explanation {i}",
                )
            )
    return questions


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def make_docx(paragraphs: list[str], table_rows: list[list[str]] = None) -> bytes:
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for r, row in enumerate(table_rows):
            for c, value in enumerate(row):
                table.cell(r, c).text = value
    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()
