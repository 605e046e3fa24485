"""
Quiz Generation Stage

Generates 10-15 mixed multiple-choice and true/false questions for a
training module from its summary and key topics.

Each question returned by the model is normalised before it is accepted:
- multiple_choice: exactly four options; the answer is matched to an
  option exactly, case-insensitively, or by letter (A-D) and rewritten to
  the option's exact text
- true_false: the answer is normalised to "True" or "False"; options are
  always ["True", "False"]
- question text and explanation are required

Items that cannot be normalised are dropped and logged. At most QUIZ_MAX
questions are kept. Fewer than QUIZ_MIN valid questions is logged as a
quality warning and returned for the editor to complete.

Usage:
    from trainforge.services.processing.stages.quiz_generation import generate_quiz

    questions, usages = await generate_quiz(summary, ["Leadership"], llm_client)
"""

import logging
import string
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from trainforge.config.processing import processing_settings
from trainforge.enums.training import QuestionType
from trainforge.models.training import (
    MULTIPLE_CHOICE_OPTION_COUNT,
    GeneratedQuestion,
)
from trainforge.services.llm.client import ModelClient
from trainforge.services.llm.usage import LLMUsage
from trainforge.utils.text_utils import normalize_llm_json_response

logger = logging.getLogger(__name__)

QUIZ_SYSTEM_PROMPT = (
    "You are an expert quiz designer. Create engaging and educational quiz "
    "questions that effectively test understanding of training material."
)

QUIZ_PROMPT = """Generate quiz questions for a corporate training module.

Module Summary:
{summary}

Key Topics: {topics}

Generate {min_questions}-{max_questions} questions that mix "multiple_choice" and "true_false" types.
Questions should test practical understanding of the material, not memorization of wording.
Cover the key topics as evenly as possible.

Return as JSON:
{{
  "questions": [
    {{
      "question_text": "The question",
      "question_type": "multiple_choice",
      "options": ["Option A text", "Option B text", "Option C text", "Option D text"],
      "correct_answer": "Exact text of the correct option",
      "explanation": "Brief explanation of why this answer is correct"
    }},
    {{
      "question_text": "A statement to judge",
      "question_type": "true_false",
      "correct_answer": "True",
      "explanation": "Brief explanation"
    }}
  ]
}}

Rules:
- multiple_choice questions have exactly 4 options and correct_answer is copied verbatim from the options
- true_false questions have correct_answer "True" or "False" and no options
- every question has an explanation
"""

_TYPE_ALIASES = {
    "multiple_choice": QuestionType.MULTIPLE_CHOICE,
    "multiple choice": QuestionType.MULTIPLE_CHOICE,
    "multiple-choice": QuestionType.MULTIPLE_CHOICE,
    "multiplechoice": QuestionType.MULTIPLE_CHOICE,
    "mcq": QuestionType.MULTIPLE_CHOICE,
    "true_false": QuestionType.TRUE_FALSE,
    "true/false": QuestionType.TRUE_FALSE,
    "true false": QuestionType.TRUE_FALSE,
    "true-false": QuestionType.TRUE_FALSE,
    "truefalse": QuestionType.TRUE_FALSE,
    "boolean": QuestionType.TRUE_FALSE,
}

_TRUE_VALUES = {"true", "t", "yes"}
_FALSE_VALUES = {"false", "f", "no"}

_OPTION_LETTERS = string.ascii_uppercase[:MULTIPLE_CHOICE_OPTION_COUNT]


async def generate_quiz(
    content: str,
    key_topics: list[str],
    llm_client: ModelClient,
) -> tuple[list[GeneratedQuestion], list[LLMUsage]]:
    """
    Generate quiz questions for a module.

    Args:
        content: Module summary (or description) the questions are based on
        key_topics: Topics the questions should cover
        llm_client: Injected model client

    Returns:
        Tuple of (list of GeneratedQuestion, list of LLMUsage)

    Raises:
        LLMError: If the model call fails (after retries for transient errors)
    """
    min_questions = processing_settings.QUIZ_MIN
    max_questions = processing_settings.QUIZ_MAX

    prompt = QUIZ_PROMPT.format(
        summary=(content or "")[: processing_settings.QUIZ_SUMMARY_TRUNCATE],
        topics=", ".join(key_topics) if key_topics else "None provided",
        min_questions=min_questions,
        max_questions=max_questions,
    )

    data, usage = await llm_client.generate_questions(prompt, system_prompt=QUIZ_SYSTEM_PROMPT)

    raw_items = normalize_llm_json_response(data, "questions").get("questions")
    if not isinstance(raw_items, list):
        logger.warning("Malformed quiz output, no question list found")
        raw_items = []

    questions: list[GeneratedQuestion] = []
    dropped = 0
    for item in raw_items:
        question = normalize_question(item)
        if question is None:
            dropped += 1
            continue
        questions.append(question)

    if dropped:
        logger.warning(f"Dropped {dropped} malformed quiz questions")

    if len(questions) > max_questions:
        logger.debug(f"Clamping {len(questions)} questions to {max_questions}")
        questions = questions[:max_questions]

    if len(questions) < min_questions:
        logger.warning(
            f"Quiz has {len(questions)} valid questions, expected at least {min_questions}"
        )

    logger.debug(f"Generated {len(questions)} quiz questions")
    return questions, [usage]


def normalize_question(item: Any) -> Optional[GeneratedQuestion]:
    """
    Normalise one model-produced question.

    Returns:
        A valid GeneratedQuestion, or None when the item cannot be repaired
    """
    if not isinstance(item, dict):
        return None

    question_type = _validate_question_type(_first_present(item, "question_type", "questionType", "type"))
    if question_type is None:
        return None

    text = _first_present(item, "question_text", "questionText", "question")
    explanation = _first_present(item, "explanation")
    if not _is_filled(text) or not _is_filled(explanation):
        return None

    raw_answer = _first_present(item, "correct_answer", "correctAnswer", "answer")

    if question_type == QuestionType.MULTIPLE_CHOICE:
        options = item.get("options")
        if not isinstance(options, list) or len(options) != MULTIPLE_CHOICE_OPTION_COUNT:
            return None
        options = [str(o).strip() for o in options if o is not None]
        answer = _match_option(raw_answer, options)
    else:
        options = []
        answer = _normalize_true_false(raw_answer)

    if answer is None:
        return None

    try:
        return GeneratedQuestion(
            question_text=text,
            question_type=question_type,
            options=options,
            correct_answer=answer,
            explanation=explanation,
        )
    except PydanticValidationError as e:
        logger.debug(f"Rejected quiz question: {e.errors()[0]['msg']}")
        return None


def _validate_question_type(qtype: Any) -> Optional[QuestionType]:
    """Validate and normalize question type; None for unknown types."""
    if not isinstance(qtype, str):
        return None
    return _TYPE_ALIASES.get(qtype.strip().lower())


def _match_option(answer: Any, options: list[str]) -> Optional[str]:
    """Resolve a multiple-choice answer to the exact text of one option."""
    if len(options) != MULTIPLE_CHOICE_OPTION_COUNT or not isinstance(answer, str):
        return None

    answer = answer.strip()
    if answer in options:
        return answer

    lowered = answer.lower()
    for option in options:
        if option.lower() == lowered:
            return option

    # "B", "b)", "B." style answers
    letter = answer.rstrip(").:").strip().upper()
    if len(letter) == 1 and letter in _OPTION_LETTERS:
        return options[_OPTION_LETTERS.index(letter)]

    return None


def _normalize_true_false(answer: Any) -> Optional[str]:
    """Normalize a true/false answer to "True" or "False"."""
    if isinstance(answer, bool):
        return "True" if answer else "False"
    if not isinstance(answer, str):
        return None
    lowered = answer.strip().lower()
    if lowered in _TRUE_VALUES:
        return "True"
    if lowered in _FALSE_VALUES:
        return "False"
    return None


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _first_present(item: dict, *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None
