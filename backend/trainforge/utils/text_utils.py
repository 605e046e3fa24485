"""
Text Processing Utilities

Helpers shared by extraction, analysis and quiz generation: cleaning
extracted text, truncating prompt input and coercing LLM JSON output into
the shape a stage expects.

Usage:
    from trainforge.utils.text_utils import clean_text, extract_json_from_response

    text = clean_text(raw_pdf_text)
    data = extract_json_from_response(llm_output)
"""

import json
import re
from typing import Any, Optional


def normalize_llm_json_response(data: Any, expected_key: str) -> dict:
    """
    Coerce a list-bearing LLM response into a dict keyed by expected_key.

    Models asked for {"questions": [...]} sometimes answer with the bare
    list. A bare list is wrapped; a dict is returned unchanged.

    Examples:
        normalize_llm_json_response([{"q": 1}], "questions")
        # {"questions": [{"q": 1}]}

    Args:
        data: Parsed JSON from the LLM
        expected_key: Key that should hold the list (e.g. "questions")

    Returns:
        Dict with the expected key, or {} for any other type
    """
    if isinstance(data, dict):
        return data
    if isinstance(data, list):
        return {expected_key: data}
    return {}


def unwrap_llm_single_object_response(data: Any) -> dict:
    """
    Coerce an object-shaped LLM response into a dict.

    Models asked for {"summary": ...} sometimes answer with [{"summary": ...}].
    The first element of such a list is returned.

    Args:
        data: Parsed JSON from the LLM

    Returns:
        The object, or {} when no object can be found
    """
    if isinstance(data, dict):
        return data
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return {}


def clean_text(text: str) -> str:
    """
    Clean and normalize extracted text.

    - Removes null characters
    - Normalizes line endings
    - Collapses runs of blank lines and inline whitespace
    - Strips each line and the whole text

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = text.replace("\x00", "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[^\S\n]+", " ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def extract_json_from_response(response_text: Optional[str]) -> Optional[Any]:
    """
    Parse JSON out of an LLM response.

    Handles raw JSON, JSON fenced in ```json or ``` blocks, and JSON
    surrounded by prose. Only the first candidate is used.

    Args:
        response_text: LLM response text

    Returns:
        Parsed JSON value, or None if nothing parses
    """
    if not response_text:
        return None

    text = response_text.strip()

    fence = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
    if fence:
        text = fence.group(1).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for pattern in (r"(\{[\s\S]*\})", r"(\[[\s\S]*\])"):
        match = re.search(pattern, text)
        if match:
            try:
                return json.loads(match.group(1))
            except json.JSONDecodeError:
                continue

    return None


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to max_length characters, appending suffix when cut.

    Args:
        text: Text to truncate
        max_length: Number of characters kept from the original text
        suffix: Marker appended when truncation happened

    Returns:
        The original text, or its first max_length characters plus suffix
    """
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length] + suffix
