"""
Text Extraction Stage

Turns an uploaded file into plain text for the analysis stage.

- PDF: PyMuPDF page text
- DOCX: python-docx paragraphs and table cells
- Video: no transcription; a metadata placeholder

Extraction never raises because of file quality. Unreadable or empty files
produce a placeholder that starts with a marker the analysis stage
recognises, so a corrupt upload still yields a (speculative) module the
editor can fix.

Usage:
    from trainforge.services.processing.stages.text_extraction import extract_text

    text = extract_text(file_bytes, FileKind.PDF, "safety-handbook.pdf")
"""

import logging
import re
from io import BytesIO
from pathlib import Path

import fitz  # PyMuPDF
from docx import Document

from trainforge.enums.training import FileKind
from trainforge.utils.text_utils import clean_text

logger = logging.getLogger(__name__)

EXTRACTION_FALLBACK_MARKER = "[EXTRACTION FALLBACK]"
NON_TEXT_CONTENT_MARKER = "[NON-TEXT CONTENT]"
PLACEHOLDER_MARKERS = (EXTRACTION_FALLBACK_MARKER, NON_TEXT_CONTENT_MARKER)
DEFAULT_FILE_NAME = "upload"


def clean_title_from_filename(file_name: str) -> str:
    """
    Derive a human-readable title from an uploaded file name.

    Strips the directory and extension, turns "-" and "_" into spaces and
    collapses whitespace: "Workplace_Safety-101.pdf" → "Workplace Safety 101".
    Falls back to the original name, then to "upload", when nothing is left.
    """
    stem = Path(file_name).name
    stem = re.sub(r"\.[^.]+$", "", stem)
    title = re.sub(r"[-_]+", " ", stem)
    title = re.sub(r"\s+", " ", title).strip()
    return title or file_name.strip() or DEFAULT_FILE_NAME


def extract_text(file_content: bytes, file_kind: FileKind, original_name: str) -> str:
    """
    Extract plain text from an uploaded file.

    Args:
        file_content: Raw file bytes
        file_kind: Kind resolved from the upload's MIME type
        original_name: File name as uploaded by the editor

    Returns:
        Non-empty text: the extracted content, or a marked placeholder
    """
    if file_kind == FileKind.VIDEO:
        logger.info(f"No transcription for video {original_name}, using placeholder")
        return _video_placeholder(original_name, len(file_content))

    try:
        if file_kind == FileKind.PDF:
            text = _extract_pdf_text(file_content)
        else:
            text = _extract_docx_text(file_content)
    except Exception as e:
        logger.warning(f"{file_kind.value} extraction failed for {original_name}: {e}")
        return _fallback_placeholder(original_name, file_kind, reason="unreadable file")

    text = clean_text(text)
    if not text:
        logger.warning(f"No text found in {file_kind.value} {original_name}")
        return _fallback_placeholder(original_name, file_kind, reason="no text content")

    logger.debug(f"Extracted {len(text)} chars from {original_name}")
    return text


def _extract_pdf_text(file_content: bytes) -> str:
    """Concatenate the text of every PDF page."""
    doc = fitz.open(stream=file_content, filetype="pdf")
    text_parts: list[str] = []

    try:
        for page in doc:
            page_text = page.get_text("text")
            if page_text.strip():
                text_parts.append(page_text)
    finally:
        doc.close()

    return "\n\n".join(text_parts)


def _extract_docx_text(file_content: bytes) -> str:
    """Concatenate paragraph text and table cell text of a Word document."""
    doc = Document(BytesIO(file_content))
    text_parts = [p.text for p in doc.paragraphs if p.text.strip()]

    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                text_parts.append(" | ".join(cells))

    return "\n".join(text_parts)


def _fallback_placeholder(original_name: str, file_kind: FileKind, reason: str) -> str:
    title = clean_title_from_filename(original_name)
    return (
        f"{EXTRACTION_FALLBACK_MARKER} Text extraction from {file_kind.value} file "
        f'"{original_name}" produced no usable content ({reason}). '
        f'Training topic inferred from the file name: "{title}".'
    )


def _video_placeholder(original_name: str, file_size: int) -> str:
    title = clean_title_from_filename(original_name)
    return (
        f'{NON_TEXT_CONTENT_MARKER} Video file "{original_name}" ({file_size} bytes). '
        f"The video's content requires transcription and is not available as text. "
        f'Training topic inferred from the file name: "{title}".'
    )
