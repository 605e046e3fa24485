#!/usr/bin/env python3
"""
Training Module Preview Script

Run the module pipeline on a local file and print what an editor would see.

Stages:
1. Upload validation and staging
2. Text Extraction
3. Content Analysis
4. Quiz Generation
5. (optional) Commit as a draft module

Setup:
    1. Copy .env.example to .env in the project root and fill in API keys
    2. For --commit, point DATABASE_URL (or POSTGRES_*) at a database

Usage:
    # Preview a document
    python scripts/preview_module.py docs/onboarding.pdf

    # Emit the full preview as JSON
    python scripts/preview_module.py docs/onboarding.pdf --format json

    # Preview and save as a draft module
    python scripts/preview_module.py docs/onboarding.docx --commit --uploaded-by editor-1
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

# Add backend to path for imports (must be before trainforge.* imports)
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from dotenv import load_dotenv

# Load environment variables from project root .env
project_root = Path(__file__).parent.parent
if (project_root / ".env").exists():
    load_dotenv(project_root / ".env")
else:
    load_dotenv(project_root / "backend" / ".env")

# App imports (after sys.path setup and env loading)
from trainforge.db.base import engine, init_db
from trainforge.logging_config import setup_logging
from trainforge.models.training import ModuleFields, PreviewResult
from trainforge.services.llm.client import LLMClient
from trainforge.services.processing import ModuleAssembler
from trainforge.services.uploads import discard_upload

# Types mimetypes does not know on every platform
_EXTRA_MIME_TYPES = {
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".doc": "application/msword",
    ".avi": "video/avi",
    ".mov": "video/quicktime",
}


def guess_mime_type(path: Path) -> str:
    """Guess the upload MIME type from the file extension."""
    extra = _EXTRA_MIME_TYPES.get(path.suffix.lower())
    if extra:
        return extra
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def print_summary(preview: PreviewResult) -> None:
    """Print a human-readable preview."""
    analysis = preview.analysis
    print("\n" + "=" * 70)
    print(f"Title:   {analysis.suggested_title}")
    print(f"Stage:   {analysis.learning_stage.value}")
    print(f"Topics:  {', '.join(analysis.key_topics) or '-'}")
    if analysis.degraded:
        print("Note:    inferred from the file name (no readable text)")
    print("-" * 70)
    print(analysis.summary)
    print("-" * 70)

    for i, q in enumerate(preview.questions, 1):
        print(f"{i:2}. [{q.question_type.value}] {q.question_text}")
        for option in q.options:
            marker = "*" if option == q.correct_answer else " "
            print(f"      {marker} {option}")

    if preview.quality_issues:
        print("-" * 70)
        for issue in preview.quality_issues:
            print(f"! {issue}")

    print("=" * 70)
    print(f"Estimated cost: ${preview.estimated_cost_usd:.4f}")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Preview the training module generated from a file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("file", type=Path, help="PDF, Word document or video")
    parser.add_argument("--uploaded-by", default=None, help="Uploader id")
    parser.add_argument(
        "--commit", action="store_true", help="Save the preview as a draft module"
    )
    parser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


async def main() -> None:
    """Main entry point."""
    args = create_parser().parse_args()
    setup_logging(args.debug)

    if not args.file.is_file():
        print(f"File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    assembler = ModuleAssembler(LLMClient())
    preview = await assembler.preview_upload(
        args.file.read_bytes(),
        guess_mime_type(args.file),
        args.file.name,
        args.uploaded_by,
    )

    if args.format == "json":
        print(preview.model_dump_json(indent=2))
    else:
        print_summary(preview)

    if args.commit:
        await init_db()
        persisted = await assembler.commit(
            ModuleFields(
                title=preview.analysis.suggested_title,
                description=preview.analysis.summary,
                learning_stage=preview.analysis.learning_stage,
                key_topics=preview.analysis.key_topics,
            ),
            preview.file_info,
            preview.questions,
        )
        print(
            f"Saved draft module {persisted.module.id} "
            f"with {len(persisted.questions)} questions"
        )
    else:
        await discard_upload(preview.file_info)


async def run_with_cleanup() -> None:
    """Run main and release database connections."""
    try:
        await main()
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(run_with_cleanup())
