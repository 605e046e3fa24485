"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import os
import sys
from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root before settings are created
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

# Settings are read when trainforge is first imported, so the test
# environment is forced here rather than in a fixture.
os.environ.update(
    {
        "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
        "UPLOAD_DIR": "/tmp/trainforge_test_uploads",
        "OPENAI_API_KEY": os.environ.get("OPENAI_API_KEY") or "test-api-key",
        "DEBUG": "false",
    }
)

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from trainforge.db.base import Base  # noqa: E402
from trainforge.enums.training import FileKind  # noqa: E402
from trainforge.models.training import FileInfo  # noqa: E402
from trainforge.services.llm.usage import LLMUsage  # noqa: E402

from tests.helpers import make_analysis_response, make_quiz_response, make_usage  # noqa: E402


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def sample_usage() -> LLMUsage:
    return make_usage()


@pytest.fixture
def mock_llm_client() -> MagicMock:
    """
    Create a mock model client for unit testing.

    Each coroutine returns (parsed JSON, LLMUsage) like LLMClient does.
    """
    mock = MagicMock()
    mock.analyze = AsyncMock(return_value=(make_analysis_response(), make_usage()))
    mock.generate_questions = AsyncMock(return_value=(make_quiz_response(), make_usage()))
    mock.suggest_modules = AsyncMock(return_value=({"suggested_modules": []}, make_usage()))
    return mock


@pytest.fixture
def file_info(upload_dir: Path) -> FileInfo:
    """A staged upload that exists on disk under the staging directory."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / "staged.pdf"
    path.write_bytes(b"%PDF-1.4")
    return FileInfo(
        file_name="staged.pdf",
        original_name="Workplace_Safety.pdf",
        file_kind=FileKind.PDF,
        file_path=str(path),
        file_size=8,
        uploaded_by="editor-1",
    )


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect staged uploads into a temporary directory."""
    monkeypatch.setattr("trainforge.services.uploads.UPLOAD_DIR", tmp_path)
    return tmp_path / "documents"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    In-memory SQLite database with all tables created.

    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
