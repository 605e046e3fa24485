"""
Unit tests for the preview_module command-line script.
"""

import importlib.util
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from trainforge.services.processing.pipeline import ModuleAssembler

from tests.helpers import make_pdf

SCRIPT_PATH = Path(__file__).resolve().parents[3] / "scripts" / "preview_module.py"


@pytest.fixture
def preview_script(monkeypatch, mock_llm_client, session_factory):
    spec = importlib.util.spec_from_file_location("preview_module", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    monkeypatch.setattr(module, "LLMClient", lambda: mock_llm_client)
    monkeypatch.setattr(
        module,
        "ModuleAssembler",
        lambda llm_client: ModuleAssembler(llm_client, session_factory=session_factory),
    )
    monkeypatch.setattr(module, "init_db", AsyncMock())
    return module


@pytest.fixture
def source_pdf(tmp_path) -> Path:
    path = tmp_path / "Forklift_Safety.pdf"
    path.write_bytes(make_pdf("Forklifts must be inspected before every shift by the operator."))
    return path


@pytest.mark.asyncio
async def test_preview_only_discards_staged_file(
    preview_script, source_pdf, upload_dir, monkeypatch, capsys
):
    monkeypatch.setattr(sys, "argv", ["preview_module.py", str(source_pdf)])

    await preview_script.main()

    assert "Workplace Safety Basics" in capsys.readouterr().out
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_commit_keeps_staged_file(
    preview_script, source_pdf, upload_dir, monkeypatch, capsys
):
    monkeypatch.setattr(sys, "argv", ["preview_module.py", str(source_pdf), "--commit"])

    await preview_script.main()

    assert "Saved draft module" in capsys.readouterr().out
    assert len(list(upload_dir.iterdir())) == 1
