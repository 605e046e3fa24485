"""
Unit tests for the content analysis stage.

The model client is a mock; each test controls what it "answers".
"""

from unittest.mock import AsyncMock

import pytest

from trainforge.enums.training import LearningStage
from trainforge.middleware.error_handling import LLMError, LLMTransientError
from trainforge.services.processing.stages.content_analysis import (
    DEFAULT_SUMMARY,
    analyze_document,
    is_degraded_text,
    normalize_topics,
)
from trainforge.services.processing.stages.text_extraction import (
    EXTRACTION_FALLBACK_MARKER,
    NON_TEXT_CONTENT_MARKER,
)

from tests.helpers import make_analysis_response, make_usage

LONG_TEXT = "Employees must report hazards to their supervisor immediately. " * 5


class TestIsDegradedText:
    def test_placeholders_are_degraded(self):
        assert is_degraded_text(f"{EXTRACTION_FALLBACK_MARKER} nothing usable " * 5)
        assert is_degraded_text(f"{NON_TEXT_CONTENT_MARKER} video " * 5)

    def test_short_text_is_degraded(self):
        assert is_degraded_text("Too short")
        assert is_degraded_text("")

    def test_real_text_is_not_degraded(self):
        assert not is_degraded_text(LONG_TEXT)


class TestNormalizeTopics:
    def test_dedupes_case_insensitively(self):
        assert normalize_topics(["PPE", "ppe", " Hazards ", "hazards"]) == ["PPE", "Hazards"]

    def test_drops_blanks_and_non_strings(self):
        assert normalize_topics(["", "  ", None, 3, "Fire"]) == ["Fire"]

    def test_clamps_to_ten(self):
        topics = normalize_topics([f"Topic {i}" for i in range(15)])
        assert len(topics) == 10
        assert topics[0] == "Topic 0"

    def test_non_list_is_empty(self):
        assert normalize_topics("PPE, Hazards") == []


class TestAnalyzeDocument:
    @pytest.mark.asyncio
    async def test_real_content(self, mock_llm_client):
        analysis, usages = await analyze_document(LONG_TEXT, "safety.pdf", mock_llm_client)

        assert analysis.summary == "Covers hazard reporting and protective equipment."
        assert analysis.key_topics == ["Hazards", "PPE"]
        assert analysis.learning_stage == LearningStage.ONBOARDING
        assert analysis.suggested_title == "Workplace Safety Basics"
        assert analysis.degraded is False
        assert len(usages) == 1

        prompt = mock_llm_client.analyze.call_args.args[0]
        assert "Employees must report hazards" in prompt
        assert "safety.pdf" in prompt

    @pytest.mark.asyncio
    async def test_prompt_content_is_truncated(self, mock_llm_client):
        text = "x" * 10000
        await analyze_document(text, "long.pdf", mock_llm_client)

        prompt = mock_llm_client.analyze.call_args.args[0]
        assert "x" * 4000 in prompt
        assert "x" * 4001 not in prompt

    @pytest.mark.asyncio
    async def test_degraded_content_uses_filename(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(
            return_value=(
                make_analysis_response(suggested_title="Something Else Entirely"),
                make_usage(),
            )
        )
        placeholder = f"{EXTRACTION_FALLBACK_MARKER} Text extraction produced nothing."

        analysis, _ = await analyze_document(
            placeholder, "Workplace_Safety-101.pdf", mock_llm_client
        )

        assert analysis.degraded is True
        assert analysis.suggested_title == "Workplace Safety 101"
        prompt = mock_llm_client.analyze.call_args.args[0]
        assert '"Workplace Safety 101"' in prompt
        assert "SPECULATIVE" in prompt

    @pytest.mark.asyncio
    async def test_malformed_output_uses_defaults(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(return_value=(None, make_usage()))

        analysis, usages = await analyze_document(LONG_TEXT, "policy.pdf", mock_llm_client)

        assert analysis.summary == DEFAULT_SUMMARY
        assert analysis.key_topics == []
        assert analysis.learning_stage == LearningStage.FOUNDATIONAL
        assert analysis.suggested_title == "policy.pdf"
        assert len(usages) == 1

    @pytest.mark.asyncio
    async def test_blank_file_name_gives_non_blank_title(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(return_value=(None, make_usage()))

        analysis, _ = await analyze_document(LONG_TEXT, "", mock_llm_client)
        assert analysis.suggested_title == "upload"

        analysis, _ = await analyze_document("", "", mock_llm_client)
        assert analysis.degraded is True
        assert analysis.suggested_title == "upload"

    @pytest.mark.asyncio
    async def test_invalid_fields_are_replaced_individually(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(
            return_value=(
                {
                    "summary": "A real summary.",
                    "key_topics": "not a list",
                    "learning_stage": "expert",
                    "suggested_title": "   ",
                },
                make_usage(),
            )
        )

        analysis, _ = await analyze_document(LONG_TEXT, "policy.pdf", mock_llm_client)

        assert analysis.summary == "A real summary."
        assert analysis.key_topics == []
        assert analysis.learning_stage == LearningStage.FOUNDATIONAL
        assert analysis.suggested_title == "policy.pdf"

    @pytest.mark.asyncio
    async def test_accepts_camel_case_and_wrapped_list(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(
            return_value=(
                [
                    {
                        "summary": "Summary.",
                        "keyTopics": ["Leadership"],
                        "learningStage": "ADVANCED",
                        "suggestedTitle": "Leading Teams",
                    }
                ],
                make_usage(),
            )
        )

        analysis, _ = await analyze_document(LONG_TEXT, "lead.docx", mock_llm_client)

        assert analysis.key_topics == ["Leadership"]
        assert analysis.learning_stage == LearningStage.ADVANCED
        assert analysis.suggested_title == "Leading Teams"

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, mock_llm_client):
        mock_llm_client.analyze = AsyncMock(side_effect=LLMTransientError("timed out"))

        with pytest.raises(LLMError):
            await analyze_document(LONG_TEXT, "policy.pdf", mock_llm_client)
