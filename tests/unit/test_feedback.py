"""Tests for feedback models, prompt assembly, and generators."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from reviewdesk.feedback import (
    DIMENSIONS,
    FeedbackError,
    FeedbackRequest,
    FeedbackResult,
    MockFeedbackGenerator,
)
from reviewdesk.feedback.client import ClaudeFeedbackGenerator, parse_reply
from reviewdesk.feedback.mock import MOCK_FEEDBACK
from reviewdesk.feedback.prompt import SYSTEM_PROMPT, build_user_prompt

REPLY = {
    "grammar": "Few errors.",
    "structure": "Clear paragraphs.",
    "content": "Good ideas.",
    "vocabulary": "Varied.",
    "overall": "Solid work.",
    "improvements": ["Proofread", "Add examples"],
}


class TestFeedbackModels:
    """Tests for FeedbackRequest and FeedbackResult."""

    def test_request_defaults_to_all_dimensions(self) -> None:
        assert FeedbackRequest(document_text="x").dimensions == list(DIMENSIONS)

    def test_request_orders_and_dedupes_dimensions(self) -> None:
        request = FeedbackRequest(
            document_text="x", dimensions=["vocabulary", "grammar", "grammar"]
        )
        assert request.dimensions == ["grammar", "vocabulary"]

    def test_request_rejects_empty_dimensions(self) -> None:
        with pytest.raises(ValidationError, match="at least one"):
            FeedbackRequest(document_text="x", dimensions=[])

    def test_request_rejects_unknown_dimension(self) -> None:
        with pytest.raises(ValidationError):
            FeedbackRequest(document_text="x", dimensions=["tone"])  # type: ignore[list-item]

    def test_for_dimensions_clears_others(self) -> None:
        result = FeedbackResult(**REPLY).for_dimensions(["content"])
        assert result.content == "Good ideas."
        assert result.grammar is None
        assert result.overall == "Solid work."

    def test_sections_in_rubric_order(self) -> None:
        result = FeedbackResult(**REPLY).for_dimensions(["vocabulary", "grammar"])
        labels = [label for label, _ in result.sections()]
        assert labels == ["Grammar and mechanics", "Vocabulary and word choice"]


class TestPrompt:
    """Tests for build_user_prompt."""

    def test_document_and_rubric_included(self) -> None:
        prompt = build_user_prompt(
            FeedbackRequest(document_text="My essay text.", dimensions=["grammar"])
        )
        assert "<document>\nMy essay text.\n</document>" in prompt
        assert "- Grammar and mechanics" in prompt
        assert '"grammar"' in prompt
        assert '"structure"' not in prompt
        assert '"overall"' in prompt
        assert '"improvements"' in prompt

    def test_system_prompt_sets_teacher_role(self) -> None:
        assert "writing teacher" in SYSTEM_PROMPT


class TestParseReply:
    """Tests for parse_reply."""

    def test_plain_json(self) -> None:
        assert parse_reply(json.dumps(REPLY)).overall == "Solid work."

    def test_fenced_json(self) -> None:
        text = f"```json\n{json.dumps(REPLY)}\n```"
        assert parse_reply(text).improvements == ["Proofread", "Add examples"]

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(FeedbackError):
            parse_reply("Here is some feedback: well done!")

    def test_missing_overall_raises(self) -> None:
        with pytest.raises(FeedbackError):
            parse_reply(json.dumps({"grammar": "ok"}))


class TestClaudeFeedbackGenerator:
    """Tests for ClaudeFeedbackGenerator."""

    @pytest.fixture
    def mock_anthropic(self):
        """Mock anthropic async client."""
        with patch("reviewdesk.feedback.client.anthropic") as mock:
            mock.AsyncAnthropic.return_value.messages.create = AsyncMock()
            yield mock

    def _response(self, text: str) -> MagicMock:
        response = MagicMock()
        response.content = [
            MagicMock(type="thinking", text="ignored"),
            MagicMock(type="text", text=text),
        ]
        return response

    def test_init_no_key_raises(self) -> None:
        with pytest.raises(ValueError, match="API key"):
            ClaudeFeedbackGenerator(api_key="")

    async def test_generate_parses_reply(self, mock_anthropic: MagicMock) -> None:
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.return_value = self._response(json.dumps(REPLY))

        generator = ClaudeFeedbackGenerator(api_key="test-key", model="m", max_tokens=5)
        result = await generator.generate(
            FeedbackRequest(document_text="Essay", dimensions=["grammar"])
        )

        assert result.grammar == "Few errors."
        assert result.structure is None
        assert result.source == "ai"
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "m"
        assert kwargs["max_tokens"] == 5
        assert kwargs["system"] == SYSTEM_PROMPT
        assert "Essay" in kwargs["messages"][0]["content"]

    async def test_empty_reply_raises(self, mock_anthropic: MagicMock) -> None:
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.return_value = self._response("")

        generator = ClaudeFeedbackGenerator(api_key="test-key")
        with pytest.raises(FeedbackError, match="Empty response"):
            await generator.generate(FeedbackRequest(document_text="Essay"))

    async def test_api_errors_propagate(self, mock_anthropic: MagicMock) -> None:
        create = mock_anthropic.AsyncAnthropic.return_value.messages.create
        create.side_effect = RuntimeError("rate limited")

        generator = ClaudeFeedbackGenerator(api_key="test-key")
        with pytest.raises(RuntimeError, match="rate limited"):
            await generator.generate(FeedbackRequest(document_text="Essay"))


class TestMockFeedbackGenerator:
    """Tests for MockFeedbackGenerator."""

    async def test_returns_requested_dimensions(self) -> None:
        generator = MockFeedbackGenerator()
        result = await generator.generate(
            FeedbackRequest(document_text="Essay", dimensions=["structure"])
        )

        assert result.structure == MOCK_FEEDBACK.structure
        assert result.grammar is None
        assert result.improvements == MOCK_FEEDBACK.improvements
        assert generator.last_request is not None
        assert generator.last_request.dimensions == ["structure"]

    async def test_keeps_only_latest_request(self) -> None:
        generator = MockFeedbackGenerator()
        await generator.generate(FeedbackRequest(document_text="First essay"))
        await generator.generate(FeedbackRequest(document_text="Second essay"))

        assert generator.last_request is not None
        assert generator.last_request.document_text == "Second essay"
