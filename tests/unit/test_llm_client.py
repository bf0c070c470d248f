"""Tests for the LLM classifier.

All tests are deterministic and do not make real network calls.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import SecretStr

from docsense.config import Settings
from docsense.llm.client import (
    OpenAIClassifier,
    clamp_label,
    get_classifier,
    parse_completion,
)
from docsense.llm.heuristics import HeuristicClassifier
from docsense.models.documents import Category, Department

FINANCE_TEXT = "Q3 financial budget report discussing revenue and accounting."


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _classifier(create: AsyncMock) -> OpenAIClassifier:
    client = MagicMock()
    client.chat.completions.create = create
    return OpenAIClassifier(api_key="test-key", client=client)


class TestParseCompletion:
    """Test JSON extraction from model output."""

    def test_plain_json(self) -> None:
        payload = parse_completion('{"summary": "S", "category": "Legal", "department": "Legal"}')
        assert payload is not None
        assert payload.category == "Legal"

    def test_json_wrapped_in_prose(self) -> None:
        content = (
            "Sure! Here you go:\n```json\n"
            '{"summary": "A budget.", "category": "Finance", "department": "Finance"}\n```'
        )
        payload = parse_completion(content)
        assert payload is not None
        assert payload.summary == "A budget."

    @pytest.mark.parametrize(
        "content",
        [
            None,
            "",
            "   ",
            "no json here",
            "{not valid json}",
            '{"summary": "x"}',
            '{"summary": "  ", "category": "Legal", "department": "Legal"}',
        ],
    )
    def test_unusable(self, content: str | None) -> None:
        assert parse_completion(content) is None


class TestClampLabel:
    """Test vocabulary clamping."""

    def test_case_insensitive(self) -> None:
        assert clamp_label(" finance ", Category) == "Finance"
        assert clamp_label("HR", Department) == "HR"

    def test_unknown(self) -> None:
        assert clamp_label("Astrology", Category) is None


class TestOpenAIClassifier:
    """Test classification with a mocked OpenAI client."""

    @pytest.mark.asyncio
    async def test_good_response(self) -> None:
        create = AsyncMock(
            return_value=_completion(
                '{"summary": "Quarterly numbers.", "category": "finance", "department": "Finance"}'
            )
        )
        classifier = _classifier(create)

        result = await classifier.classify(FINANCE_TEXT, "q3", "pdf")

        assert result.source == "llm"
        assert result.summary == "Quarterly numbers."
        assert result.category == "Finance"
        assert result.department == "Finance"

        kwargs = create.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 500
        prompt = kwargs["messages"][0]["content"]
        assert "Document Title: q3" in prompt
        assert "PDF" in prompt

    @pytest.mark.asyncio
    async def test_service_error_falls_back(self) -> None:
        classifier = _classifier(AsyncMock(side_effect=RuntimeError("connection reset")))

        result = await classifier.classify(FINANCE_TEXT, "q3", "pdf")

        assert result.source == "heuristic"
        assert (result.category, result.department) == ("Finance", "Finance")

    @pytest.mark.asyncio
    async def test_malformed_json_falls_back(self) -> None:
        classifier = _classifier(AsyncMock(return_value=_completion("I cannot help with that")))

        result = await classifier.classify(FINANCE_TEXT, "q3")

        assert result.source == "heuristic"

    @pytest.mark.asyncio
    async def test_no_choices_falls_back(self) -> None:
        classifier = _classifier(AsyncMock(return_value=SimpleNamespace(choices=[])))

        result = await classifier.classify(FINANCE_TEXT, "q3")

        assert result.source == "heuristic"

    @pytest.mark.asyncio
    async def test_unknown_labels_replaced_by_heuristic(self) -> None:
        create = AsyncMock(
            return_value=_completion(
                '{"summary": "Numbers.", "category": "Money", "department": "Finance"}'
            )
        )
        classifier = _classifier(create)

        result = await classifier.classify(FINANCE_TEXT, "q3")

        assert result.source == "llm"
        assert result.summary == "Numbers."
        assert result.category == "Finance"
        assert result.department == "Finance"


class TestGetClassifier:
    """Test classifier selection."""

    def test_heuristic_without_key(self) -> None:
        settings = Settings(_env_file=None, llm_api_key=None)
        assert isinstance(get_classifier(settings), HeuristicClassifier)

    def test_heuristic_with_empty_key(self) -> None:
        settings = Settings(_env_file=None, llm_api_key=SecretStr(""))
        assert isinstance(get_classifier(settings), HeuristicClassifier)

    def test_llm_with_key(self) -> None:
        settings = Settings(_env_file=None, llm_api_key=SecretStr("gsk-test"), llm_model="m")
        classifier = get_classifier(settings)
        assert isinstance(classifier, OpenAIClassifier)
        assert classifier.model == "m"
