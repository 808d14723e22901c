"""
Unit tests for the two question sources and the model client helpers.

The model call is patched out; no API key or network is needed.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from paper_toolkit.builder.sources import client
from paper_toolkit.builder.sources import (
    FindPastYearQuestionsInput,
    GenerateProbableQuestionsInput,
    LLMConfigurationError,
    QuestionListOutput,
    SourceResponseError,
    extract_json_object,
    find_past_year_questions,
    generate_probable_questions,
)


PROBABLE_REQUEST = GenerateProbableQuestionsInput(
    syllabus="Quadratic equations", board="CBSE", class_level="10", subject="math"
)
PYQ_REQUEST = FindPastYearQuestionsInput(topic="Triangles", board="ICSE")


class TestGenerateProbableQuestions:
    """Tests for generate_probable_questions()."""

    def test_generate_when_valid_json_then_questions(self):
        # Arrange
        raw = '{"questions": ["Solve $x^2 - 5x + 6 = 0$.", "  ", "State the discriminant."]}'
        mock_llm = AsyncMock(return_value=raw)

        # Act
        with patch("paper_toolkit.builder.sources.flows.call_llm", mock_llm):
            output = asyncio.run(generate_probable_questions(PROBABLE_REQUEST))

        # Assert
        assert output.questions == ["Solve $x^2 - 5x + 6 = 0$.", "State the discriminant."]
        prompt = mock_llm.call_args.args[0]
        assert "Quadratic equations" in prompt
        assert "Board: CBSE" in prompt
        assert "Class Level: 10" in prompt
        assert "$$...$$" in prompt

    def test_generate_prompt_does_not_ask_for_latex_environments(self):
        """Environments cannot be rasterized, so the prompt steers away from them."""
        mock_llm = AsyncMock(return_value='{"questions": []}')

        with patch("paper_toolkit.builder.sources.flows.call_llm", mock_llm):
            asyncio.run(generate_probable_questions(PROBABLE_REQUEST))

        prompt = mock_llm.call_args.args[0]
        assert "\\begin{bmatrix}" not in prompt
        assert "\\begin{array}" not in prompt
        assert "do NOT use \\begin{...} environments" in prompt

    def test_generate_when_fenced_json_then_parsed(self):
        raw = '```json\n{"questions": ["Q1"]}\n```'
        with patch("paper_toolkit.builder.sources.flows.call_llm", AsyncMock(return_value=raw)):
            output = asyncio.run(generate_probable_questions(PROBABLE_REQUEST))
        assert output.questions == ["Q1"]

    def test_generate_when_wrong_shape_then_raises_error(self):
        raw = '{"questions": "not a list"}'
        with patch("paper_toolkit.builder.sources.flows.call_llm", AsyncMock(return_value=raw)):
            with pytest.raises(SourceResponseError, match="Unexpected response shape"):
                asyncio.run(generate_probable_questions(PROBABLE_REQUEST))


class TestFindPastYearQuestions:
    """Tests for find_past_year_questions()."""

    def test_find_when_valid_json_then_questions(self):
        raw = '{"questions": ["Prove the Pythagoras theorem."]}'
        mock_llm = AsyncMock(return_value=raw)

        with patch("paper_toolkit.builder.sources.flows.call_llm", mock_llm):
            output = asyncio.run(find_past_year_questions(PYQ_REQUEST))

        assert output == QuestionListOutput(questions=["Prove the Pythagoras theorem."])
        prompt = mock_llm.call_args.args[0]
        assert "Topic: Triangles" in prompt
        assert "Board: ICSE" in prompt

    def test_find_when_no_json_then_raises_error(self):
        with patch("paper_toolkit.builder.sources.flows.call_llm", AsyncMock(return_value="Sorry.")):
            with pytest.raises(SourceResponseError, match="No JSON object"):
                asyncio.run(find_past_year_questions(PYQ_REQUEST))

    def test_find_when_missing_key_then_empty(self):
        with patch("paper_toolkit.builder.sources.flows.call_llm", AsyncMock(return_value="{}")):
            output = asyncio.run(find_past_year_questions(PYQ_REQUEST))
        assert output.questions == []


class TestExtractJsonObject:
    """Tests for extract_json_object()."""

    def test_extract_when_chatter_around_object_then_object(self):
        assert extract_json_object('Here you go: {"a": 1} Enjoy!') == {"a": 1}

    def test_extract_when_malformed_then_raises_error(self):
        with pytest.raises(SourceResponseError, match="Malformed JSON"):
            extract_json_object('{"a": 1,,}')

    def test_extract_when_empty_then_raises_error(self):
        with pytest.raises(SourceResponseError):
            extract_json_object("")


class TestClientConfiguration:
    """Tests for environment-driven client setup."""

    def test_call_llm_when_no_api_key_then_raises_configuration_error(self, monkeypatch):
        # Arrange
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setattr(client, "load_dotenv", lambda *a, **k: False)
        client.reset_client()

        # Act / Assert
        with pytest.raises(LLMConfigurationError, match="OPENAI_API_KEY"):
            asyncio.run(client.call_llm("prompt", system="system"))

    def test_get_model_when_env_set_then_override(self, monkeypatch):
        monkeypatch.setattr(client, "load_dotenv", lambda *a, **k: False)
        monkeypatch.setenv("PAPER_TOOLKIT_MODEL", "gpt-4o")
        assert client.get_model() == "gpt-4o"

    def test_get_model_when_env_unset_then_default(self, monkeypatch):
        monkeypatch.setattr(client, "load_dotenv", lambda *a, **k: False)
        monkeypatch.delenv("PAPER_TOOLKIT_MODEL", raising=False)
        assert client.get_model() == client.DEFAULT_MODEL
