"""Unit tests for model-backed translation.

The translator agent is mocked; no LLM is contacted.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from entities.model_translator import translate_with_model
from entities.model_translator.translator import _build_translation_prompt, _parse_llm_response
from entities.shared.schema_grammar import SchemaGrammar
from models import TranslationError

_TRENDING = "{ trendingArticles(limit: 3) { id title } }"


def _mock_agent(text: str) -> MagicMock:
    """Build a mock ChatAgent whose ``run`` answers with *text*."""
    content = MagicMock()
    content.text = text
    message = MagicMock()
    message.contents = [content]
    response = MagicMock()
    response.messages = [message]

    agent = MagicMock()
    agent.run = AsyncMock(return_value=response)
    return agent


def _answer(**payload: object) -> str:
    return json.dumps(payload)


# ── Successful translations ───────────────────────────────────────────


class TestTranslateWithModel:
    """Well-formed model answers."""

    async def test_plain_json(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(_answer(query=_TRENDING, variables=None, explanation="Top three"))
        result = await translate_with_model("top three articles", agent, grammar)

        assert result.query == _TRENDING
        assert result.variables is None
        assert result.explanation == "Top three"
        assert result.source == "model"

    async def test_json_in_code_fence(self, grammar: SchemaGrammar) -> None:
        body = _answer(query=_TRENDING, variables={"n": 3}, explanation="Top three")
        agent = _mock_agent(f"Here you go:\n```json\n{body}\n```")
        result = await translate_with_model("top three articles", agent, grammar)
        assert result.variables == {"n": 3}

    async def test_null_variables_dropped(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(
            _answer(query=_TRENDING, variables={"a": None, "b": "x"}, explanation="e")
        )
        result = await translate_with_model("x", agent, grammar)
        assert result.variables == {"b": "x"}

    async def test_all_null_variables_become_none(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(_answer(query=_TRENDING, variables={"a": None}, explanation="e"))
        result = await translate_with_model("x", agent, grammar)
        assert result.variables is None

    async def test_prompt_carries_request_and_grammar(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(_answer(query=_TRENDING, explanation="e"))
        await translate_with_model("articles about chips", agent, grammar)

        prompt = agent.run.call_args.args[0]
        assert "articles about chips" in prompt
        assert grammar.sdl.strip() in prompt


# ── Failures ──────────────────────────────────────────────────────────


class TestTranslationFailures:
    """Every failure surfaces as TranslationError."""

    async def test_malformed_json(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent("I think you want trending articles.")
        with pytest.raises(TranslationError, match="Failed to parse LLM response"):
            await translate_with_model("x", agent, grammar)

    async def test_extra_key_rejected(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(
            _answer(query=_TRENDING, explanation="e", confidence=0.9)
        )
        with pytest.raises(TranslationError, match="wrong shape"):
            await translate_with_model("x", agent, grammar)

    async def test_missing_explanation(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(_answer(query=_TRENDING))
        with pytest.raises(TranslationError):
            await translate_with_model("x", agent, grammar)

    async def test_empty_query(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent(_answer(query="", explanation="e"))
        with pytest.raises(TranslationError):
            await translate_with_model("x", agent, grammar)

    async def test_json_array_rejected(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent("[1, 2, 3]")
        with pytest.raises(TranslationError):
            await translate_with_model("x", agent, grammar)

    async def test_service_error(self, grammar: SchemaGrammar) -> None:
        agent = MagicMock()
        agent.run = AsyncMock(side_effect=RuntimeError("429 Too Many Requests"))
        with pytest.raises(TranslationError, match="Language model call failed: 429"):
            await translate_with_model("x", agent, grammar)

    async def test_empty_response(self, grammar: SchemaGrammar) -> None:
        agent = _mock_agent("")
        with pytest.raises(TranslationError, match="empty response"):
            await translate_with_model("x", agent, grammar)


# ── Response parsing helpers ──────────────────────────────────────────


class TestParseLlmResponse:
    """JSON recovery from free-form text."""

    def test_json_embedded_in_prose(self) -> None:
        text = 'Sure! {"query": "{ tags { name } }", "explanation": "tags"} Hope that helps.'
        assert _parse_llm_response(text) == {"query": "{ tags { name } }", "explanation": "tags"}

    def test_fence_without_language(self) -> None:
        assert _parse_llm_response('```\n{"a": 1}\n```') == {"a": 1}

    def test_no_json(self) -> None:
        with pytest.raises(TranslationError):
            _parse_llm_response("nothing to see")


class TestBuildTranslationPrompt:
    """Per-request prompt contents."""

    def test_field_shapes_listed(self, grammar: SchemaGrammar) -> None:
        prompt = _build_translation_prompt("anything", grammar)
        assert "author (scalar)" in prompt
        assert "category (object)" in prompt
        assert "tags (list)" in prompt
