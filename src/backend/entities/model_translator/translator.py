"""Model-backed query translation.

Sends the request together with the schema grammar to the translator
agent and turns its JSON answer into a ``StructuredQuery``. Any failure
(service error, empty answer, unparseable or wrongly shaped JSON) raises
``TranslationError``; retrying or falling back is the caller's job.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from agent_framework import AgentThread, ChatAgent
from entities.shared.schema_grammar import SchemaGrammar
from models import ModelTranslation, StructuredQuery, TranslationError
from pydantic import ValidationError

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent / "prompt.md"


def load_prompt() -> str:
    """Load the translator system prompt shipped beside this module."""
    return PROMPT_PATH.read_text(encoding="utf-8")


def _format_field_shapes(grammar: SchemaGrammar) -> str:
    """Render every object type's fields with their selection shape."""
    lines = []
    for type_name in grammar.object_type_names():
        if type_name == "Query":
            continue
        shapes = grammar.field_shapes(type_name)
        fields = ", ".join(f"{name} ({shape})" for name, shape in shapes.items())
        lines.append(f"- {type_name}: {fields}")
    return "\n".join(lines)


def _build_translation_prompt(user_query: str, grammar: SchemaGrammar) -> str:
    """Build the per-request prompt for the translator agent.

    Args:
        user_query: The user's request text.
        grammar: Loaded schema grammar, embedded verbatim.

    Returns:
        A formatted prompt string for the LLM.
    """
    return (
        "Convert the following request into a GraphQL query.\n"
        "\n"
        "## User Request\n"
        f"{user_query}\n"
        "\n"
        "## Schema Grammar\n"
        "```graphql\n"
        f"{grammar.sdl.strip()}\n"
        "```\n"
        "\n"
        "## Field Shapes\n"
        f"{_format_field_shapes(grammar)}\n"
        "\n"
        "In filters use only plain string or number values, never objects like "
        '{name: "value"}: tags: ["AI"], author: "Jane Doe", categoryId: "<id>".\n'
        "Respond with a JSON object with exactly the keys query, variables, explanation.\n"
    )


def _extract_response_text(response: Any) -> str:
    """Return the first text content of the agent's reply."""
    for msg in getattr(response, "messages", None) or []:
        if hasattr(msg, "contents"):
            for content in msg.contents:
                text_value = getattr(content, "text", None)
                if text_value:
                    return text_value
    return ""


def _parse_llm_response(response_text: str) -> Any:
    """Parse the LLM's JSON response.

    Attempts direct JSON parsing, then markdown code-fence extraction,
    and finally the outermost brace-delimited span of the text.

    Args:
        response_text: The raw text response from the LLM.

    Returns:
        The decoded JSON value.

    Raises:
        TranslationError: If no JSON object can be recovered.
    """
    text = response_text.strip()

    # Direct JSON parse
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Extract from markdown code fence
    fence = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fence:
        try:
            return json.loads(fence.group(1).strip())
        except json.JSONDecodeError:
            pass

    # Outermost JSON object embedded in prose
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise TranslationError(f"Failed to parse LLM response: {text[:200]}")


async def translate_with_model(
    user_query: str,
    agent: ChatAgent,
    grammar: SchemaGrammar,
    thread: AgentThread | None = None,
) -> StructuredQuery:
    """Translate a request into a structured query via the translator agent.

    Args:
        user_query: The user's request text.
        agent: Chat agent configured with translator instructions.
        grammar: Loaded schema grammar.
        thread: Optional conversation thread for the LLM call.

    Returns:
        A ``StructuredQuery`` with ``source="model"``.

    Raises:
        TranslationError: On service failure or a malformed answer.
    """
    logger.info("Translating with model: %s", user_query[:100])
    prompt = _build_translation_prompt(user_query, grammar)

    try:
        response = await agent.run(prompt, thread=thread)
    except Exception as exc:
        raise TranslationError(f"Language model call failed: {exc}") from exc

    response_text = _extract_response_text(response)
    if not response_text:
        raise TranslationError("Language model returned an empty response")

    parsed = _parse_llm_response(response_text)
    try:
        translation = ModelTranslation.model_validate(parsed)
    except ValidationError as exc:
        raise TranslationError(
            f"Model answer has the wrong shape ({exc.error_count()} error(s))"
        ) from exc

    return StructuredQuery(
        query=translation.query,
        variables=translation.variables,
        explanation=translation.explanation,
        source="model",
    )
