"""Natural-language query pipeline: single-function entry point.

``process_query()`` sequences translation (model first, keyword rules on
any model failure), correction of model output, validation and
execution, then wraps the outcome in a ``ResultEnvelope``. All I/O goes
through ``PipelineClients``.
"""

from __future__ import annotations

import logging
import time

from entities.fallback_translator import translate_with_patterns
from entities.model_translator import translate_with_model
from entities.nl_query.clients import PipelineClients
from entities.query_corrector import correct_query
from entities.query_validator import validate_query
from models import (
    QueryExecutionError,
    QueryProcessingError,
    QueryValidationError,
    ResultEnvelope,
    StructuredQuery,
)

logger = logging.getLogger(__name__)

# ── Step labels reported to the progress reporter ────────────────────────

STEP_TRANSLATE = "Translating request"
STEP_VALIDATE = "Validating query"
STEP_EXECUTE = "Executing query"


async def translate(text: str, clients: PipelineClients) -> StructuredQuery:
    """Translate request text, falling back to keyword rules on model failure.

    Model output is passed through the corrector; fallback output is
    already canonical and is returned as-is.

    Args:
        text: Raw request text.
        clients: Injectable dependencies.

    Returns:
        The structured query to validate.
    """
    if clients.translator_agent is None:
        logger.info("No translator agent configured; using keyword fallback")
        return translate_with_patterns(text)

    try:
        structured = await translate_with_model(text, clients.translator_agent, clients.grammar)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Model translation failed, using keyword fallback: %s", exc)
        return translate_with_patterns(text)

    logger.info("Using model translation")
    return correct_query(structured, clients.grammar)


async def process_query(text: str, clients: PipelineClients) -> ResultEnvelope:
    """Run the full pipeline for one natural-language request.

    Args:
        text: Raw request text.
        clients: Injectable dependencies.

    Returns:
        The ``ResultEnvelope`` for the request.

    Raises:
        QueryProcessingError: If validation, execution or any other stage
            fails. The original error is chained as ``__cause__``.
    """
    started = time.perf_counter()
    reporter = clients.reporter

    try:
        reporter.step_start(STEP_TRANSLATE)
        structured = await translate(text, clients)
        reporter.step_end(STEP_TRANSLATE)

        reporter.step_start(STEP_VALIDATE)
        validation = validate_query(structured, clients.grammar)
        reporter.step_end(STEP_VALIDATE)
        if not validation.is_valid:
            raise QueryValidationError(validation.errors)

        reporter.step_start(STEP_EXECUTE)
        result = await clients.executor.execute(structured.query, structured.variables)
        reporter.step_end(STEP_EXECUTE)
        if not result.ok:
            raise QueryExecutionError(result.errors[0])

    except Exception as exc:
        logger.exception("Query pipeline error")
        raise QueryProcessingError(f"Failed to process request: {exc}") from exc

    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Processed request via %s translation in %.1f ms", structured.source, elapsed_ms
    )
    return ResultEnvelope(
        query=text,
        interpretation=structured.explanation,
        structured_query=structured.query,
        results=result.data,
        execution_time_ms=elapsed_ms,
    )
