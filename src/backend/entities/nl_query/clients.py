"""Pipeline client container for dependency injection.

``PipelineClients`` bundles every dependency the query pipeline needs.
Production code constructs it via ``create_pipeline_clients()`` from
application settings; tests construct it directly from in-memory fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from agent_framework import ChatAgent
from agent_framework_azure_ai import AzureAIClient
from azure.identity.aio import DefaultAzureCredential
from config.settings import Settings
from entities.model_translator import load_prompt
from entities.query_executor import GraphQLQueryExecutor
from entities.shared.protocols import NewsStore, NoOpReporter, ProgressReporter, QueryExecutor
from entities.shared.schema_grammar import SchemaGrammar

logger = logging.getLogger(__name__)

TRANSLATOR_AGENT_NAME = "news-query-translator-agent"


@dataclass(frozen=True)
class PipelineClients:
    """Immutable bundle of the query pipeline's dependencies.

    Args:
        grammar: Schema grammar shared by the translator, validator and executor.
        executor: Runs validated queries against the backing store.
        translator_agent: ChatAgent for model-backed translation; ``None``
            sends every request straight to the keyword fallback.
        reporter: Progress reporter for step notifications.
    """

    grammar: SchemaGrammar
    executor: QueryExecutor
    translator_agent: ChatAgent | None = None
    reporter: ProgressReporter = NoOpReporter()


def create_translator_agent_from_settings(settings: Settings) -> ChatAgent | None:
    """Build the translator ChatAgent, or ``None`` when it is not configured.

    Args:
        settings: Centralised application configuration.

    Returns:
        The agent, or ``None`` if model translation is disabled or no
        Foundry endpoint is set.
    """
    if not settings.enable_model_translation:
        logger.info("Model-backed translation disabled by configuration")
        return None
    if not settings.azure_ai_project_endpoint:
        logger.warning("AZURE_AI_PROJECT_ENDPOINT not set; using keyword translation only")
        return None

    credential = (
        DefaultAzureCredential(managed_identity_client_id=settings.azure_client_id)
        if settings.azure_client_id
        else DefaultAzureCredential()
    )
    model = settings.azure_ai_translator_model or settings.azure_ai_model_deployment_name
    client = AzureAIClient(
        project_endpoint=settings.azure_ai_project_endpoint,
        credential=credential,
        model_deployment_name=model,
        use_latest_version=True,
    )
    logger.info("Translator agent configured with model %s", model)
    return ChatAgent(
        name=TRANSLATOR_AGENT_NAME,
        instructions=load_prompt(),
        chat_client=client,
    )


def create_pipeline_clients(
    settings: Settings,
    grammar: SchemaGrammar,
    store: NewsStore,
    reporter: ProgressReporter | None = None,
) -> PipelineClients:
    """Build a ``PipelineClients`` from application ``Settings``.

    The grammar and store are constructed once by the caller and passed
    in by reference; nothing here is cached at module level.

    Args:
        settings: Centralised application configuration.
        grammar: Loaded schema grammar.
        store: Backing store for the executor.
        reporter: Optional progress reporter. Defaults to ``NoOpReporter``.

    Returns:
        Fully-initialised ``PipelineClients`` ready for ``process_query()``.
    """
    return PipelineClients(
        grammar=grammar,
        executor=GraphQLQueryExecutor(grammar, store),
        translator_agent=create_translator_agent_from_settings(settings),
        reporter=reporter or NoOpReporter(),
    )
