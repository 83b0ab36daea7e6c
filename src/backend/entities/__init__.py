"""
Entities package.

Each subdirectory is one stage of the natural-language query pipeline:
- model_translator/: LLM-backed translation of requests into GraphQL
- fallback_translator/: keyword rules used when the model path fails
- query_corrector/: textual repairs of model-generated queries
- query_validator/: whitelist lint against the schema grammar
- query_executor/: graphql-core execution with per-call batching loaders
- nl_query/: the pipeline entry point and its dependency container
- tools/: assistant-facing tools over the pipeline
- shared/: schema grammar, protocols and the Azure SQL backing store
"""

from models import ResultEnvelope, StructuredQuery

__all__ = ["ResultEnvelope", "StructuredQuery"]
