"""
NL Query - natural language to structured query pipeline.

``process_query`` is a plain async function; ``PipelineClients`` /
``create_pipeline_clients`` provide dependency injection.
"""

from .clients import PipelineClients, create_pipeline_clients
from .pipeline import process_query

__all__ = ["PipelineClients", "create_pipeline_clients", "process_query"]
