"""
FastAPI dependencies for shared resources.

The lifespan handler in ``api.main`` builds the pipeline clients and the
tool registry once and stores them on ``app.state``.
"""

import logging

from entities.nl_query import PipelineClients
from entities.tools import ToolRegistry
from fastapi import HTTPException, Request

logger = logging.getLogger(__name__)


def get_pipeline_clients(request: Request) -> PipelineClients:
    """
    Get the pipeline clients from app state.

    Raises HTTPException 503 if not initialized.
    """
    clients = getattr(request.app.state, "pipeline_clients", None)
    if clients is None:
        raise HTTPException(status_code=503, detail="Query pipeline not initialized")
    return clients


def get_tool_registry(request: Request) -> ToolRegistry:
    """
    Get the tool registry from app state.

    Raises HTTPException 503 if not initialized.
    """
    registry = getattr(request.app.state, "tool_registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Tool registry not initialized")
    return registry
