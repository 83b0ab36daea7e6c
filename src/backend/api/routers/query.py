"""
Natural-language query route.

Translates a free-text request into a structured query, runs it and
returns the result envelope with camelCase keys.
"""

import logging

from api.dependencies import get_pipeline_clients
from entities.nl_query import PipelineClients, process_query
from fastapi import APIRouter, Depends, HTTPException
from models import QueryProcessingError, QueryRequest, ResultEnvelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["query"])


@router.post("/query", response_model=ResultEnvelope, response_model_by_alias=True)
async def query_articles(
    request: QueryRequest,
    clients: PipelineClients = Depends(get_pipeline_clients),
) -> ResultEnvelope:
    """Answer a natural-language request about the article corpus."""
    try:
        return await process_query(request.natural_language_query, clients)
    except QueryProcessingError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
