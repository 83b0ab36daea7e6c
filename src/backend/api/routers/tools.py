"""
Tool invocation routes for external assistants.

``GET /mcp/tools`` lists the registered tools and ``POST /mcp/execute``
runs one by name.
"""

import logging
from typing import Any

from api.dependencies import get_tool_registry
from entities.tools import ToolRegistry
from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from models import NewsQueryError, ToolCallRequest, ToolCallResponse, ToolNotFoundError
from pydantic import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mcp", tags=["tools"])


@router.get("/tools")
async def list_tools(
    registry: ToolRegistry = Depends(get_tool_registry),
) -> dict[str, list[dict[str, Any]]]:
    """List available tools with their input schemas."""
    return {"tools": registry.list_tools()}


@router.post("/execute", response_model=ToolCallResponse)
async def execute_tool(
    request: ToolCallRequest,
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolCallResponse:
    """Invoke a tool by name."""
    try:
        result = await registry.call_tool(request.tool, request.input)
    except ToolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=jsonable_encoder(e.errors(include_url=False))
        ) from e
    except NewsQueryError as e:
        logger.warning("Tool %s failed: %s", request.tool, e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    return ToolCallResponse(tool=request.tool, input=request.input, result=jsonable_encoder(result))
