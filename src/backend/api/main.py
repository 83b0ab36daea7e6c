"""
FastAPI server for natural-language queries over the news corpus.

This module handles application setup, lifespan management, and middleware configuration.
Route handlers are organized in the routers/ package.

The schema grammar, the Azure SQL article store, the pipeline clients
and the tool registry are built once at startup and shared by every
request through ``app.state``.
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from api.routers import query_router, tools_router
from config.settings import get_settings
from dotenv import load_dotenv
from entities.nl_query import create_pipeline_clients
from entities.shared import load_schema_grammar
from entities.shared.news_store import SqlNewsStore
from entities.tools import create_tool_registry
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

# Configure logging - use force=True to prevent duplicate handlers
logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, force=True)

# Reduce noise from Azure SDK and other libraries
logging.getLogger("azure").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
# Reduce agent_framework verbosity (it logs all message content at INFO level)
logging.getLogger("agent_framework").setLevel(logging.WARNING)

_STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Loads the schema grammar and wires the query pipeline on startup.
    """
    logger.info("News query API starting")
    settings = get_settings()

    grammar = load_schema_grammar(settings.schema_path)
    store = SqlNewsStore(
        server=settings.azure_sql_server,
        database=settings.azure_sql_database,
        client_id=settings.azure_client_id,
        trending_window_days=settings.trending_window_days,
    )
    clients = create_pipeline_clients(settings, grammar, store)

    application.state.pipeline_clients = clients
    application.state.tool_registry = create_tool_registry(clients)

    if clients.translator_agent is None:
        logger.warning("Model-backed translation is OFF; all requests use keyword rules")

    yield

    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(title="News Query API", lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(query_router)
app.include_router(tools_router)


@app.get("/health")
async def health_check() -> dict[str, object]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "uptime": time.monotonic() - _STARTED_AT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True)  # noqa: S104
