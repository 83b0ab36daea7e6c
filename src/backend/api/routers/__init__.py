"""
API routers package.
"""

from api.routers.query import router as query_router
from api.routers.tools import router as tools_router

__all__ = ["query_router", "tools_router"]
