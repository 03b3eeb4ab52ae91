"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from catalog_explorer.api.health import router as health_router
from catalog_explorer.api.pages import router as pages_router

__all__ = [
    "health_router",
    "pages_router",
]
