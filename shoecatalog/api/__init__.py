"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from shoecatalog.api.brands import router as brands_router
from shoecatalog.api.catalogs import router as catalogs_router
from shoecatalog.api.health import router as health_router
from shoecatalog.api.products import router as products_router
from shoecatalog.api.storage import router as storage_router

__all__ = [
    "brands_router",
    "catalogs_router",
    "health_router",
    "products_router",
    "storage_router",
]
