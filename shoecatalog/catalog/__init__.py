"""Product Catalog.

Brand and product storage (the catalog store) and brand
lookup-or-create rules.
"""

from shoecatalog.catalog.models import BrandModel, GeneratedCatalogModel, ProductModel
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.catalog.service import BrandResult, CatalogService, normalize_brand_name

__all__ = [
    # Models
    "BrandModel",
    "GeneratedCatalogModel",
    "ProductModel",
    # Repository
    "CatalogRepository",
    # Service
    "BrandResult",
    "CatalogService",
    "normalize_brand_name",
]
