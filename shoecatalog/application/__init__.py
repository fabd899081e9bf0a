"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from shoecatalog.application.catalog_generation_service import (
    CatalogGenerationService,
    GenerateCatalogResult,
)
from shoecatalog.application.ingestion_service import (
    IngestProductResult,
    ProductIngestionService,
)

__all__ = [
    "CatalogGenerationService",
    "GenerateCatalogResult",
    "IngestProductResult",
    "ProductIngestionService",
]
