"""Domain layer module.

Contains the catalog entities and the error taxonomy shared by
services and the API layer.
"""

from shoecatalog.domain.entities import (
    Brand,
    GeneratedCatalog,
    Product,
)
from shoecatalog.domain.exceptions import (
    CatalogError,
    ImageDecodeError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Entities
    "Brand",
    "GeneratedCatalog",
    "Product",
    # Exceptions
    "CatalogError",
    "ImageDecodeError",
    "InvalidRequestError",
    "NotFoundError",
    "StorageError",
]
