"""Catalog service for brand and product operations.

High-level service that combines repository operations with
business rules for brands: name validation and case-insensitive
lookup-or-create.
"""

from dataclasses import dataclass

import structlog

from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.domain.entities import Brand, Product
from shoecatalog.domain.exceptions import InvalidRequestError, NotFoundError

logger = structlog.get_logger()

MAX_BRAND_NAME_LENGTH = 200


@dataclass
class BrandResult:
    """Result of resolving a brand by name.

    Attributes:
        brand: The resolved brand.
        created: True if the brand was created by this call.
    """

    brand: Brand
    created: bool = False


def normalize_brand_name(name: str | None) -> str:
    """Trim and validate a brand name.

    Raises:
        InvalidRequestError: If the name is missing, blank or too long.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidRequestError("brand_name is required", details={"field": "brand_name"})
    if len(cleaned) > MAX_BRAND_NAME_LENGTH:
        raise InvalidRequestError(
            f"brand_name must be at most {MAX_BRAND_NAME_LENGTH} characters",
            details={"field": "brand_name"},
        )
    return cleaned


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(CatalogRepository(session))
            result = await service.get_or_create_brand("Nike")
            same = await service.get_or_create_brand("NIKE")
            assert same.brand.id == result.brand.id
    """

    def __init__(self, repository: CatalogRepository) -> None:
        """Initialize service with a catalog repository.

        Args:
            repository: Catalog store.
        """
        self.repository = repository

    async def list_brands(self) -> list[Brand]:
        """Get all brands ordered by name."""
        return await self.repository.list_brands()

    async def get_or_create_brand(self, name: str | None) -> BrandResult:
        """Resolve a brand by case-insensitive name, creating it if absent.

        Not transactional: two concurrent calls for the same new name
        can both create a brand.

        Args:
            name: Brand name.

        Returns:
            BrandResult with the existing or new brand.

        Raises:
            InvalidRequestError: If the name is blank.
        """
        cleaned = normalize_brand_name(name)

        existing = await self.repository.find_brand_by_name(cleaned)
        if existing:
            return BrandResult(brand=existing, created=False)

        brand = await self.repository.create_brand(cleaned)
        logger.info("Brand created", brand_id=brand.id, brand_name=brand.name)
        return BrandResult(brand=brand, created=True)

    async def list_brand_products(self, brand_id: str) -> list[Product]:
        """Get products of an existing brand.

        Raises:
            NotFoundError: If the brand does not exist.
        """
        brand = await self.repository.get_brand(brand_id)
        if brand is None:
            raise NotFoundError("Brand", details={"brand_id": brand_id})
        return await self.repository.list_products_by_brand(brand_id)

    async def list_products(self) -> list[Product]:
        """Get all products."""
        return await self.repository.list_products()
