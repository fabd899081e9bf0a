"""Catalog repository for database operations.

The catalog store: reads and writes brands, products and generated
catalog records, and maps rows onto the canonical domain entities.
"""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shoecatalog.catalog.models import BrandModel, GeneratedCatalogModel, ProductModel
from shoecatalog.domain.entities import Brand, GeneratedCatalog, Product


class CatalogRepository:
    """Repository for catalog database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CatalogRepository(session)
            brand = await repo.find_brand_by_name("nike")
            products = await repo.get_products_by_ids(["...", "..."])
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def commit(self) -> None:
        """Commit the current transaction."""
        await self.session.commit()

    # ------------------------------------------------------------------
    # Brands
    # ------------------------------------------------------------------

    async def list_brands(self) -> list[Brand]:
        """Get all brands ordered by name.

        Returns:
            List of brands.
        """
        result = await self.session.execute(select(BrandModel).order_by(BrandModel.name))
        return [row.to_entity() for row in result.scalars().all()]

    async def get_brand(self, brand_id: str) -> Brand | None:
        """Get brand by ID.

        Args:
            brand_id: Brand ID.

        Returns:
            Brand if found, None otherwise.
        """
        row = await self.session.get(BrandModel, brand_id)
        return row.to_entity() if row else None

    async def find_brand_by_name(self, name: str) -> Brand | None:
        """Find a brand by case-insensitive exact name.

        Args:
            name: Brand name.

        Returns:
            The oldest matching brand, or None.
        """
        query = (
            select(BrandModel)
            .where(func.lower(BrandModel.name) == name.strip().lower())
            .order_by(BrandModel.created_at)
            .limit(1)
        )
        result = await self.session.execute(query)
        row = result.scalars().first()
        return row.to_entity() if row else None

    async def create_brand(self, name: str) -> Brand:
        """Create a brand.

        Args:
            name: Brand name.

        Returns:
            Created brand with its ID.
        """
        row = BrandModel(name=name.strip())
        self.session.add(row)
        await self.session.flush()
        return row.to_entity()

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        """Get all products, newest first."""
        query = select(ProductModel).order_by(ProductModel.created_at.desc())
        result = await self.session.execute(query)
        return [row.to_entity() for row in result.scalars().all()]

    async def list_products_by_brand(self, brand_id: str) -> list[Product]:
        """Get products of a brand.

        Args:
            brand_id: Brand ID.

        Returns:
            List of products.
        """
        query = (
            select(ProductModel)
            .where(ProductModel.brand_id == brand_id)
            .order_by(ProductModel.created_at)
        )
        result = await self.session.execute(query)
        return [row.to_entity() for row in result.scalars().all()]

    async def get_products_by_ids(self, product_ids: Sequence[str]) -> list[Product]:
        """Get the products matching a set of IDs.

        Unknown IDs are ignored; the result order is not guaranteed.

        Args:
            product_ids: Product IDs.

        Returns:
            Matching products.
        """
        if not product_ids:
            return []
        query = select(ProductModel).where(ProductModel.id.in_(list(product_ids)))
        result = await self.session.execute(query)
        return [row.to_entity() for row in result.scalars().all()]

    async def create_product(
        self,
        name: str,
        brand: Brand,
        image_ref: str = "",
    ) -> Product:
        """Create a product.

        Args:
            name: Product name.
            brand: Existing brand the product belongs to.
            image_ref: Image URL or storage key.

        Returns:
            Created product with its ID.
        """
        row = ProductModel(
            name=name.strip(),
            brand_id=brand.id,
            brand_name=brand.name,
            image_ref=image_ref,
        )
        self.session.add(row)
        await self.session.flush()
        return row.to_entity()

    # ------------------------------------------------------------------
    # Generated catalogs
    # ------------------------------------------------------------------

    async def record_generated_catalog(
        self,
        catalog_id: str,
        filename: str,
        download_url: str,
        product_ids: Sequence[str],
    ) -> GeneratedCatalog:
        """Record a generated catalog PDF.

        Args:
            catalog_id: Catalog identifier.
            filename: Stored PDF filename.
            download_url: Public URL of the PDF.
            product_ids: Products covered by the PDF.

        Returns:
            Recorded catalog.
        """
        row = GeneratedCatalogModel(
            id=catalog_id,
            filename=filename,
            download_url=download_url,
            product_ids=list(product_ids),
        )
        self.session.add(row)
        await self.session.flush()
        return row.to_entity()

    async def list_generated_catalogs(self, limit: int = 50) -> list[GeneratedCatalog]:
        """Get generated catalogs, newest first."""
        query = (
            select(GeneratedCatalogModel)
            .order_by(GeneratedCatalogModel.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return [row.to_entity() for row in result.scalars().all()]

    async def get_generated_catalog(self, filename: str) -> GeneratedCatalog | None:
        """Get a generated catalog by filename."""
        query = select(GeneratedCatalogModel).where(GeneratedCatalogModel.filename == filename)
        result = await self.session.execute(query)
        row = result.scalar_one_or_none()
        return row.to_entity() if row else None
