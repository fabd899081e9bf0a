"""Tests for the catalog repository."""

import pytest

from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.domain.entities import Brand, Product


class TestBrands:
    """Tests for brand storage."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, repository: CatalogRepository) -> None:
        brand = await repository.create_brand("  NIKE ")

        assert isinstance(brand, Brand)
        assert brand.name == "NIKE"
        assert await repository.get_brand(brand.id) == brand

    @pytest.mark.asyncio
    async def test_get_unknown(self, repository: CatalogRepository) -> None:
        assert await repository.get_brand("does-not-exist") is None

    @pytest.mark.asyncio
    async def test_find_is_case_insensitive(self, repository: CatalogRepository) -> None:
        brand = await repository.create_brand("Flite-PU")

        assert await repository.find_brand_by_name("FLITE-PU") == brand
        assert await repository.find_brand_by_name(" flite-pu ") == brand
        assert await repository.find_brand_by_name("flite") is None

    @pytest.mark.asyncio
    async def test_list_ordered_by_name(self, repository: CatalogRepository) -> None:
        for name in ("SPARX", "ADIDAS", "NIKE"):
            await repository.create_brand(name)

        names = [b.name for b in await repository.list_brands()]

        assert names == ["ADIDAS", "NIKE", "SPARX"]


class TestProducts:
    """Tests for product storage."""

    @pytest.mark.asyncio
    async def test_create_product_denormalizes_brand(
        self, repository: CatalogRepository
    ) -> None:
        brand = await repository.create_brand("BATA")

        product = await repository.create_product("Loafer", brand, image_ref="product-1.jpg")

        assert isinstance(product, Product)
        assert product.brand_id == brand.id
        assert product.brand_name == "BATA"
        assert product.image_ref == "product-1.jpg"
        assert product.has_image

    @pytest.mark.asyncio
    async def test_missing_image_is_empty_string(self, repository: CatalogRepository) -> None:
        brand = await repository.create_brand("BATA")

        product = await repository.create_product("Sandal", brand)

        assert product.image_ref == ""
        assert not product.has_image

    @pytest.mark.asyncio
    async def test_get_by_ids_ignores_unknown(self, repository: CatalogRepository) -> None:
        brand = await repository.create_brand("NIKE")
        a = await repository.create_product("A", brand)
        b = await repository.create_product("B", brand)

        found = await repository.get_products_by_ids([b.id, "unknown", a.id])

        assert {p.id for p in found} == {a.id, b.id}

    @pytest.mark.asyncio
    async def test_get_by_ids_empty(self, repository: CatalogRepository) -> None:
        assert await repository.get_products_by_ids([]) == []

    @pytest.mark.asyncio
    async def test_list_by_brand(self, repository: CatalogRepository) -> None:
        nike = await repository.create_brand("NIKE")
        bata = await repository.create_brand("BATA")
        await repository.create_product("Air", nike)
        await repository.create_product("Loafer", bata)

        products = await repository.list_products_by_brand(nike.id)

        assert [p.name for p in products] == ["Air"]
        assert len(await repository.list_products()) == 2


class TestGeneratedCatalogs:
    """Tests for generated catalog records."""

    @pytest.mark.asyncio
    async def test_record_and_fetch(self, repository: CatalogRepository) -> None:
        catalog = await repository.record_generated_catalog(
            catalog_id="123-abc",
            filename="catalog-123-abc.pdf",
            download_url="memory://blobs/pdfs/catalog-123-abc.pdf",
            product_ids=["p1", "p2"],
        )

        assert catalog.product_ids == ["p1", "p2"]
        fetched = await repository.get_generated_catalog("catalog-123-abc.pdf")
        assert fetched is not None
        assert fetched.id == "123-abc"
        assert [c.id for c in await repository.list_generated_catalogs()] == ["123-abc"]
        assert await repository.get_generated_catalog("nope.pdf") is None
