"""Tests for the product ingestion service."""

from collections.abc import AsyncGenerator

import fitz
import httpx
import pytest
import pytest_asyncio
from sqlalchemy.exc import IntegrityError

from shoecatalog.application.catalog_generation_service import CatalogGenerationService
from shoecatalog.application.ingestion_service import ProductIngestionService
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.domain.exceptions import InvalidRequestError, StorageError
from shoecatalog.imaging.acquirer import ImageAcquirer
from shoecatalog.infrastructure.blob_store import BlobStoreError, InMemoryBlobStore
from shoecatalog.pdf.composer import PLACEHOLDER_TEXT


@pytest.fixture
def service(
    repository: CatalogRepository, blob_store: InMemoryBlobStore
) -> ProductIngestionService:
    return ProductIngestionService(repository, blob_store, max_upload_bytes=1024 * 1024)


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client that refuses every request."""

    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(offline)) as client:
        yield client


# ============================================================================
# Validation
# ============================================================================


class TestValidate:
    """Tests for input validation."""

    @pytest.mark.parametrize(
        ("name", "brand"),
        [(None, "NIKE"), ("Air", None), ("  ", "NIKE"), ("Air", "   ")],
    )
    def test_missing_names(
        self, service: ProductIngestionService, jpeg_bytes: bytes, name, brand
    ) -> None:
        with pytest.raises(InvalidRequestError):
            service.validate(name, brand, jpeg_bytes, "image/jpeg")

    def test_missing_image(self, service: ProductIngestionService) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.validate("Air", "NIKE", None, None)
        assert exc_info.value.message == "Product image is required"

    def test_non_image_content_type(
        self, service: ProductIngestionService, jpeg_bytes: bytes
    ) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.validate("Air", "NIKE", jpeg_bytes, "application/pdf")
        assert exc_info.value.message == "Only image files are allowed"

    def test_empty_image(self, service: ProductIngestionService) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            service.validate("Air", "NIKE", b"", "image/png")
        assert exc_info.value.message == "Image file is empty or corrupted"

    def test_oversized_image(self, service: ProductIngestionService) -> None:
        with pytest.raises(InvalidRequestError):
            service.validate("Air", "NIKE", b"x" * (1024 * 1024 + 1), "image/jpeg")

    def test_returns_trimmed_names(
        self, service: ProductIngestionService, jpeg_bytes: bytes
    ) -> None:
        assert service.validate(" Air ", " NIKE ", jpeg_bytes, "IMAGE/JPEG") == ("Air", "NIKE")


# ============================================================================
# Ingestion
# ============================================================================


class TestIngest:
    """Tests for ProductIngestionService.ingest."""

    @pytest.mark.asyncio
    async def test_creates_product_with_resized_image(
        self,
        service: ProductIngestionService,
        blob_store: InMemoryBlobStore,
        make_image,
        read_size,
    ) -> None:
        result = await service.ingest("Air Max", "NIKE", make_image(2400, 1200), "image/jpeg")

        assert result.message == "Product created successfully"
        assert result.brand_created
        assert result.image_resized
        assert result.product.name == "Air Max"
        assert result.product.brand_name == "NIKE"
        assert result.image_key.startswith("product-") and result.image_key.endswith(".jpg")
        assert result.product.image_ref == blob_store.public_url("uploads", result.image_key)

        stored = await blob_store.get("uploads", result.image_key)
        assert read_size(stored) == (1200, 600)
        assert blob_store.content_type("uploads", result.image_key) == "image/jpeg"

    @pytest.mark.asyncio
    async def test_png_is_stored_as_jpeg(
        self, service: ProductIngestionService, blob_store: InMemoryBlobStore, png_bytes: bytes
    ) -> None:
        result = await service.ingest("Slide", "BATA", png_bytes, "image/png", "slide.png")

        assert result.image_key.endswith(".jpg")
        assert blob_store.content_type("uploads", result.image_key) == "image/jpeg"

    @pytest.mark.asyncio
    async def test_undecodable_image_stored_as_is(
        self, service: ProductIngestionService, blob_store: InMemoryBlobStore
    ) -> None:
        payload = b"not really a webp"

        result = await service.ingest("Odd", "BATA", payload, "image/webp", "odd.webp")

        assert not result.image_resized
        assert result.image_key.endswith(".webp")
        assert await blob_store.get("uploads", result.image_key) == payload

    @pytest.mark.asyncio
    async def test_reuses_brand_case_insensitively(
        self, service: ProductIngestionService, jpeg_bytes: bytes
    ) -> None:
        first = await service.ingest("Air", "Nike", jpeg_bytes)
        second = await service.ingest("Jordan", "NIKE", jpeg_bytes)

        assert first.brand_created
        assert not second.brand_created
        assert second.brand.id == first.brand.id
        assert second.product.brand_name == "Nike"

    @pytest.mark.asyncio
    async def test_invalid_input_has_no_side_effects(
        self,
        service: ProductIngestionService,
        repository: CatalogRepository,
        blob_store: InMemoryBlobStore,
    ) -> None:
        with pytest.raises(InvalidRequestError):
            await service.ingest("Air", "NIKE", b"", "image/jpeg")

        assert blob_store.keys("uploads") == []
        assert await repository.list_brands() == []

    @pytest.mark.asyncio
    async def test_product_failure_deletes_image(
        self,
        service: ProductIngestionService,
        repository: CatalogRepository,
        blob_store: InMemoryBlobStore,
        jpeg_bytes: bytes,
    ) -> None:
        async def broken_create(**kwargs):
            raise IntegrityError("INSERT", {}, Exception("constraint"))

        stored_keys: list[str] = []
        original_put = blob_store.put

        async def recording_put(bucket, key, data, content_type):
            stored_keys.append(key)
            return await original_put(bucket, key, data, content_type)

        repository.create_product = broken_create
        blob_store.put = recording_put

        with pytest.raises(StorageError) as exc_info:
            await service.ingest("Air", "NIKE", jpeg_bytes)

        assert exc_info.value.message == "Failed to create product"
        assert len(stored_keys) == 1
        assert not await blob_store.exists("uploads", stored_keys[0])
        # the brand was committed before the upload and survives
        assert [b.name for b in await repository.list_brands()] == ["NIKE"]

    @pytest.mark.asyncio
    async def test_upload_failure(
        self, repository: CatalogRepository, jpeg_bytes: bytes
    ) -> None:
        class ReadOnlyStore(InMemoryBlobStore):
            async def put(self, bucket, key, data, content_type):
                raise BlobStoreError(bucket, key, "read-only")

        service = ProductIngestionService(repository, ReadOnlyStore())

        with pytest.raises(StorageError) as exc_info:
            await service.ingest("Air", "NIKE", jpeg_bytes)

        assert exc_info.value.message == "Failed to upload image"
        assert await repository.list_products() == []


# ============================================================================
# Ingest then Generate
# ============================================================================


@pytest.mark.asyncio
async def test_ingested_product_renders_with_its_image(
    service: ProductIngestionService,
    repository: CatalogRepository,
    blob_store: InMemoryBlobStore,
    http_client: httpx.AsyncClient,
    jpeg_bytes: bytes,
) -> None:
    """A freshly ingested product gets a real image page in its catalog."""
    ingested = await service.ingest("Test Shoe", "TEST_BRAND", jpeg_bytes, "image/jpeg")

    generator = CatalogGenerationService(
        repository,
        blob_store,
        ImageAcquirer(blob_store, "uploads", client=http_client),
    )
    result = await generator.generate([ingested.product.id])

    assert result.page_count == 1
    assert result.placeholder_pages == 0
    with fitz.open(stream=await blob_store.get("pdfs", result.filename), filetype="pdf") as pdf:
        text = pdf[0].get_text()
        assert "TEST_BRAND" in text
        assert "Test Shoe" in text
        assert PLACEHOLDER_TEXT not in text
        assert len(pdf[0].get_images()) == 1
