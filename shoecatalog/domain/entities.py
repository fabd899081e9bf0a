"""Domain entities.

Canonical, storage-independent records for brands, products and
generated catalogs. The catalog store maps its rows onto these at its
boundary so services never see ORM objects or column-name variants.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Brand:
    """A brand. The name is the natural key (matched case-insensitively)."""

    id: str
    name: str


@dataclass(frozen=True)
class Product:
    """A product as seen by the catalog pipeline.

    Attributes:
        id: Product identifier.
        name: Product display name.
        brand_id: Identifier of the owning brand (non-owning reference).
        brand_name: Denormalized brand name for display.
        image_ref: Public URL, bare storage key, external URL, or "".
    """

    id: str
    name: str
    brand_id: str
    brand_name: str
    image_ref: str = ""

    @property
    def has_image(self) -> bool:
        """Whether the product references an image at all."""
        return bool(self.image_ref and self.image_ref.strip())


@dataclass(frozen=True)
class GeneratedCatalog:
    """Record of a catalog PDF written to the documents bucket."""

    id: str
    filename: str
    download_url: str
    product_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

