"""SQLAlchemy models for the product catalog.

Defines the brands, products and generated_catalogs tables. Column
types stay portable (string UUIDs, generic JSON) so the same models
run on PostgreSQL and SQLite.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from shoecatalog.domain.entities import Brand, GeneratedCatalog, Product
from shoecatalog.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BrandModel(Base):
    """Brand row.

    Attributes:
        id: Unique brand identifier (UUID string).
        name: Brand name; unique case-insensitively by convention only.
        created_at: Creation timestamp.
    """

    __tablename__ = "brands"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<BrandModel(id={self.id}, name={self.name})>"

    def to_entity(self) -> Brand:
        """Map to the canonical Brand record."""
        return Brand(id=self.id, name=self.name)


class ProductModel(Base):
    """Product row.

    Attributes:
        id: Unique product identifier (UUID string).
        name: Product name.
        brand_id: Owning brand.
        brand_name: Brand name denormalized for display.
        image_ref: Image public URL or storage key; empty when missing.
        created_at: Creation timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    brand_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("brands.id"),
        nullable=False,
        index=True,
    )
    brand_name: Mapped[str] = mapped_column(String(200), nullable=False)
    image_ref: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductModel(id={self.id}, name={self.name[:30]})>"

    def to_entity(self) -> Product:
        """Map to the canonical Product record."""
        return Product(
            id=self.id,
            name=self.name or "",
            brand_id=self.brand_id,
            brand_name=self.brand_name or "",
            image_ref=self.image_ref or "",
        )


class GeneratedCatalogModel(Base):
    """Generated catalog PDF row."""

    __tablename__ = "generated_catalogs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    download_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    product_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def to_entity(self) -> GeneratedCatalog:
        """Map to the canonical GeneratedCatalog record."""
        return GeneratedCatalog(
            id=self.id,
            filename=self.filename,
            download_url=self.download_url,
            product_ids=list(self.product_ids or []),
            created_at=self.created_at,
        )
