#!/usr/bin/env python3
"""Seed default brands script.

Creates the catalog tables if needed and seeds the default brands.
Brands are resolved case-insensitively, so re-running the script never
creates duplicates.

Usage:
    python scripts/seed_brands.py
    python scripts/seed_brands.py --brand PUMA --brand REEBOK
    python scripts/seed_brands.py --no-defaults --brand PUMA
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import shoecatalog.catalog.models  # noqa: F401  (registers tables on Base)
from shoecatalog.catalog.repository import CatalogRepository
from shoecatalog.catalog.service import BrandResult, CatalogService
from shoecatalog.infrastructure.database import Base, async_session_factory, engine

DEFAULT_BRANDS = ("FLITE-PU", "SPARX", "BATA", "NIKE", "ADIDAS")


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_brands(
    session_factory: async_sessionmaker[AsyncSession],
    names: Sequence[str],
) -> list[BrandResult]:
    """Look up or create each brand.

    Args:
        session_factory: Session factory for the catalog database.
        names: Brand names to seed.

    Returns:
        One result per name, in input order.
    """
    async with session_factory() as session:
        service = CatalogService(CatalogRepository(session))
        results = [await service.get_or_create_brand(name) for name in names]
        await session.commit()
        return results


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed default brands",
    )
    parser.add_argument(
        "--brand",
        action="append",
        default=[],
        help="Additional brand name to seed (repeatable)",
    )
    parser.add_argument(
        "--no-defaults",
        action="store_true",
        help=f"Don't seed the default brands ({', '.join(DEFAULT_BRANDS)})",
    )

    args = parser.parse_args()

    names = [] if args.no_defaults else list(DEFAULT_BRANDS)
    names.extend(args.brand)
    if not names:
        parser.error("nothing to seed")

    print("=" * 60)
    print("Shoe Catalog Brand Seeder")
    print("=" * 60)

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    results = await seed_brands(async_session_factory, names)
    for result in results:
        marker = "created" if result.created else "exists "
        print(f"  {marker}  {result.brand.name}  ({result.brand.id})")

    await engine.dispose()

    print()
    print("=" * 60)
    print(f"Seeding complete! {sum(r.created for r in results)} new brand(s)")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
