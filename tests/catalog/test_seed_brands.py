"""Tests for the brand seeding script."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scripts.seed_brands import DEFAULT_BRANDS, seed_brands
from shoecatalog.catalog.repository import CatalogRepository


@pytest.mark.asyncio
async def test_seeds_default_brands(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    results = await seed_brands(session_factory, DEFAULT_BRANDS)

    assert [r.brand.name for r in results] == list(DEFAULT_BRANDS)
    assert all(r.created for r in results)


@pytest.mark.asyncio
async def test_seeding_is_idempotent(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    await seed_brands(session_factory, DEFAULT_BRANDS)
    again = await seed_brands(session_factory, ["nike", "Bata", "PUMA"])

    assert [r.created for r in again] == [False, False, True]
    async with session_factory() as session:
        brands = await CatalogRepository(session).list_brands()
    assert len(brands) == len(DEFAULT_BRANDS) + 1
