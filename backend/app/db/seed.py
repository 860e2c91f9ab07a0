"""Seed Data — default catalogue for a fresh database.

Run with `python -m app.db.seed`. Inserts nothing when products already exist.
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.session import create_session_factory
from app.infrastructure.observability import setup_logging
from app.models.product import Product

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS = [
    {"name": "Basic T-Shirt", "price": 15.99, "category": "Clothing", "stock": 120,
     "description": "Cotton crew-neck t-shirt"},
    {"name": "Denim Jacket", "price": 79.5, "category": "Clothing", "stock": 35,
     "description": "Classic fit denim jacket"},
    {"name": "Running Shoes", "price": 99.0, "category": "Footwear", "stock": 60,
     "description": "Lightweight shoes for daily runs"},
    {"name": "Leather Boots", "price": 149.0, "category": "Footwear", "stock": 20,
     "description": "Waterproof leather boots"},
    {"name": "Canvas Backpack", "price": 45.0, "category": "Accessories", "stock": 80,
     "description": "20L backpack with laptop sleeve"},
    {"name": "Steel Water Bottle", "price": 22.0, "category": "Accessories", "stock": 200,
     "description": "Insulated 750ml bottle"},
]


async def seed_default_products(session: AsyncSession) -> int:
    """Insert DEFAULT_PRODUCTS when the products table is empty. Returns rows added."""
    existing = (
        await session.execute(select(func.count()).select_from(Product))
    ).scalar_one()
    if existing:
        logger.info(f"Seed skipped: {existing} products already present")
        return 0
    session.add_all(Product(**fields) for fields in DEFAULT_PRODUCTS)
    await session.commit()
    logger.info(f"Seeded {len(DEFAULT_PRODUCTS)} products")
    return len(DEFAULT_PRODUCTS)


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    factory = create_session_factory(settings.database_url)
    async with factory() as session:
        await seed_default_products(session)
    await factory.kw["bind"].dispose()


if __name__ == "__main__":
    asyncio.run(main())
