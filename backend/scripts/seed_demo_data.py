"""
Seed demo categories and partners.

Run locally (from backend/):
  python -m scripts.seed_demo_data

It uses the same DATABASE_URL as the backend (dotenv supported by core.config).
Existing rows are matched by case-insensitive name and left alone.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, func

from db.database import async_session_maker, create_db_and_tables, Category, Partner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedPartner:
    name: str
    link: str
    category: Optional[str] = None
    featured: bool = False


SEED_CATEGORIES: list[str] = ["Exchange", "Brand", "Media"]

SEED_PARTNERS: list[SeedPartner] = [
    SeedPartner(name="OKX", link="https://www.okx.com", category="Exchange", featured=True),
]


async def main() -> None:
    await create_db_and_tables()
    async with async_session_maker() as db:
        # 1) Categories (idempotent)
        by_name: dict[str, Category] = {}
        for name in SEED_CATEGORIES:
            res = await db.execute(select(Category).where(func.lower(Category.name) == name.lower()))
            cat = res.scalar_one_or_none()
            if cat is None:
                cat = Category(name=name)
                db.add(cat)
                await db.flush()
                logger.info("Created category %s", name)
            by_name[name.lower()] = cat

        # 2) Partners (idempotent)
        for sp in SEED_PARTNERS:
            res = await db.execute(select(Partner).where(func.lower(Partner.name) == sp.name.lower()))
            if res.scalar_one_or_none() is not None:
                continue
            cat = by_name.get((sp.category or "").lower())
            db.add(Partner(name=sp.name, link=sp.link, featured=sp.featured, category_id=cat.id if cat else None))
            logger.info("Created partner %s", sp.name)

        await db.commit()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
