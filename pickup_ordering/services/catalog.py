"""
Catalog Store

Read path over the menu_items table. The order pipeline only ever reads
the catalog; items are created by seeding or administration.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pickup_ordering.models import MenuItem
from pickup_ordering.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


DEFAULT_MENU = [
    {
        "name": "Royal Feast",
        "description": "Pepperoni, Sausage, Mushrooms, Onions, Green Peppers",
        "price_cents": 1799,
        "category": "Specialty Pizza",
    },
    {
        "name": "Pepperoni",
        "description": "Classic pepperoni and mozzarella",
        "price_cents": 1399,
        "category": "Pizza",
    },
    {
        "name": "Cheese",
        "description": "Whole milk mozzarella",
        "price_cents": 1199,
        "category": "Pizza",
    },
    {
        "name": "Breadsticks",
        "description": "Buttery, garlicky, with marinara",
        "price_cents": 699,
        "category": "Sides",
    },
    {
        "name": "Cinnamon Stix",
        "description": "Sweet cinnamon sticks with icing",
        "price_cents": 699,
        "category": "Dessert",
    },
    {
        "name": "2-Liter Soda",
        "description": "Pepsi, Diet Pepsi, Mountain Dew, Sierra Mist",
        "price_cents": 399,
        "category": "Drinks",
    },
]


@dataclass(frozen=True)
class CatalogPrice:
    """Authoritative name and unit price of an orderable item."""
    id: int
    name: str
    price_cents: int


class CatalogStore:
    """Queries against the catalog. Stateless; safe to share."""

    async def list_active(self, session: AsyncSession) -> list[MenuItem]:
        """Active items ordered by category, then name."""
        query = (
            select(MenuItem)
            .where(MenuItem.is_active.is_(True))
            .order_by(MenuItem.category, MenuItem.name)
        )
        try:
            result = await session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Menu query failed: {exc}")
            raise StorageUnavailable("catalog read failed") from exc
        return list(result.scalars().all())

    async def price_lookup(
        self,
        session: AsyncSession,
        ids: Iterable[int],
    ) -> dict[int, CatalogPrice]:
        """
        Fetch authoritative prices for a set of item ids.

        Only ids that exist and are active appear in the result; the caller
        must treat a missing id as unorderable.
        """
        wanted = set(ids)
        if not wanted:
            return {}

        query = select(MenuItem.id, MenuItem.name, MenuItem.price_cents).where(
            MenuItem.id.in_(wanted),
            MenuItem.is_active.is_(True),
        )
        try:
            result = await session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Price lookup failed for {len(wanted)} ids: {exc}")
            raise StorageUnavailable("catalog read failed") from exc

        return {
            row.id: CatalogPrice(id=row.id, name=row.name, price_cents=row.price_cents)
            for row in result
        }


async def seed_default_menu(session: AsyncSession) -> int:
    """Insert DEFAULT_MENU when the catalog is empty. Returns rows inserted."""
    count = (await session.execute(select(func.count(MenuItem.id)))).scalar() or 0
    if count:
        return 0

    session.add_all(MenuItem(**item) for item in DEFAULT_MENU)
    await session.commit()
    return len(DEFAULT_MENU)
