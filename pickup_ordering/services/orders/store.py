"""
Order Store

Append-only persistence for accepted orders.

Each order is written with a single INSERT + COMMIT. Writes from
concurrent requests are serialized by an asyncio lock held by the store
instance, so two submissions never interleave on the same database file.
Orders are never updated or deleted here.

Version: 1.0.0
"""

import asyncio
import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pickup_ordering.exceptions import StorageUnavailable
from pickup_ordering.models import Order
from pickup_ordering.services.orders.base import OrderLine

logger = logging.getLogger(__name__)

ORDER_ID_LENGTH = 20


def generate_order_id() -> str:
    """Random, non-sequential order identifier shown to customers."""
    return uuid.uuid4().hex[:ORDER_ID_LENGTH]


class OrderStore:
    """Writes and reads finalized orders."""

    def __init__(self):
        self._write_lock = asyncio.Lock()

    async def create(
        self,
        session: AsyncSession,
        customer_name: str,
        phone: str,
        lines: Sequence[OrderLine],
        total_cents: int,
    ) -> Order:
        """
        Persist a new order and return it.

        Args:
            session: Request-scoped database session
            customer_name: Validated customer name
            phone: Validated phone number
            lines: Priced lines, in cart order
            total_cents: Sum of the line totals

        Returns:
            Order: The stored row, with its generated id and timestamp

        Raises:
            ValueError: If lines are empty or do not add up to total_cents
            StorageUnavailable: If the database rejects or cannot take the write
        """
        if not lines:
            raise ValueError("An order needs at least one line")
        computed = sum(line.line_total_cents for line in lines)
        if computed != total_cents:
            raise ValueError(f"Order total {total_cents} does not match line sum {computed}")

        order = Order(
            id=generate_order_id(),
            customer_name=customer_name,
            phone=phone,
            items_json=json.dumps([line.to_dict() for line in lines]),
            total_cents=total_cents,
        )

        async with self._write_lock:
            order.created_at = datetime.now(timezone.utc)
            try:
                await self._insert(session, order)
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error(f"Order write failed for {customer_name!r}: {exc}")
                raise StorageUnavailable("order write failed") from exc

        return order

    async def _insert(self, session: AsyncSession, order: Order) -> None:
        session.add(order)
        await session.commit()

    async def list_recent(self, session: AsyncSession, limit: int = 200) -> list[Order]:
        """Most recent orders first."""
        query = select(Order).order_by(Order.created_at.desc()).limit(limit)
        try:
            result = await session.execute(query)
        except SQLAlchemyError as exc:
            logger.error(f"Order listing failed: {exc}")
            raise StorageUnavailable("order read failed") from exc
        return list(result.scalars().all())

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(select(func.count(Order.id)))
        return result.scalar() or 0
