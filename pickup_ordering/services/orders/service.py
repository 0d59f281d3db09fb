"""
Order Submission

Orchestrates one order submission: validate, price from the catalog,
persist. Either exactly one order is stored or an ``OrderError`` is raised
and nothing is stored.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from pickup_ordering.exceptions import OrderError
from pickup_ordering.models import Order
from pickup_ordering.services.catalog import CatalogStore
from pickup_ordering.services.orders.store import OrderStore
from pickup_ordering.services.orders.validator import parse_order_request, price_order

logger = logging.getLogger(__name__)


class OrderService:
    """Validator + store behind a single call."""

    def __init__(self, catalog: CatalogStore, store: OrderStore):
        self.catalog = catalog
        self.store = store

    async def submit(self, session: AsyncSession, payload: Any) -> Order:
        """
        Place an order from a raw submission body.

        Raises:
            InvalidRequest: missing customer fields or empty cart
            InvalidItem: any cart id is unknown or inactive
            StorageUnavailable: the catalog read or order write failed
        """
        try:
            request = parse_order_request(payload)
            snapshot = await self.catalog.price_lookup(session, request.item_ids)
            draft = price_order(request, snapshot)
            order = await self.store.create(
                session,
                customer_name=draft.customer_name,
                phone=draft.phone,
                lines=draft.lines,
                total_cents=draft.total_cents,
            )
        except OrderError as exc:
            logger.warning(f"Order rejected ({exc.kind}): {exc.message}")
            raise

        logger.info(
            f"Order {order.id} accepted: {len(draft.lines)} lines, "
            f"total {order.total_cents}c"
        )
        return order
