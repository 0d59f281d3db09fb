"""
Order Service Factory

Provides a single entry point for obtaining the order service used by the
HTTP layer.

Usage:
    from pickup_ordering.services.orders import get_order_service

    order_service = get_order_service()
    order = await order_service.submit(session, payload)

The instance owns the order store's write lock, so it is created once per
application lifespan; ``reset_order_service()`` is called at startup.
"""

import logging
from functools import lru_cache

from pickup_ordering.services.catalog import CatalogStore
from pickup_ordering.services.orders.base import (
    OrderDraft,
    OrderLine,
    OrderRequest,
    RequestedLine,
)
from pickup_ordering.services.orders.service import OrderService
from pickup_ordering.services.orders.store import OrderStore
from pickup_ordering.services.orders.validator import (
    normalize_quantity,
    parse_order_request,
    price_order,
)

logger = logging.getLogger(__name__)


@lru_cache()
def get_order_service() -> OrderService:
    """
    Get the shared order service instance.

    Returns:
        OrderService: Service wired to the catalog and a single OrderStore
    """
    logger.debug("Order Service: creating OrderStore")
    return OrderService(catalog=CatalogStore(), store=OrderStore())


def reset_order_service() -> None:
    """
    Clear the cached order service instance.

    The next call to get_order_service() creates a new store and lock,
    bound to whichever event loop first uses them.
    """
    get_order_service.cache_clear()
    logger.debug("Order service cache cleared")


__all__ = [
    "get_order_service",
    "reset_order_service",
    "OrderService",
    "OrderStore",
    "OrderDraft",
    "OrderLine",
    "OrderRequest",
    "RequestedLine",
    "normalize_quantity",
    "parse_order_request",
    "price_order",
]
