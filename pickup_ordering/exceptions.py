"""
Order pipeline errors.

Every rejection of an order submission is an ``OrderError``. The HTTP layer
turns them into ``{"error": ...}`` responses using ``status_code`` and
``public_message``; nothing is retried.
"""

from typing import Optional


class OrderError(Exception):
    """Base class for terminal order submission failures."""

    kind = "OrderError"
    status_code = 400

    def __init__(self, message: str, *, item_id: Optional[object] = None):
        super().__init__(message)
        self.message = message
        self.item_id = item_id

    @property
    def public_message(self) -> str:
        return self.message


class InvalidRequest(OrderError):
    """Missing or malformed customer fields, or an empty cart."""

    kind = "InvalidRequest"


class InvalidItem(OrderError):
    """The cart references an item that is unknown or not for sale."""

    kind = "InvalidItem"


class StorageUnavailable(OrderError):
    """The database could not complete a read or the order write."""

    kind = "StorageUnavailable"
    status_code = 503

    @property
    def public_message(self) -> str:
        return "We could not place your order right now. Please try again."
