"""
Client-side cart and ordering API client.
"""

from pickup_ordering.client.api import OrderingClient, OrderReceipt, OrderSubmissionError
from pickup_ordering.client.cart import CART_KEY, CartLine, CartStore

__all__ = [
    "CART_KEY",
    "CartLine",
    "CartStore",
    "OrderingClient",
    "OrderReceipt",
    "OrderSubmissionError",
]
