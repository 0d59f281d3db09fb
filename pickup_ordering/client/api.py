"""
Ordering Client

httpx client for the menu and order endpoints, driving a ``CartStore``.

Usage:
    with httpx.Client(base_url="http://localhost:3000") as http:
        client = OrderingClient(http, CartStore())
        menu = client.fetch_menu()
        client.add_to_cart(menu[0], qty=2)
        receipt = client.submit("Jane Doe", "765-555-0100")
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from pickup_ordering.client.cart import CartLine, CartStore

logger = logging.getLogger(__name__)


@dataclass
class OrderReceipt:
    """Accepted order as reported by the server."""
    order_id: str
    total_cents: int

    @property
    def total_display(self) -> str:
        return f"${self.total_cents / 100:.2f}"


class OrderSubmissionError(Exception):
    """The server rejected the order; the cart is left untouched."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class OrderingClient:
    def __init__(self, http: httpx.Client, cart: CartStore):
        self.http = http
        self.cart = cart

    def fetch_menu(self) -> list[dict[str, Any]]:
        response = self.http.get("/api/menu")
        response.raise_for_status()
        return response.json()["items"]

    def add_to_cart(self, item: dict[str, Any], qty: Any = 1) -> CartLine:
        """Add a menu entry (as returned by ``fetch_menu``) to the cart."""
        return self.cart.add(item["id"], item["name"], qty)

    def submit(self, customer_name: str, phone: str) -> OrderReceipt:
        """
        Send the cart as an order. Clears the cart only when accepted.

        Raises:
            OrderSubmissionError: The server answered with an error
        """
        payload = {
            "customer_name": customer_name,
            "phone": phone,
            "cart": self.cart.to_payload(),
        }
        response = self.http.post("/api/order", json=payload)

        if response.is_success:
            data = response.json()
            receipt = OrderReceipt(order_id=data["order_id"], total_cents=data["total_cents"])
            self.cart.clear()
            logger.info(f"Order {receipt.order_id} placed, total {receipt.total_display}")
            return receipt

        try:
            message = response.json().get("error") or "Try again."
        except ValueError:
            message = "Unknown error"
        logger.warning(f"Order rejected ({response.status_code}): {message}")
        raise OrderSubmissionError(message, status_code=response.status_code)
