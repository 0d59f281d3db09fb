"""
SQLAlchemy Database Models

Two tables back the ordering pipeline:
- menu_items: the catalog, source of pricing truth
- orders: append-only record of accepted pick-up orders

Version: 1.0.0
"""

import json

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text

from pickup_ordering.database import Base


class MenuItem(Base):
    """
    Catalog row.

    Inactive items stay in the table but are hidden from the menu and
    cannot be ordered.
    """
    __tablename__ = "menu_items"
    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="ck_menu_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price_cents = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False, default="Pizza")
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.price_cents}c>"


class Order(Base):
    """
    Accepted pick-up order.

    Rows are written once and never updated. ``items_json`` holds the
    server-priced line items; ``total_cents`` is their sum.
    """
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True)

    # =========================================================================
    # CUSTOMER INFORMATION
    # =========================================================================
    customer_name = Column(String(100), nullable=False)
    phone = Column(String(40), nullable=False)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items_json = Column(Text, nullable=False)  # JSON list of priced lines
    total_cents = Column(Integer, nullable=False)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    @property
    def line_items(self) -> list[dict]:
        return json.loads(self.items_json)

    def __repr__(self):
        return f"<Order {self.id} - {self.customer_name} - {self.total_cents}c>"
