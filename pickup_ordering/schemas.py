"""
Pydantic Schemas for Request/Response Validation

Order submissions are validated against ``OrderSubmission`` by the order
validator rather than by FastAPI, so every rejection answers with the same
``{"error": ...}`` shape instead of a 422.

Version: 1.0.0
"""

import math
from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

MAX_QUANTITY = 99
MAX_NAME_LENGTH = 100
MAX_PHONE_LENGTH = 40


# =============================================================================
# MENU SCHEMAS
# =============================================================================

class MenuItemResponse(BaseModel):
    """Single active catalog item."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price_cents: int = Field(..., ge=0, examples=[1199])
    category: str


class MenuResponse(BaseModel):
    """Active menu, ordered by category then name."""
    items: List[MenuItemResponse]


# =============================================================================
# ORDER SUBMISSION SCHEMAS
# =============================================================================

def normalize_quantity(raw: Any) -> int:
    """
    Coerce a client quantity to an integer between 1 and MAX_QUANTITY.

    Integers pass through, finite floats and numeric strings are floored,
    then the result is clamped. Anything else (missing, booleans, text,
    NaN, infinity) counts as 1.

    >>> normalize_quantity("2.9")
    2
    >>> normalize_quantity(-4)
    1
    >>> normalize_quantity(10**20)
    99
    """
    if raw is None or isinstance(raw, bool):
        return 1

    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            return 1
        value = math.floor(raw)
    elif isinstance(raw, str):
        try:
            parsed = float(raw.strip())
        except ValueError:
            return 1
        if not math.isfinite(parsed):
            return 1
        value = math.floor(parsed)
    else:
        return 1

    return min(MAX_QUANTITY, max(1, value))


class CartEntry(BaseModel):
    """
    One submitted cart line.

    Only identity and quantity are read; ``name``, ``price`` and any other
    client field are dropped. ``item_id`` stays raw so that a non-integer
    id is reported as an unavailable item rather than a malformed request.
    """
    model_config = ConfigDict(extra="ignore")

    item_id: Any = Field(None, validation_alias=AliasChoices("id", "item_id"))
    quantity: int = Field(1, validation_alias=AliasChoices("qty", "quantity"))

    @field_validator("quantity", mode="before")
    @classmethod
    def clamp_quantity(cls, v: Any) -> int:
        return normalize_quantity(v)


class OrderSubmission(BaseModel):
    """Body of ``POST /api/order``."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    customer_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH, examples=["Jane Doe"])
    phone: str = Field(..., min_length=1, max_length=MAX_PHONE_LENGTH, examples=["765-555-0100"])
    cart: List[CartEntry] = Field(..., min_length=1)


# =============================================================================
# ORDER SCHEMAS
# =============================================================================

class OrderLineResponse(BaseModel):
    """Server-priced order line."""
    item_id: int
    name: str
    quantity: int
    price_cents: int
    line_total_cents: int


class OrderAcceptedResponse(BaseModel):
    """Response after successfully placing an order."""
    ok: bool = True
    order_id: str
    total_cents: int


class OrderResponse(BaseModel):
    """Stored order as shown to staff."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    phone: str
    lines: List[OrderLineResponse] = Field(validation_alias="line_items")
    total_cents: int
    created_at: datetime


class OrderListResponse(BaseModel):
    """Response for listing recent orders."""
    total: int
    orders: List[OrderResponse]


# =============================================================================
# COMMON SCHEMAS
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    orders: Optional[int] = None
    timestamp: datetime
