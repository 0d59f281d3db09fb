"""
Order Validator

Turns an untrusted order submission into a priced ``OrderDraft``.

The work is split in two pure steps so the database read happens in
between, outside this module:

    request = parse_order_request(payload)
    snapshot = await catalog.price_lookup(session, request.item_ids)
    draft = price_order(request, snapshot)

Client-supplied names and prices are never read. Totals come only from
the catalog snapshot.
"""

from typing import Any, Mapping

from pydantic import ValidationError

from pickup_ordering.exceptions import InvalidItem, InvalidRequest
from pickup_ordering.schemas import OrderSubmission, normalize_quantity
from pickup_ordering.services.catalog import CatalogPrice
from pickup_ordering.services.orders.base import (
    OrderDraft,
    OrderLine,
    OrderRequest,
    RequestedLine,
)

__all__ = ["normalize_quantity", "parse_order_request", "price_order"]

_FIELD_LABELS = {"customer_name": "name", "phone": "phone"}


def _rejection_message(exc: ValidationError) -> str:
    """Readable message for the first problem pydantic found."""
    error = exc.errors()[0]
    loc = error["loc"]

    if not loc:
        return "Request body must be a JSON object"

    field = loc[0]
    if field in _FIELD_LABELS:
        label = _FIELD_LABELS[field]
        if error["type"] == "string_too_long":
            return f"{label.capitalize()} must be at most {error['ctx']['max_length']} characters"
        return f"Missing {label}"

    if field == "cart":
        if len(loc) > 1 and isinstance(loc[1], int):
            return f"Cart entry {loc[1] + 1} is not an item"
        return "Your cart is empty"

    return "Invalid order request"


def parse_order_request(payload: Any) -> OrderRequest:
    """
    Validate the customer fields and cart shape of a submission body.

    Raises:
        InvalidRequest: body is not an object, name or phone is blank or
            too long, cart is missing, empty, not a list, or holds a
            non-object entry
    """
    try:
        submission = OrderSubmission.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequest(_rejection_message(exc)) from exc

    return OrderRequest(
        customer_name=submission.customer_name,
        phone=submission.phone,
        lines=tuple(
            RequestedLine(item_id=entry.item_id, quantity=entry.quantity)
            for entry in submission.cart
        ),
    )


def price_order(request: OrderRequest, snapshot: Mapping[int, CatalogPrice]) -> OrderDraft:
    """
    Price every requested line from the catalog snapshot.

    A single unresolvable line rejects the whole order.

    Raises:
        InvalidItem: a line's id is absent from the snapshot
    """
    lines = []
    total_cents = 0

    for requested in request.lines:
        item_id = requested.item_id
        entry = None
        if isinstance(item_id, int) and not isinstance(item_id, bool):
            entry = snapshot.get(item_id)
        if entry is None:
            raise InvalidItem(
                f"Item {item_id!r} is not available. Please update your cart.",
                item_id=item_id,
            )

        line_total = entry.price_cents * requested.quantity
        total_cents += line_total
        lines.append(
            OrderLine(
                item_id=entry.id,
                name=entry.name,
                quantity=requested.quantity,
                price_cents=entry.price_cents,
                line_total_cents=line_total,
            )
        )

    return OrderDraft(
        customer_name=request.customer_name,
        phone=request.phone,
        lines=lines,
        total_cents=total_cents,
    )
