import json

from pickup_ordering.models import Order
from scripts.verify import order_problems

CHEESE_X2 = {"item_id": 3, "name": "Cheese", "quantity": 2, "price_cents": 1199, "line_total_cents": 2398}


def _stored(order_id="0123456789abcdef0123", lines=(CHEESE_X2,), total_cents=2398):
    return Order(
        id=order_id,
        customer_name="Jane Doe",
        phone="555",
        items_json=json.dumps(list(lines)),
        total_cents=total_cents,
    )


def test_consistent_order_has_no_problems():
    assert order_problems(_stored()) == []


def test_malformed_id_is_reported():
    problems = order_problems(_stored(order_id="ORD-1"))

    assert problems == ["malformed id 'ORD-1'"]


def test_total_and_line_mismatches_are_reported():
    bad_line = {**CHEESE_X2, "line_total_cents": 100}

    problems = order_problems(_stored(lines=[bad_line], total_cents=2398))

    assert "line 1: line total 100" in problems
    assert "total 2398 != line sum 100" in problems


def test_out_of_range_quantity_is_reported():
    huge = {**CHEESE_X2, "quantity": 1000, "line_total_cents": 1199000}

    problems = order_problems(_stored(lines=[huge], total_cents=1199000))

    assert problems == ["line 1: quantity 1000"]


def test_empty_order_is_reported():
    assert order_problems(_stored(lines=[], total_cents=0)) == ["no line items"]
