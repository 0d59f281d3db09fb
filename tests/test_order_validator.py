import pytest

from pickup_ordering.exceptions import InvalidItem, InvalidRequest
from pickup_ordering.schemas import MAX_QUANTITY
from pickup_ordering.services.catalog import CatalogPrice
from pickup_ordering.services.orders import normalize_quantity, parse_order_request, price_order

SNAPSHOT = {
    1: CatalogPrice(id=1, name="Royal Feast", price_cents=1799),
    3: CatalogPrice(id=3, name="Cheese", price_cents=1199),
    6: CatalogPrice(id=6, name="2-Liter Soda", price_cents=399),
    7: CatalogPrice(id=7, name="Water Cup", price_cents=0),
}


def _payload(cart, **overrides):
    body = {"customer_name": "Jane Doe", "phone": "765-555-0100", "cart": cart}
    body.update(overrides)
    return body


def _price(payload):
    return price_order(parse_order_request(payload), SNAPSHOT)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (2, 2),
        (0, 1),
        (-3, 1),
        (None, 1),
        (2.9, 2),
        (0.5, 1),
        ("3", 3),
        (" 4 ", 4),
        ("2.5", 2),
        ("-2", 1),
        ("abc", 1),
        ("", 1),
        (True, 1),
        (float("nan"), 1),
        (float("inf"), 1),
        ([2], 1),
        (99, 99),
        (100, 99),
        (10**20, 99),
        (1e300, 99),
        ("1e300", 99),
    ],
)
def test_normalize_quantity(raw, expected):
    assert normalize_quantity(raw) == expected


def test_example_cart_total():
    draft = _price(_payload([{"id": 3, "qty": 2}]))

    assert draft.total_cents == 2398
    assert len(draft.lines) == 1
    line = draft.lines[0]
    assert (line.item_id, line.name, line.quantity, line.price_cents, line.line_total_cents) == (
        3, "Cheese", 2, 1199, 2398,
    )


def test_client_name_and_price_are_ignored():
    draft = _price(_payload([
        {"id": 3, "qty": 1, "name": "Free Pizza", "price_cents": 1, "price": 0.01},
    ]))

    assert draft.lines[0].name == "Cheese"
    assert draft.lines[0].price_cents == 1199
    assert draft.total_cents == 1199


def test_lines_keep_cart_order_and_duplicates():
    draft = _price(_payload([{"id": 6, "qty": 1}, {"id": 3, "qty": 1}, {"id": 6, "qty": 2}]))

    assert [line.item_id for line in draft.lines] == [6, 3, 6]
    assert [line.line_total_cents for line in draft.lines] == [399, 1199, 798]
    assert draft.total_cents == sum(line.line_total_cents for line in draft.lines)


def test_bad_quantities_are_priced_as_one():
    draft = _price(_payload([{"id": 3, "qty": 0}, {"id": 3, "qty": -5}, {"id": 3}]))

    assert [line.quantity for line in draft.lines] == [1, 1, 1]
    assert draft.total_cents == 3 * 1199


def test_oversized_quantity_is_priced_at_the_cap():
    draft = _price(_payload([{"id": 3, "qty": 10**20}]))

    assert draft.lines[0].quantity == MAX_QUANTITY
    assert draft.total_cents == MAX_QUANTITY * 1199


def test_item_id_and_quantity_aliases():
    draft = _price(_payload([{"item_id": 1, "quantity": 3}]))

    assert draft.lines[0].item_id == 1
    assert draft.total_cents == 3 * 1799


def test_zero_priced_item_is_orderable():
    draft = _price(_payload([{"id": 7, "qty": 4}]))

    assert draft.total_cents == 0


def test_unknown_item_rejects_whole_order():
    with pytest.raises(InvalidItem) as exc_info:
        _price(_payload([{"id": 3, "qty": 2}, {"id": 99, "qty": 1}]))

    assert exc_info.value.item_id == 99
    assert exc_info.value.kind == "InvalidItem"


@pytest.mark.parametrize("item_id", ["3", None, 3.0, True, [3]])
def test_non_integer_item_ids_never_resolve(item_id):
    with pytest.raises(InvalidItem):
        _price(_payload([{"id": item_id, "qty": 1}]))


def test_item_ids_only_collects_integers():
    request = parse_order_request(_payload([
        {"id": 3}, {"id": 3}, {"id": "6"}, {"id": True}, {"qty": 2}, {"id": 1},
    ]))

    assert request.item_ids == {1, 3}


def test_customer_fields_are_trimmed():
    request = parse_order_request(_payload([{"id": 3}], customer_name="  Jane ", phone=" 555 "))

    assert request.customer_name == "Jane"
    assert request.phone == "555"


@pytest.mark.parametrize(
    "payload",
    [
        None,
        [],
        "order",
        _payload([{"id": 3}], customer_name=""),
        _payload([{"id": 3}], customer_name="   "),
        _payload([{"id": 3}], customer_name=None),
        _payload([{"id": 3}], customer_name=42),
        _payload([{"id": 3}], phone=""),
        _payload([{"id": 3}], phone=None),
        _payload([]),
        _payload(None),
        _payload({"id": 3}),
        _payload("3"),
        _payload([3]),
        _payload([{"id": 3}, "soda"]),
        _payload([{"id": 3}], customer_name="x" * 101),
        _payload([{"id": 3}], phone="5" * 41),
    ],
)
def test_invalid_requests(payload):
    with pytest.raises(InvalidRequest) as exc_info:
        parse_order_request(payload)

    assert exc_info.value.status_code == 400
    assert exc_info.value.public_message


def test_missing_fields_are_invalid_request():
    with pytest.raises(InvalidRequest):
        parse_order_request({"cart": [{"id": 3}]})


@pytest.mark.parametrize(
    "payload, message",
    [
        ("order", "Request body must be a JSON object"),
        (_payload([{"id": 3}], customer_name="  "), "Missing name"),
        (_payload([{"id": 3}], phone=None), "Missing phone"),
        (_payload([{"id": 3}], customer_name="x" * 101), "Name must be at most 100 characters"),
        (_payload([]), "Your cart is empty"),
        (_payload([{"id": 3}, "soda"]), "Cart entry 2 is not an item"),
    ],
)
def test_rejection_messages_are_readable(payload, message):
    with pytest.raises(InvalidRequest) as exc_info:
        parse_order_request(payload)

    assert exc_info.value.public_message == message
