from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from pickup_ordering.services.orders import OrderStore
from tests.conftest import order_count, run_sql

VALID_CUSTOMER = {"customer_name": "Jane Doe", "phone": "765-555-0100"}


def _order(client, cart, **overrides):
    body = {**VALID_CUSTOMER, "cart": cart, **overrides}
    return client.post("/api/order", json=body)


# =============================================================================
# MENU
# =============================================================================

def test_menu_lists_active_items_by_category_then_name(client):
    resp = client.get("/api/menu")

    assert resp.status_code == 200
    items = resp.json()["items"]
    assert [item["name"] for item in items] == [
        "Cinnamon Stix",
        "2-Liter Soda",
        "Cheese",
        "Pepperoni",
        "Breadsticks",
        "Royal Feast",
    ]
    cheese = next(item for item in items if item["name"] == "Cheese")
    assert cheese == {
        "id": 3,
        "name": "Cheese",
        "description": "Whole milk mozzarella",
        "price_cents": 1199,
        "category": "Pizza",
    }


def test_menu_hides_inactive_items(client):
    run_sql("UPDATE menu_items SET is_active = 0 WHERE id = 2")

    names = [item["name"] for item in client.get("/api/menu").json()["items"]]

    assert "Pepperoni" not in names
    assert len(names) == 5


# =============================================================================
# ACCEPTED ORDERS
# =============================================================================

def test_order_is_priced_from_catalog(client):
    resp = _order(client, [{"id": 3, "qty": 2}])

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["total_cents"] == 2398
    assert isinstance(body["order_id"], str) and body["order_id"]
    assert order_count() == 1


def test_client_prices_do_not_change_total(client):
    resp = _order(client, [
        {"id": 3, "qty": 2, "name": "Cheese", "price_cents": 1},
        {"id": 6, "qty": 1, "price": 0},
    ])

    assert resp.status_code == 200
    assert resp.json()["total_cents"] == 2 * 1199 + 399


def test_bad_quantities_are_charged_as_one(client):
    resp = _order(client, [{"id": 3, "qty": 0}, {"id": 4, "qty": -2}, {"id": 6}])

    assert resp.status_code == 200
    assert resp.json()["total_cents"] == 1199 + 699 + 399


def test_oversized_quantities_are_capped(client):
    resp = _order(client, [
        {"id": 3, "qty": 10**20},
        {"id": 6, "qty": 1e300},
        {"id": 4, "qty": "1e300"},
    ])

    assert resp.status_code == 200
    assert resp.json()["total_cents"] == 99 * (1199 + 399 + 699)
    assert order_count() == 1


def test_stored_order_matches_response(client, admin_headers):
    placed = _order(client, [{"id": 1, "qty": 1}, {"id": 3, "qty": 2, "name": "Free"}]).json()

    listing = client.get("/api/admin/orders", headers=admin_headers).json()

    assert listing["total"] == 1
    stored = listing["orders"][0]
    assert stored["id"] == placed["order_id"]
    assert stored["customer_name"] == "Jane Doe"
    assert stored["phone"] == "765-555-0100"
    assert stored["total_cents"] == placed["total_cents"] == 1799 + 2398
    assert stored["lines"] == [
        {"item_id": 1, "name": "Royal Feast", "quantity": 1, "price_cents": 1799, "line_total_cents": 1799},
        {"item_id": 3, "name": "Cheese", "quantity": 2, "price_cents": 1199, "line_total_cents": 2398},
    ]


def test_resubmitting_creates_a_second_order(client):
    first = _order(client, [{"id": 3, "qty": 2}]).json()
    second = _order(client, [{"id": 3, "qty": 2}]).json()

    assert first["order_id"] != second["order_id"]
    assert first["total_cents"] == second["total_cents"] == 2398
    assert order_count() == 2


# =============================================================================
# REJECTED ORDERS
# =============================================================================

def test_unknown_item_rejects_order(client):
    resp = _order(client, [{"id": 3, "qty": 2}, {"id": 99, "qty": 1}])

    assert resp.status_code == 400
    assert "99" in resp.json()["error"]
    assert order_count() == 0


def test_inactive_item_rejects_order(client):
    run_sql("UPDATE menu_items SET is_active = 0 WHERE id = 3")

    resp = _order(client, [{"id": 6, "qty": 1}, {"id": 3, "qty": 2}])

    assert resp.status_code == 400
    assert resp.json()["error"]
    assert order_count() == 0


def test_missing_customer_fields_are_rejected(client):
    for overrides in ({"customer_name": ""}, {"phone": ""}, {"phone": "   "}):
        resp = _order(client, [{"id": 3, "qty": 1}], **overrides)
        assert resp.status_code == 400
        assert resp.json()["error"]

    assert order_count() == 0


def test_empty_or_malformed_cart_is_rejected(client):
    for cart in ([], None, "3", {"id": 3}):
        resp = _order(client, cart)
        assert resp.status_code == 400
        assert set(resp.json()) == {"error"}

    assert order_count() == 0


def test_non_json_body_is_rejected(client):
    resp = client.post(
        "/api/order",
        content=b"customer_name=Jane",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert resp.status_code == 400
    assert resp.json()["error"]


def test_storage_failure_answers_503_and_stores_nothing(client, monkeypatch):
    async def failing_insert(self, session, order):
        raise OperationalError("INSERT INTO orders", {}, Exception("disk I/O error"))

    monkeypatch.setattr(OrderStore, "_insert", failing_insert)

    resp = _order(client, [{"id": 3, "qty": 2}])

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert "disk" not in error
    assert "try again" in error.lower()
    assert order_count() == 0


def _fail_session_reads(monkeypatch):
    async def failing_execute(self, statement, *args, **kwargs):
        raise OperationalError(str(statement), {}, Exception("database is locked"))

    monkeypatch.setattr(AsyncSession, "execute", failing_execute)


def test_catalog_failure_during_order_answers_503(client, monkeypatch):
    _fail_session_reads(monkeypatch)

    resp = _order(client, [{"id": 3, "qty": 2}])

    assert resp.status_code == 503
    error = resp.json()["error"]
    assert "locked" not in error
    assert "try again" in error.lower()
    assert order_count() == 0


def test_menu_answers_503_when_catalog_is_unreadable(client, monkeypatch):
    _fail_session_reads(monkeypatch)

    resp = client.get("/api/menu")

    assert resp.status_code == 503
    assert set(resp.json()) == {"error"}


# =============================================================================
# HEALTH
# =============================================================================

def test_health_reports_order_count(client):
    _order(client, [{"id": 3, "qty": 1}])

    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "operational"
    assert body["database"] == "healthy"
    assert body["orders"] == 1


def test_root_shows_restaurant(client):
    body = client.get("/").json()

    assert "Pizza King Converse" in body["message"]
    assert body["hours"]["Friday"] == "11:00 AM - 10:00 PM"
    assert len(body["hours"]) == 7
    assert body["menu"] == "/api/menu"
