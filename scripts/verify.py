"""
Order Verification Script

Checks data integrity of persisted orders: every id is a 20-character
hex string, every line total is price x quantity, every order total is
the sum of its lines, and no order is empty.
Run from project root: python scripts/verify.py

Version: 1.0.0
"""

import asyncio
import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pickup_ordering.core.config import get_settings
from pickup_ordering.database import async_session_maker, engine
from pickup_ordering.models import Order
from pickup_ordering.schemas import MAX_QUANTITY
from pickup_ordering.services.orders import OrderStore
from pickup_ordering.services.orders.store import ORDER_ID_LENGTH

HEX_DIGITS = set("0123456789abcdef")


def order_problems(order: Order) -> list[str]:
    """Integrity problems of a single stored order."""
    problems = []
    if len(order.id) != ORDER_ID_LENGTH or any(c not in HEX_DIGITS for c in order.id):
        problems.append(f"malformed id {order.id!r}")

    lines = order.line_items
    if not lines:
        problems.append("no line items")

    for position, line in enumerate(lines, start=1):
        if not 1 <= line["quantity"] <= MAX_QUANTITY:
            problems.append(f"line {position}: quantity {line['quantity']}")
        if line["price_cents"] * line["quantity"] != line["line_total_cents"]:
            problems.append(f"line {position}: line total {line['line_total_cents']}")

    line_sum = sum(line["line_total_cents"] for line in lines)
    if line_sum != order.total_cents:
        problems.append(f"total {order.total_cents} != line sum {line_sum}")
    return problems


async def verify_orders(limit: int) -> bool:
    """Verify stored orders and print a report."""
    print("=" * 60)
    print("🔍 ORDER VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🗄️  Database: {get_settings().database_url}")
    print("=" * 60)

    store = OrderStore()
    async with async_session_maker() as session:
        orders = await store.list_recent(session, limit=limit)
    await engine.dispose()

    print(f"\n📊 Orders checked: {len(orders)}")

    bad = {}
    for order in orders:
        problems = order_problems(order)
        if problems:
            bad[order.id] = problems

    if bad:
        print(f"\n⚠️ {len(bad)} inconsistent orders:")
        for order_id, problems in list(bad.items())[:10]:
            print(f"   {order_id}: {'; '.join(problems)}")
    else:
        print("✅ All totals match their line items")

    if orders:
        revenue = sum(order.total_cents for order in orders)
        print(f"\n💰 Revenue: ${revenue / 100:.2f} (average ${revenue / len(orders) / 100:.2f})")

    print("\n" + "=" * 60)
    return not bad


if __name__ == "__main__":
    ok = asyncio.run(verify_orders(limit=10_000))
    sys.exit(0 if ok else 1)
