"""
Concurrency Simulation Script

Fires many orders at a running server at once and checks that every
accepted order got a distinct id and a total priced from the menu.
Run from project root: python scripts/simulate.py --orders 50

Version: 1.0.0
"""

import argparse
import asyncio
import os
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
TOTAL_ORDERS = 50

# Sample data for random orders
FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis"]


def generate_random_customer() -> dict[str, str]:
    """Generate random customer info."""
    return {
        "customer_name": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "phone": f"765-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
    }


def generate_random_cart(menu: list[dict]) -> list[dict]:
    """
    Random cart lines. Each line carries a bogus client price, which the
    server must ignore.
    """
    cart = []
    for _ in range(random.randint(1, 4)):
        item = random.choice(menu)
        cart.append({
            "id": item["id"],
            "name": item["name"],
            "qty": random.randint(1, 3),
            "price_cents": 1,
        })
    return cart


def expected_total(menu: list[dict], cart: list[dict]) -> int:
    prices = {item["id"]: item["price_cents"] for item in menu}
    return sum(prices[line["id"]] * max(1, line["qty"]) for line in cart)


async def send_order(
    client: httpx.AsyncClient,
    menu: list[dict],
    order_num: int,
) -> dict[str, Any]:
    """Send one order and compare the returned total to the menu."""
    cart = generate_random_cart(menu)
    payload = {**generate_random_customer(), "cart": cart}
    start_time = time.time()

    try:
        response = await client.post(f"{API_BASE_URL}/api/order", json=payload, timeout=30.0)
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }

    elapsed = round(time.time() - start_time, 3)
    if response.status_code != 200:
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }

    data = response.json()
    return {
        "order_num": order_num,
        "success": True,
        "order_id": data["order_id"],
        "total": data["total_cents"],
        "expected": expected_total(menu, cart),
        "time": elapsed,
    }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the concurrency simulation.

    Args:
        num_orders: Number of orders to fire concurrently
    """
    print("=" * 70)
    print("🔥 ORDER SIMULATION - CONCURRENT SUBMISSIONS")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        menu_response = await client.get(f"{API_BASE_URL}/api/menu")
        menu_response.raise_for_status()
        menu = menu_response.json()["items"]
        if not menu:
            print("\n❌ Menu is empty, nothing to order.")
            return {"total": 0, "successful": 0, "failed": 0}

        tasks = [send_order(client, menu, i + 1) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    mispriced = [r for r in successful if r["total"] != r["expected"]]
    order_ids = [r["order_id"] for r in successful]
    duplicates = len(order_ids) - len(set(order_ids))

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        revenue = sum(r["total"] for r in successful)
        print(f"\n📈 Average Response: {avg_time}s")
        print(f"💰 Total Revenue: ${revenue / 100:.2f}")

    print(f"\n🔐 Mispriced totals: {len(mispriced)}")
    print(f"🆔 Duplicate order ids: {duplicates}")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "mispriced": len(mispriced),
        "duplicates": duplicates,
        "total_time": total_time,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrent order simulation")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    args = parser.parse_args()

    summary = asyncio.run(run_simulation(num_orders=args.orders))
    if summary.get("mispriced") or summary.get("duplicates"):
        sys.exit(1)
