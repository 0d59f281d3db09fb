import asyncio
import os
import tempfile
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="pickup-ordering-tests-"))
TEST_DB_PATH = _TEST_DIR / "app.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
ADMIN_KEY = "test-admin-key"

# Must be set before pickup_ordering reads its settings
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ADMIN_PASSWORD"] = ADMIN_KEY
os.environ["SEED_MENU"] = "true"
os.environ["DATA_DIRECTORY"] = str(_TEST_DIR / "data")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from pickup_ordering.main import app


def run_sql(statement: str, params: dict | None = None):
    """Run one statement against the test database outside the app."""

    async def _run():
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(statement), params or {})
                return result.fetchall() if result.returns_rows else None
        finally:
            await engine.dispose()

    return asyncio.run(_run())


def order_count() -> int:
    return run_sql("SELECT COUNT(*) FROM orders")[0][0]


@pytest.fixture()
def client():
    """App client on a freshly seeded database."""
    for suffix in ("", "-journal"):
        path = Path(str(TEST_DB_PATH) + suffix)
        if path.exists():
            path.unlink()

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
