"""
FastAPI Application Entry Point

Pick-up Ordering Service - menu API, order submission and staff review.

Endpoints:
    - GET /api/menu: Active menu items
    - POST /api/order: Place a pick-up order
    - GET /api/admin/orders: Recent orders (JSON, shared secret)
    - GET /admin/orders: Recent orders (HTML, shared secret)
    - GET /health: System health check

Version: 1.0.0
"""

import logging
import secrets
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pickup_ordering.core.config import get_settings, setup_logging
from pickup_ordering.database import engine, get_db, init_db
from pickup_ordering.exceptions import InvalidRequest, OrderError
from pickup_ordering.schemas import (
    ErrorResponse,
    HealthResponse,
    MenuItemResponse,
    MenuResponse,
    OrderAcceptedResponse,
    OrderListResponse,
    OrderResponse,
)
from pickup_ordering.services.catalog import CatalogStore
from pickup_ordering.services.orders import get_order_service, reset_order_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


def format_cents(cents: int) -> str:
    """1199 -> '11.99'"""
    return f"{cents / 100:.2f}"


# Template configuration
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["currency"] = format_cents

catalog = CatalogStore()


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    await init_db()
    reset_order_service()
    logger.info("✅ Database initialized")

    missing = settings.validate_production_config()
    if missing:
        logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Walk-in pick-up ordering: browse the menu, submit an order priced "
        "from the catalog, and review recent orders."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def require_admin(
    key: Optional[str] = Query(None),
    x_admin_key: Optional[str] = Header(None, alias="x-admin-key"),
) -> None:
    """Shared-secret gate for the order review routes."""
    supplied = key or x_admin_key
    if not supplied or not secrets.compare_digest(
        supplied.encode("utf-8"), settings.admin_password.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """API root with restaurant details and navigation links."""
    return {
        "message": f"🍕 Welcome to {settings.restaurant_name}",
        "address": settings.restaurant_address,
        "phone": settings.restaurant_phone,
        "hours": settings.restaurant_hours,
        "version": settings.app_version,
        "menu": "/api/menu",
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify the database is reachable."""
    db_status = "healthy"
    order_count = None
    try:
        await db.execute(select(1))
        order_count = await get_order_service().store.count(db)
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        orders=order_count,
        timestamp=datetime.now(),
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get(
    "/api/menu",
    response_model=MenuResponse,
    responses={503: {"model": ErrorResponse}},
    tags=["Menu"],
)
async def get_menu(
    db: AsyncSession = Depends(get_db),
) -> MenuResponse:
    """Active menu items, ordered by category then name."""
    items = await catalog.list_active(db)
    return MenuResponse(items=[MenuItemResponse.model_validate(item) for item in items])


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/api/order",
    response_model=OrderAcceptedResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Place Pick-up Order",
)
async def place_order(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> OrderAcceptedResponse:
    """
    Place an order from ``{customer_name, phone, cart: [{id, qty}]}``.

    Prices and names are looked up in the catalog; any ``name`` or
    ``price`` sent with the cart is ignored.
    """
    try:
        payload: Any = await request.json()
    except ValueError:
        raise InvalidRequest("Request body must be valid JSON")

    order = await get_order_service().submit(db, payload)

    return OrderAcceptedResponse(order_id=order.id, total_cents=order.total_cents)


# =============================================================================
# ADMIN ENDPOINTS
# =============================================================================

@app.get(
    "/api/admin/orders",
    response_model=OrderListResponse,
    responses={401: {"model": ErrorResponse}},
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
async def list_recent_orders(
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> OrderListResponse:
    """Most recent orders, newest first."""
    orders = await get_order_service().store.list_recent(db, limit=limit)
    return OrderListResponse(
        total=len(orders),
        orders=[OrderResponse.model_validate(order) for order in orders],
    )


@app.get(
    "/admin/orders",
    response_class=HTMLResponse,
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)
async def admin_orders_page(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> HTMLResponse:
    """Order review page for staff."""
    orders = await get_order_service().store.list_recent(db, limit=settings.recent_orders_limit)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"orders": orders, "restaurant_name": settings.restaurant_name},
    )


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(OrderError)
async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
    """Rejected submissions answer with a single error message."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pickup_ordering.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
