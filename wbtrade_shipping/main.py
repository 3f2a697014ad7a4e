"""
WB Trade Shipping
FastAPI application entry point

- Checkout shipping calculation endpoints under /api
- Structured error responses for shipping and catalog failures
- Health check with DB ping
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text

from wbtrade_shipping import __version__
from wbtrade_shipping.api.routes import shipping
from wbtrade_shipping.core.config import settings
from wbtrade_shipping.core.database import AsyncSessionLocal
from wbtrade_shipping.core.error_handler import ErrorSanitizationMiddleware, register_exception_handlers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Shipping package and cost calculation for the WB Trade storefront",
    version=__version__,
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Shipping", "description": "Checkout shipping packages, costs and carrier options"},
    ],
)

app.add_middleware(ErrorSanitizationMiddleware)
register_exception_handlers(app)

app.include_router(shipping.router, prefix="/api", tags=["Shipping"])


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "WB Trade Shipping API",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with an actual DB ping.
    Returns 503 if the catalog database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check database ping failed: {type(e).__name__}: {e}")
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status
