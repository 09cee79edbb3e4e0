"""
app/main.py

Purpose: Application entry point

- Builds the FastAPI app: middleware, error handlers, routers
- Lifespan: settings check, Mongo connection, indexes, account sweep
- Probes: /health (detailed), /ready, /live
"""

import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import category, customer, product, quote, user
from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import get_logger, setup_logging
from app.db.indexes import create_indexes
from app.db.mongo import check_database_health, close_mongo_connection, connect_to_mongo
from app.services.cleanup_service import account_cleanup

setup_logging()
logger = get_logger(__name__)

APP_NAME = "Billing Habit API"
APP_VERSION = "1.0.0"
SLOW_REQUEST_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {APP_NAME} {APP_VERSION} (environment={settings.ENVIRONMENT}, debug={settings.DEBUG})")

    try:
        validate_settings()
        await connect_to_mongo()
        await create_indexes()
    except Exception as e:
        logger.critical(f"Startup failed: {str(e)}", exc_info=True)
        raise

    if settings.CLEANUP_ENABLED:
        account_cleanup.start()
    logger.info("Startup complete")

    yield

    logger.info("Shutting down")
    try:
        await account_cleanup.stop()
        await close_mongo_connection()
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


async def process_time_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"

    if elapsed > SLOW_REQUEST_SECONDS:
        logger.warning(f"Slow request: {request.method} {request.url.path} took {elapsed:.2f}s")
    return response


async def collect_health() -> Dict[str, Any]:
    """Database and sweep state; status is healthy, degraded or unhealthy."""
    checks = {}
    try:
        checks["database"] = "healthy" if await check_database_health() else "unhealthy"
    except Exception as e:
        logger.error(f"Database health check failed: {str(e)}")
        checks["database"] = "error"

    if not settings.CLEANUP_ENABLED:
        checks["account_cleanup"] = "disabled"
    else:
        checks["account_cleanup"] = "running" if account_cleanup.is_running() else "stopped"

    if checks["database"] == "healthy":
        status = "healthy"
    elif checks["database"] == "unhealthy":
        status = "degraded"
    else:
        status = "unhealthy"

    return {
        "status": status,
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "checks": checks,
    }


def create_app() -> FastAPI:
    app = FastAPI(
        title=APP_NAME,
        description="Catalog, customers and credit-billed quotations for small shops",
        version=APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
        # API docs only outside production
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Credentials on so browsers send the session cookie cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(process_time_middleware)
    add_exception_handlers(app)

    prefix = settings.API_PREFIX
    app.include_router(user.router, prefix=f"{prefix}/user", tags=["User"])
    app.include_router(category.router, prefix=f"{prefix}/category", tags=["Category"])
    app.include_router(category.sub_category_router, prefix=f"{prefix}/subcategory", tags=["SubCategory"])
    app.include_router(product.router, prefix=f"{prefix}/product", tags=["Product"])
    app.include_router(customer.router, prefix=f"{prefix}/customer", tags=["Customer"])
    app.include_router(quote.router, prefix=f"{prefix}/quote", tags=["Quote"])

    @app.get("/", tags=["Health"])
    async def root():
        return {"name": APP_NAME, "version": APP_VERSION, "status": "running", "environment": settings.ENVIRONMENT}

    @app.get("/health", tags=["Health"])
    async def health_check():
        health = await collect_health()
        return JSONResponse(content=health, status_code=200 if health["status"] == "healthy" else 503)

    @app.get("/ready", tags=["Health"])
    async def readiness_check():
        if await check_database_health():
            return {"status": "ready"}
        return JSONResponse(status_code=503, content={"status": "not_ready", "reason": "database_unavailable"})

    @app.get("/live", tags=["Health"])
    async def liveness_check():
        return {"status": "alive"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
