"""
ROBS - Restaurant ordering and billing service
"""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from robs import __version__
from robs.config import settings
from robs.database import SessionLocal, engine
from robs.api import menu, orders, payments, reports, tables
from robs.api import settings as settings_api
from robs.services.errors import LifecycleError
from robs.services.events import RedisEventPublisher, get_event_publisher

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting ROBS API", version=__version__, event_backend=settings.event_backend)
    yield
    publisher = get_event_publisher()
    if isinstance(publisher, RedisEventPublisher):
        await publisher.close()
    await engine.dispose()
    logger.info("Shutting down ROBS API")


# Create FastAPI application
app = FastAPI(
    title="ROBS",
    description="Restaurant ordering, table and billing lifecycle service",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": __version__}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    # Check Redis
    if settings.event_backend == "redis":
        try:
            await get_event_publisher().client.ping()
            checks["redis"] = "ok"
        except Exception as e:
            checks["redis"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(payments.router, prefix="/payments", tags=["Payments"])
app.include_router(tables.router, prefix="/tables", tags=["Tables"])
app.include_router(menu.router, prefix="/menu", tags=["Menu"])
app.include_router(reports.router, prefix="/reports", tags=["Reports"])
app.include_router(settings_api.router, prefix="/settings", tags=["Settings"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "robs.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
