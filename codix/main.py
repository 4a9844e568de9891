"""Точка входа API Codix Studio."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import psutil
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from codix import __version__
from codix.api import api_router
from codix.api.errors import register_exception_handlers
from codix.core.config import get_settings
from codix.core.database import engine
from codix.core.rate_limit import limiter
from codix.utils.logger import get_logger, setup_logging
from codix.utils.storage import get_storage

setup_logging()
logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app_startup", environment=settings.environment, version=__version__)
    yield
    await get_storage().close()
    await engine.dispose()
    logger.info("app_shutdown")


app = FastAPI(
    title="Codix Studio API",
    description="Backend для сайта Codix Studio",
    version=__version__,
    lifespan=lifespan,
)

# Подключаем rate limiter к приложению
app.state.limiter = limiter
register_exception_handlers(app)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

app.include_router(api_router, prefix="/api/v1")

# Настраиваем экспорт метрик Prometheus
instrumentator = Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_instrument_requests_inprogress=True,
    excluded_handlers=["/metrics", "/health", "/health/detailed"],
    inprogress_name="http_requests_inprogress",
    inprogress_labels=True,
)
instrumentator.instrument(app).expose(app, endpoint="/metrics")


@app.get("/")
async def root():
    return {"message": "Codix Studio API", "version": __version__, "docs": "/docs"}


@app.get("/health")
async def health():
    """Health check - базовая проверка."""
    return {"status": "ok"}


@app.get("/health/detailed")
async def health_detailed():
    """Детальный health check с проверкой БД и системных ресурсов."""
    status = {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat(), "checks": {}}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        status["checks"]["database"] = {"status": "ok"}
    except Exception as e:
        logger.error("health_database_failed", error=str(e))
        status["status"] = "degraded"
        status["checks"]["database"] = {"status": "error", "error": str(e)}

    try:
        cpu_percent = psutil.cpu_percent(interval=0.1)
        memory = psutil.virtual_memory()
        disk = psutil.disk_usage("/")
        status["checks"]["system"] = {
            "status": "ok",
            "cpu_percent": cpu_percent,
            "memory": {"percent": memory.percent, "available_mb": round(memory.available / (1024 * 1024), 2)},
            "disk": {"percent": disk.percent, "free_gb": round(disk.free / (1024 * 1024 * 1024), 2)},
        }
        if cpu_percent > 90 or memory.percent > 90 or disk.percent > 90:
            status["status"] = "warning"
    except Exception as e:
        status["checks"]["system"] = {"status": "error", "error": str(e)}

    return status


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("codix.main:app", host=settings.app_host, port=settings.app_port)
