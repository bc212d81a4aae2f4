import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quisine.core.config import CORS_ORIGINS, DATABASE_URL, ENV
from quisine.core.database import Base, engine
from quisine.core.errors import register_exception_handlers
from quisine.core.logging_setup import configure_logging
from quisine.core.startup_checks import (
    ensure_migrations_applied,
    validate_database_environment,
    validate_jwt_secret,
)
from quisine.middleware.observability import ObservabilityMiddleware
import quisine.models  # registers every table on Base.metadata before create_all

from quisine.routers.admin_analytics import router as admin_analytics_router
from quisine.routers.admin_menu import router as admin_menu_router
from quisine.routers.admin_orders import router as admin_orders_router
from quisine.routers.admin_shop import router as admin_shop_router
from quisine.routers.auth import router as auth_router
from quisine.routers.internal_metrics import router as internal_metrics_router
from quisine.routers.public_shop import router as public_shop_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        validate_jwt_secret()
        # dev convenience only; production schemas come from alembic
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise
    logger.info("%s ready env=%s", STARTUP_PREFIX, ENV)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Quisine API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Poll-Interval"],
)
app.add_middleware(ObservabilityMiddleware)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(admin_shop_router)
app.include_router(admin_menu_router)
app.include_router(admin_orders_router)
app.include_router(admin_analytics_router)
app.include_router(public_shop_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok", "service": "quisine"}


@app.get("/health")
def health():
    return {"status": "ok"}
