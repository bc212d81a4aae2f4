from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from quisine.core.config import DATABASE_URL, DEFAULT_JWT_SECRET, ENV_NORMALIZED, IS_PROD, JWT_SECRET_KEY

logger = logging.getLogger(__name__)
MIGRATIONS_PREFIX = "[MIGRATIONS]"
STARTUP_PREFIX = "[STARTUP]"


def validate_database_environment() -> None:
    if IS_PROD and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", MIGRATIONS_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def validate_jwt_secret() -> None:
    if JWT_SECRET_KEY != DEFAULT_JWT_SECRET:
        return
    if IS_PROD:
        logger.critical("%s JWT_SECRET_KEY is not configured", STARTUP_PREFIX)
        raise RuntimeError("JWT_SECRET_KEY must be set in production")
    logger.warning("%s using the development JWT secret env=%s", STARTUP_PREFIX, ENV_NORMALIZED)


def ensure_migrations_applied(*, engine: Engine, alembic_config_path: Path) -> None:
    if ENV_NORMALIZED == "test":
        logger.info("%s skipped migration check in test environment", MIGRATIONS_PREFIX)
        return
    if DATABASE_URL.startswith("sqlite"):
        logger.info("%s skipped migration check for sqlite (tables created on startup)", MIGRATIONS_PREFIX)
        return

    if not alembic_config_path.exists():
        logger.critical("%s alembic config not found path=%s", MIGRATIONS_PREFIX, alembic_config_path)
        raise RuntimeError("alembic config not found")

    alembic_cfg = Config(str(alembic_config_path))
    script_directory = ScriptDirectory.from_config(alembic_cfg)
    expected_heads = set(script_directory.get_heads())

    with engine.connect() as connection:
        inspector = inspect(connection)
        if "alembic_version" not in inspector.get_table_names():
            logger.critical("%s alembic_version table missing", MIGRATIONS_PREFIX)
            raise RuntimeError("Database has no migration state")

        current_rows = connection.exec_driver_sql("SELECT version_num FROM alembic_version").fetchall()

    current_heads = {row[0] for row in current_rows if row and row[0]}
    if current_heads != expected_heads:
        logger.critical(
            "%s pending migration detected current=%s expected=%s",
            MIGRATIONS_PREFIX,
            sorted(current_heads),
            sorted(expected_heads),
        )
        raise RuntimeError("Pending migrations detected")

    logger.info("%s migration state verified", MIGRATIONS_PREFIX)
