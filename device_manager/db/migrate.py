"""Idempotent schema bootstrap for the device store."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

from .session import MODEL_SCHEMA, Base

logger = logging.getLogger("device_manager.db")

# Only ADD tables/indexes here. Nothing is dropped or rewritten.


def _target_schema(engine: Engine) -> str | None:
    """Resolve the model schema through the engine's translate map."""

    translate = engine.get_execution_options().get("schema_translate_map") or {}
    return translate.get(MODEL_SCHEMA, MODEL_SCHEMA)


def _quote(engine: Engine, name: str) -> str:
    return engine.dialect.identifier_preparer.quote(name)


def _ensure_schema(engine: Engine, schema: str | None) -> None:
    """Create the namespace on backends that have one."""

    if not schema or engine.dialect.name != "postgresql":
        return
    with engine.begin() as conn:
        conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {_quote(engine, schema)}"))


def _create_index_if_not_exists(
    engine: Engine,
    schema: str | None,
    table: str,
    name: str,
    cols: Iterable[str],
    unique: bool = False,
) -> None:
    """Build an index only if it hasn't already been defined."""

    cols_sql = ", ".join(_quote(engine, col) for col in cols)
    table_sql = _quote(engine, table)
    if schema:
        table_sql = f"{_quote(engine, schema)}.{table_sql}"
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {_quote(engine, name)} ON {table_sql} ({cols_sql})"))


def run_migrations(engine: Engine) -> None:
    """Create the schema, the ``Devices`` table and its serial-number index."""

    # Registers DeviceRecord with the metadata.
    from ..models import device as _device  # noqa: F401

    schema = _target_schema(engine)
    _ensure_schema(engine, schema)
    Base.metadata.create_all(bind=engine)
    # Databases created before the index existed get it here.
    _create_index_if_not_exists(
        engine,
        schema,
        "Devices",
        "IX_Devices_SerialNumber",
        ["SerialNumber"],
        unique=True,
    )
    logger.info("db.migrated", extra={"extra_data": {"dialect": engine.dialect.name, "schema": schema}})
