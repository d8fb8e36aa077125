"""Additive, idempotent schema upgrades for SQLite databases.

``Base.metadata.create_all`` builds fresh databases; these helpers bring
databases created by older releases up to the current column set without
dropping data.
"""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger("asset_tracker.migrate")

EQUIPMENT_COLUMNS: dict[str, str] = {
    "warranty_expiry": "DATE",
    "purchase_date": "DATE",
    "purchase_price": "FLOAT DEFAULT 0 NOT NULL",
    "damage_description": "TEXT",
    "is_deleted": "BOOLEAN DEFAULT 0 NOT NULL",
    "updated_at": "TEXT",
}


def _column_names(engine: Engine, table: str) -> set[str]:
    with engine.connect() as conn:
        rows = conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()
    return {row["name"] for row in rows}


def _add_column_sqlite(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))


def run_migrations(engine: Engine) -> None:
    if engine.dialect.name != "sqlite":
        return

    existing = _column_names(engine, "equipment")
    if not existing:
        # Fresh database: create_all already produced the current schema.
        return

    for name, dtype in EQUIPMENT_COLUMNS.items():
        if name not in existing:
            _add_column_sqlite(engine, "equipment", f"{name} {dtype}")
            logger.info("migrate.column_added", extra={"extra_data": {"table": "equipment", "column": name}})

    # Rows written before updated_at existed inherit their creation time.
    with engine.begin() as conn:
        conn.execute(text("UPDATE equipment SET updated_at = created_at WHERE updated_at IS NULL"))

    _create_index_if_not_exists(engine, "equipment", "ix_equipment_asset_id", ["asset_id"], unique=True)
    _create_index_if_not_exists(engine, "equipment", "ix_equipment_category", ["category"])
    if _column_names(engine, "users"):
        _create_index_if_not_exists(engine, "users", "ix_users_email", ["email"], unique=True)
