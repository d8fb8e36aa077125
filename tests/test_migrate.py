import os
import sys
from pathlib import Path

from sqlalchemy import create_engine, text

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from asset_tracker.db.migrate import run_migrations


def test_run_migrations_upgrades_legacy_table(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE equipment ("
                "id INTEGER PRIMARY KEY, asset_id TEXT NOT NULL, category TEXT NOT NULL, "
                "status TEXT NOT NULL, model TEXT, created_at TEXT NOT NULL)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO equipment (asset_id, category, status, created_at) "
                "VALUES ('LAP-001', 'Laptop', 'In Stock', '2023-01-01T00:00:00Z')"
            )
        )

    run_migrations(engine)
    # Second run is a no-op
    run_migrations(engine)

    with engine.connect() as conn:
        columns = {row["name"] for row in conn.execute(text("PRAGMA table_info(equipment)")).mappings()}
        row = conn.execute(text("SELECT is_deleted, purchase_price, updated_at FROM equipment")).one()
        indexes = {row["name"] for row in conn.execute(text("PRAGMA index_list(equipment)")).mappings()}

    assert {"warranty_expiry", "damage_description", "is_deleted", "updated_at"} <= columns
    assert tuple(row) == (0, 0, "2023-01-01T00:00:00Z")
    assert "ix_equipment_asset_id" in indexes


def test_run_migrations_skips_missing_table(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")

    run_migrations(engine)

    with engine.connect() as conn:
        tables = conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'")).all()
    assert tables == []
