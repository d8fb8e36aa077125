import csv
import io
import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from asset_tracker.db.session import Base
from asset_tracker.crud.equipment import get_equipment_by_asset_id, list_equipment, summarize_equipment
from asset_tracker.importer import DEFAULT_CATEGORY, import_csv, import_rows, row_to_payload

# Ensure models are registered so metadata tables are created
from asset_tracker.models import equipment as equipment_model  # noqa: F401

CSV_TEXT = """Asset ID,Category,Status,Model,Serial Number,Expiry Date,Employee Email,Damage Description,Purchase Price,isDeleted
LAP-001,Laptop,In Use,Latitude 5420,SN1,2025-06-30,ana@example.com,,"1,200",FALSE
LAP-002,Laptop,Damaged,Latitude 5420,SN2,,,Broken screen,900,FALSE
MON-001,Monitor,In Stock,U2720Q,SN3,not a date,,,300,TRUE
LAP-001,Laptop,In Stock,Duplicate row,SN4,,,,,FALSE
BAD-001,Laptop,Lost,Unknown status,SN5,,,,,FALSE
,Keyboard,,K120,SN6,,,,,
"""


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def test_row_to_payload_defaults_category_and_status():
    payload, deleted = row_to_payload({"Asset ID": " X-1 ", "Model": "Thing", "isDeleted": "true"})

    assert payload == {
        "asset_id": "X-1",
        "model": "Thing",
        "category": DEFAULT_CATEGORY,
        "status": "In Stock",
    }
    assert deleted is True


def test_import_rows_reports_imported_skipped_and_failed(db_session):
    report = import_rows(db_session, csv.DictReader(io.StringIO(CSV_TEXT)))

    assert report.as_dict() == {"imported": 4, "skipped": 1, "failed": 1}

    laptop = get_equipment_by_asset_id(db_session, "LAP-001")
    assert laptop.model == "Latitude 5420"
    assert laptop.purchase_price == pytest.approx(1200.0)
    assert str(laptop.warranty_expiry) == "2025-06-30"

    damaged = get_equipment_by_asset_id(db_session, "LAP-002")
    assert damaged.damage_description == "Broken screen"

    monitor = get_equipment_by_asset_id(db_session, "MON-001")
    assert monitor.is_deleted is True
    assert monitor.warranty_expiry is None

    assert get_equipment_by_asset_id(db_session, "BAD-001") is None
    assert get_equipment_by_asset_id(db_session, "KEY-001").model == "K120"


def test_imported_rows_feed_the_summary(db_session):
    import_rows(db_session, csv.DictReader(io.StringIO(CSV_TEXT)))

    summary = summarize_equipment(db_session)

    assert summary["total_assets"] == 3
    assert summary["in_use"] == 1
    assert summary["damaged"] == 1
    assert summary["removed"] == 2


def test_import_csv_reads_file_with_bom(db_session, tmp_path):
    path = tmp_path / "equipment.csv"
    path.write_text("\ufeffAsset ID,Category,Status\nHEA-001,Headset,In Stock\n", encoding="utf-8")

    report = import_csv(db_session, path)

    assert report.imported == 1
    assert [item.asset_id for item in list_equipment(db_session)] == ["HEA-001"]


def test_main_returns_2_for_unreadable_file(tmp_path, capsys):
    from asset_tracker.importer import main

    assert main([str(tmp_path / "missing.csv")]) == 2
    assert "Cannot read" in capsys.readouterr().err
