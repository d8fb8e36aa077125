import os
import sys
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from asset_tracker.db.session import Base
from asset_tracker.crud.equipment import create_equipment, soft_delete_equipment
from asset_tracker.services.warranty import alert_window, list_expiring_warranties

# Ensure models are registered so metadata tables are created
from asset_tracker.models import equipment as equipment_model  # noqa: F401

TODAY = date(2024, 1, 1)


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


def _item(db, asset_id, warranty, status="In Stock"):
    payload = {"asset_id": asset_id, "category": "Laptop", "status": status, "warranty_expiry": warranty}
    if status == "Damaged":
        payload["damage_description"] = "Broken"
    return create_equipment(db, payload)


def test_alert_window_is_inclusive_lookahead():
    assert alert_window(TODAY, 30) == (date(2024, 1, 1), date(2024, 1, 31))


def test_in_service_record_inside_window_is_listed(db_session):
    item = _item(db_session, "LAP-001", "2024-01-15")

    alerts = list_expiring_warranties(db_session, today=TODAY, lookahead_days=30)

    assert [a.id for a in alerts] == [item.id]


@pytest.mark.parametrize("status", ["Damaged", "E-Waste", "Removed"])
def test_out_of_service_records_are_not_listed(db_session, status):
    _item(db_session, "LAP-001", "2024-01-15", status=status)

    assert list_expiring_warranties(db_session, today=TODAY, lookahead_days=30) == []


def test_window_edges(db_session):
    first_day = _item(db_session, "LAP-001", "2024-01-01")
    last_day = _item(db_session, "LAP-002", "2024-01-31")
    _item(db_session, "LAP-003", "2024-02-01")
    _item(db_session, "LAP-004", "2023-12-31")
    _item(db_session, "LAP-005", "2024-03-01")

    alerts = list_expiring_warranties(db_session, today=TODAY, lookahead_days=30)

    assert [a.id for a in alerts] == [first_day.id, last_day.id]


def test_deleted_and_undated_records_are_skipped(db_session):
    gone = _item(db_session, "LAP-001", "2024-01-10")
    soft_delete_equipment(db_session, gone.id)
    _item(db_session, "LAP-002", None)
    in_use = _item(db_session, "LAP-003", "2024-01-20", status="In Use")

    alerts = list_expiring_warranties(db_session, today=TODAY, lookahead_days=30)

    assert [a.id for a in alerts] == [in_use.id]


def test_results_are_ordered_by_expiry(db_session):
    later = _item(db_session, "LAP-001", "2024-01-25")
    sooner = _item(db_session, "LAP-002", "2024-01-05")

    alerts = list_expiring_warranties(db_session, today=TODAY, lookahead_days=30)

    assert [a.id for a in alerts] == [sooner.id, later.id]
