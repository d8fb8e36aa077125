"""Tests for the equipment lifecycle rules (no database needed)."""

import os
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from asset_tracker.core.errors import RecordValidationError
from asset_tracker.services.lifecycle import (
    DamagedRecord,
    EWasteRecord,
    InStockRecord,
    InUseRecord,
    RemovedRecord,
    normalize_price,
    parse_lenient_date,
    prepare_create,
    prepare_update,
    resolve_state,
    state_columns,
)


def _stored(**overrides):
    record = {
        "asset_id": "LAP-001",
        "category": "Laptop",
        "status": "Damaged",
        "model": "ThinkPad T14",
        "serial_number": "SN-1",
        "location": "HQ",
        "comment": None,
        "warranty_expiry": None,
        "purchase_price": 900.0,
        "purchase_date": None,
        "assignee_name": None,
        "position": None,
        "employee_email": None,
        "phone_number": None,
        "department": None,
        "damage_description": "Cracked screen",
    }
    record.update(overrides)
    return record


def test_prepare_create_reports_every_missing_field_at_once():
    with pytest.raises(RecordValidationError) as excinfo:
        prepare_create({"model": "Dell U2720Q"})

    assert excinfo.value.errors == [
        "assetId is required",
        "category is required",
        "status is required",
    ]
    assert excinfo.value.message == "assetId is required. category is required. status is required"


def test_prepare_create_rejects_unknown_status():
    with pytest.raises(RecordValidationError) as excinfo:
        prepare_create({"asset_id": "MON-001", "category": "Monitor", "status": "Lost"})

    assert "`Lost` is not a valid status" in excinfo.value.message


def test_prepare_create_clears_damage_description_for_other_statuses():
    data = prepare_create(
        {
            "asset_id": "MON-001",
            "category": "Monitor",
            "status": "In Stock",
            "damage_description": "left over from the form",
        }
    )

    assert data["damage_description"] is None
    assert data["purchase_price"] == 0.0


def test_prepare_create_requires_damage_description_when_damaged():
    payload = {"asset_id": "MOU-001", "category": "Mouse", "status": "Damaged"}

    with pytest.raises(RecordValidationError) as excinfo:
        prepare_create(payload)
    assert excinfo.value.errors == ["damageDescription is required when status is Damaged"]

    relaxed = prepare_create(payload, require_damage_description=False)
    assert relaxed["status"] == "Damaged"
    assert relaxed["damage_description"] is None


def test_prepare_create_keeps_malformed_dates_as_none():
    data = prepare_create(
        {
            "asset_id": "LAP-002",
            "category": "Laptop",
            "status": "In Stock",
            "warranty_expiry": "not-a-date",
            "purchase_date": "2023-06-30",
        }
    )

    assert data["warranty_expiry"] is None
    assert data["purchase_date"] == date(2023, 6, 30)


def test_prepare_create_cleans_strings_and_price():
    data = prepare_create(
        {
            "asset_id": "  KEY-001 ",
            "category": "Keyboard",
            "status": "In Stock",
            "comment": "null",
            "location": "   ",
            "purchase_price": "$1,200.50",
        }
    )

    assert data["asset_id"] == "KEY-001"
    assert data["comment"] is None
    assert data["location"] is None
    assert data["purchase_price"] == pytest.approx(1200.5)


def test_prepare_create_rejects_negative_and_non_numeric_prices():
    with pytest.raises(RecordValidationError) as negative:
        prepare_create({"asset_id": "A-1", "category": "Other", "status": "In Stock", "purchase_price": -5})
    assert negative.value.errors == ["purchasePrice must not be negative"]

    with pytest.raises(RecordValidationError) as garbage:
        prepare_create({"asset_id": "A-1", "category": "Other", "status": "In Stock", "purchase_price": "cheap"})
    assert garbage.value.errors == ["purchasePrice must be a number"]


def test_prepare_create_ignores_unknown_and_protected_keys():
    data = prepare_create(
        {
            "asset_id": "HEA-001",
            "category": "Headset",
            "status": "In Stock",
            "is_deleted": True,
            "created_at": "yesterday",
            "colour": "black",
        }
    )

    assert "is_deleted" not in data
    assert "created_at" not in data
    assert "colour" not in data


@pytest.mark.parametrize("status", ["In Use", "In Stock", "E-Waste", "Removed"])
def test_prepare_update_leaving_damaged_always_clears_description(status):
    changes = prepare_update(
        _stored(),
        {"status": status, "damage_description": "still broken?"},
    )

    assert changes["status"] == status
    assert changes["damage_description"] is None


def test_prepare_update_keeps_description_while_still_damaged():
    changes = prepare_update(_stored(), {"comment": "Waiting for parts"})

    assert changes["status"] == "Damaged"
    assert changes["damage_description"] == "Cracked screen"
    assert changes["comment"] == "Waiting for parts"


def test_prepare_update_rejects_asset_id_change_but_accepts_same_value():
    with pytest.raises(RecordValidationError) as excinfo:
        prepare_update(_stored(status="In Stock"), {"asset_id": "LAP-999"})
    assert excinfo.value.errors == ["assetId cannot be changed"]

    changes = prepare_update(_stored(status="In Stock"), {"asset_id": "LAP-001", "location": "Branch"})
    assert "asset_id" not in changes
    assert changes["location"] == "Branch"


def test_prepare_update_blank_required_field_is_rejected():
    with pytest.raises(RecordValidationError) as excinfo:
        prepare_update(_stored(status="In Stock"), {"category": ""})

    assert excinfo.value.errors == ["category is required"]


def test_prepare_update_unparseable_date_clears_the_field():
    changes = prepare_update(
        _stored(status="In Stock", warranty_expiry=date(2025, 1, 1)),
        {"warranty_expiry": "31/31/2031"},
    )

    assert "warranty_expiry" in changes
    assert changes["warranty_expiry"] is None


def test_resolve_state_builds_typed_records():
    assert isinstance(resolve_state({"status": "In Stock"}), InStockRecord)
    assert isinstance(resolve_state({"status": "E-Waste"}), EWasteRecord)
    assert isinstance(resolve_state({"status": "Removed"}), RemovedRecord)

    damaged = resolve_state({"status": "Damaged", "damage_description": "Dead pixels"})
    assert isinstance(damaged, DamagedRecord)
    assert damaged.damage_description == "Dead pixels"

    in_use = resolve_state(
        {"status": "In Use", "assignee_name": "Sam Lee", "employee_email": "sam@example.com"}
    )
    assert isinstance(in_use, InUseRecord)
    assert in_use.assignment.assignee_name == "Sam Lee"
    assert in_use.assignment.employee_email == "sam@example.com"


def test_state_columns_for_in_use_carry_assignment():
    state = resolve_state(
        {"status": "In Use", "assignee_name": "Sam Lee", "department": "Finance", "damage_description": "x"}
    )

    columns = state_columns(state)
    assert columns["status"] == "In Use"
    assert columns["damage_description"] is None
    assert columns["assignee_name"] == "Sam Lee"
    assert columns["department"] == "Finance"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("2024-01-15T10:30:00.000Z", date(2024, 1, 15)),
        ("01/15/2024", date(2024, 1, 15)),
        ("Jan 15, 2024", date(2024, 1, 15)),
        (date(2024, 1, 15), date(2024, 1, 15)),
        ("", None),
        (None, None),
        ("soon", None),
        (20240115, None),
    ],
)
def test_parse_lenient_date(raw, expected):
    assert parse_lenient_date(raw) == expected


def test_normalize_price():
    assert normalize_price(None) == 0.0
    assert normalize_price("") == 0.0
    assert normalize_price(15) == 15.0
    assert normalize_price("1,000") == 1000.0
    assert normalize_price("abc") is None
    assert normalize_price(True) is None
