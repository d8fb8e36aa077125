"""Equipment lifecycle rules applied on every write.

Incoming payloads are loose dictionaries: strings need trimming, dates may
arrive in several shapes and the price may be typed with a currency sign.
``prepare_create`` and ``prepare_update`` clean such a payload, validate it
and resolve the status-specific part of the record into one of the typed
states below. The store only ever persists what these functions return.

Two rules deserve a mention:

* Leaving the Damaged status always clears ``damage_description``, whatever
  the caller sent. ``state_columns`` is the single place that decides it.
* Dates are parsed leniently. A value that cannot be read as a date is
  stored as ``None`` and logged, the request itself still succeeds.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ..core.errors import RecordValidationError
from ..core.statuses import STATUS_CHOICES, STATUS_DAMAGED, STATUS_IN_USE, is_valid_status

logger = logging.getLogger("asset_tracker.lifecycle")

REQUIRED_FIELDS = ("asset_id", "category", "status")
ASSIGNMENT_FIELDS = ("assignee_name", "position", "employee_email", "phone_number", "department")
DATE_FIELDS = ("warranty_expiry", "purchase_date")
TEXT_FIELDS = (
    "asset_id",
    "category",
    "status",
    "model",
    "serial_number",
    "location",
    "comment",
    "damage_description",
) + ASSIGNMENT_FIELDS
EDITABLE_FIELDS = frozenset(TEXT_FIELDS + DATE_FIELDS + ("purchase_price",))

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d.%m.%Y", "%Y/%m/%d", "%b %d, %Y", "%d %b %Y")


class Assignment(BaseModel):
    assignee_name: str | None = None
    position: str | None = None
    employee_email: str | None = None
    phone_number: str | None = None
    department: str | None = None


class InStockRecord(BaseModel):
    status: Literal["In Stock"]


class InUseRecord(BaseModel):
    status: Literal["In Use"]
    assignment: Assignment = Field(default_factory=Assignment)


class DamagedRecord(BaseModel):
    status: Literal["Damaged"]
    damage_description: str | None = None


class EWasteRecord(BaseModel):
    status: Literal["E-Waste"]


class RemovedRecord(BaseModel):
    status: Literal["Removed"]


LifecycleState = Annotated[
    Union[InStockRecord, InUseRecord, DamagedRecord, EWasteRecord, RemovedRecord],
    Field(discriminator="status"),
]
_STATE_ADAPTER: TypeAdapter[LifecycleState] = TypeAdapter(LifecycleState)


def resolve_state(fields: Mapping[str, Any]) -> LifecycleState:
    """Build the typed state for a record whose status is already valid."""

    status = fields.get("status")
    state: dict[str, Any] = {"status": status}
    if status == STATUS_IN_USE:
        state["assignment"] = {name: fields.get(name) for name in ASSIGNMENT_FIELDS}
    elif status == STATUS_DAMAGED:
        state["damage_description"] = fields.get("damage_description")
    return _STATE_ADAPTER.validate_python(state)


def state_columns(state: LifecycleState) -> dict[str, Any]:
    """Columns owned by the lifecycle state, ready to be written."""

    columns: dict[str, Any] = {"status": state.status, "damage_description": None}
    if isinstance(state, DamagedRecord):
        columns["damage_description"] = state.damage_description
    elif isinstance(state, InUseRecord):
        columns.update(state.assignment.model_dump())
    return columns


def parse_lenient_date(value: Any, *, field: str = "date") -> date | None:
    """Parse ``value`` into a date, returning ``None`` when it cannot be read."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        logger.warning("lifecycle.invalid_date", extra={"extra_data": {"field": field, "value": repr(value)}})
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    try:
        return datetime.fromisoformat(cleaned.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    logger.warning("lifecycle.invalid_date", extra={"extra_data": {"field": field, "value": cleaned}})
    return None


def normalize_price(value: Any) -> float | None:
    """Convert a user-entered amount into a float, ``None`` if it is not a number."""

    if value is None:
        return 0.0
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.strip().replace("$", "").replace(",", "")
        if not cleaned:
            return 0.0
        try:
            return float(Decimal(cleaned))
        except InvalidOperation:
            return None
    return None


def _label(field: str) -> str:
    return to_camel(field)


def _clean(payload: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    data: dict[str, Any] = {}
    errors: list[str] = []
    for key, value in payload.items():
        if key not in EDITABLE_FIELDS:
            continue
        if key in DATE_FIELDS:
            value = parse_lenient_date(value, field=_label(key))
        elif key == "purchase_price":
            price = normalize_price(value)
            if price is None:
                errors.append(f"{_label(key)} must be a number")
                continue
            value = price
        elif isinstance(value, str):
            value = value.strip()
            if key == "comment" and value == "null":
                value = None
            value = value or None
        elif value is not None:
            errors.append(f"{_label(key)} must be a string")
            continue
        data[key] = value
    return data, errors


def _record_errors(record: Mapping[str, Any], *, require_damage_description: bool) -> list[str]:
    errors: list[str] = []
    for field in REQUIRED_FIELDS:
        if not record.get(field):
            errors.append(f"{_label(field)} is required")
    status = record.get("status")
    if status and not is_valid_status(status):
        errors.append(f"`{status}` is not a valid status; expected one of: {', '.join(STATUS_CHOICES)}")
    price = record.get("purchase_price")
    if price is not None and price < 0:
        errors.append(f"{_label('purchase_price')} must not be negative")
    if require_damage_description and status == STATUS_DAMAGED and not record.get("damage_description"):
        errors.append(f"{_label('damage_description')} is required when status is {STATUS_DAMAGED}")
    return errors


def prepare_create(payload: Mapping[str, Any], *, require_damage_description: bool = True) -> dict[str, Any]:
    """Return the column values for a new record or raise ``RecordValidationError``."""

    data, errors = _clean(payload)
    data.setdefault("purchase_price", 0.0)
    errors.extend(_record_errors(data, require_damage_description=require_damage_description))
    if errors:
        raise RecordValidationError(errors)
    data.update(state_columns(resolve_state(data)))
    return data


def prepare_update(
    current: Mapping[str, Any],
    payload: Mapping[str, Any],
    *,
    require_damage_description: bool = True,
) -> dict[str, Any]:
    """Return the columns to change on an existing record.

    ``current`` holds the stored column values. Fields missing from
    ``payload`` keep their stored value; the status defaults to the stored
    one, so a partial update of a Damaged record keeps its description while
    any other status drops it.
    """

    changes, errors = _clean(payload)
    if "asset_id" in changes and changes["asset_id"] != current.get("asset_id"):
        errors.append(f"{_label('asset_id')} cannot be changed")
    merged = {**current, **changes}
    errors.extend(_record_errors(merged, require_damage_description=require_damage_description))
    if errors:
        raise RecordValidationError(errors)
    changes.pop("asset_id", None)
    changes.update(state_columns(resolve_state(merged)))
    return changes


__all__ = [
    "ASSIGNMENT_FIELDS",
    "Assignment",
    "DATE_FIELDS",
    "DamagedRecord",
    "EDITABLE_FIELDS",
    "EWasteRecord",
    "InStockRecord",
    "InUseRecord",
    "LifecycleState",
    "RemovedRecord",
    "normalize_price",
    "parse_lenient_date",
    "prepare_create",
    "prepare_update",
    "resolve_state",
    "state_columns",
]
