"""Equipment store: persistence and queries for :class:`Equipment` rows."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import DuplicateKeyError, NotFoundError
from ..core.statuses import (
    OUT_OF_SERVICE_STATUSES,
    STATUS_DAMAGED,
    STATUS_E_WASTE,
    STATUS_IN_STOCK,
    STATUS_IN_USE,
)
from ..models.equipment import Equipment
from ..services.lifecycle import EDITABLE_FIELDS, prepare_create, prepare_update

logger = logging.getLogger("asset_tracker.equipment")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _columns(item: Equipment) -> dict[str, Any]:
    return {name: getattr(item, name) for name in EDITABLE_FIELDS}


def _not_deleted():
    return Equipment.is_deleted.is_(False)


def _removed_bucket():
    return or_(Equipment.status.in_(sorted(OUT_OF_SERVICE_STATUSES)), Equipment.is_deleted.is_(True))


def _commit_or_duplicate(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateKeyError() from exc


def list_equipment(
    db: Session,
    *,
    include_deleted: bool = False,
    status: str | None = None,
    category: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Equipment]:
    """Return records newest first; soft-deleted rows only when asked for."""

    stmt = select(Equipment)
    if not include_deleted:
        stmt = stmt.where(_not_deleted())
    if status:
        stmt = stmt.where(Equipment.status == status)
    if category:
        stmt = stmt.where(Equipment.category == category)
    stmt = stmt.order_by(desc(Equipment.created_at), desc(Equipment.id)).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def list_removed_equipment(db: Session) -> list[Equipment]:
    """Records that left service: E-Waste, Damaged, Removed or soft-deleted."""

    stmt = select(Equipment).where(_removed_bucket()).order_by(desc(Equipment.updated_at), desc(Equipment.id))
    return db.execute(stmt).scalars().all()


def get_equipment(db: Session, item_id: int) -> Equipment | None:
    """Fetch a record by primary key, soft-deleted or not."""

    return db.get(Equipment, item_id)


def get_equipment_by_asset_id(db: Session, asset_id: str) -> Equipment | None:
    stmt = select(Equipment).where(Equipment.asset_id == asset_id)
    return db.execute(stmt).scalars().first()


def asset_id_exists(db: Session, asset_id: str) -> bool:
    return get_equipment_by_asset_id(db, asset_id) is not None


def _require_equipment(db: Session, item_id: int) -> Equipment:
    item = get_equipment(db, item_id)
    if item is None:
        raise NotFoundError("Equipment not found")
    return item


def count_by_category(db: Session, category: str) -> int:
    stmt = select(func.count(Equipment.id)).where(Equipment.category == category, _not_deleted())
    return int(db.execute(stmt).scalar_one())


def create_equipment(db: Session, payload: dict) -> Equipment:
    """Validate and insert a new record.

    Raises ``RecordValidationError`` for missing or invalid fields and
    ``DuplicateKeyError`` when ``asset_id`` is already taken, including by a
    soft-deleted record.
    """

    data = prepare_create(payload, require_damage_description=settings.REQUIRE_DAMAGE_DESCRIPTION)
    now = _utcnow()
    item = Equipment(**data, is_deleted=False, created_at=now, updated_at=now)
    db.add(item)
    _commit_or_duplicate(db)
    db.refresh(item)
    logger.info(
        "equipment.created",
        extra={"extra_data": {"id": item.id, "asset_id": item.asset_id, "status": item.status}},
    )
    return item


def update_equipment(db: Session, item_id: int, payload: dict) -> Equipment:
    """Apply a partial update after running it through the lifecycle rules."""

    item = _require_equipment(db, item_id)
    previous_status = item.status
    changes = prepare_update(
        _columns(item),
        payload,
        require_damage_description=settings.REQUIRE_DAMAGE_DESCRIPTION,
    )
    for key, value in changes.items():
        setattr(item, key, value)
    item.updated_at = _utcnow()
    _commit_or_duplicate(db)
    db.refresh(item)
    if previous_status != item.status:
        logger.info(
            "equipment.status_changed",
            extra={"extra_data": {"id": item.id, "from": previous_status, "to": item.status}},
        )
    return item


def soft_delete_equipment(db: Session, item_id: int) -> Equipment:
    """Flag a record as deleted. Deleting an already deleted record is a no-op."""

    item = _require_equipment(db, item_id)
    if item.is_deleted:
        return item
    item.is_deleted = True
    item.updated_at = _utcnow()
    db.commit()
    db.refresh(item)
    logger.info("equipment.deleted", extra={"extra_data": {"id": item.id, "asset_id": item.asset_id}})
    return item


def restore_equipment(db: Session, item_id: int) -> Equipment:
    item = _require_equipment(db, item_id)
    if not item.is_deleted:
        return item
    item.is_deleted = False
    item.updated_at = _utcnow()
    db.commit()
    db.refresh(item)
    logger.info("equipment.restored", extra={"extra_data": {"id": item.id, "asset_id": item.asset_id}})
    return item


def summarize_equipment(db: Session) -> dict[str, int]:
    """Dashboard counters.

    Status buckets only see live records. ``removed`` is the union of the
    out-of-service statuses and soft-deleted rows, so a Damaged or E-Waste
    record is counted both in its own bucket and in ``removed``.
    """

    status_counts = dict(
        db.execute(
            select(Equipment.status, func.count(Equipment.id)).where(_not_deleted()).group_by(Equipment.status)
        ).all()
    )
    removed = db.execute(select(func.count(Equipment.id)).where(_removed_bucket())).scalar_one()
    return {
        "total_assets": sum(status_counts.values()),
        "in_use": status_counts.get(STATUS_IN_USE, 0),
        "in_stock": status_counts.get(STATUS_IN_STOCK, 0),
        "damaged": status_counts.get(STATUS_DAMAGED, 0),
        "e_waste": status_counts.get(STATUS_E_WASTE, 0),
        "removed": int(removed),
    }


def total_purchase_value(db: Session) -> float:
    stmt = select(func.coalesce(func.sum(Equipment.purchase_price), 0.0)).where(_not_deleted())
    return float(db.execute(stmt).scalar_one())


def group_in_use_by_email(db: Session) -> list[dict[str, Any]]:
    """Bucket live In Use records by ``employee_email``.

    Holder details come from the first record seen for each email. Records
    without an email share one ``None`` bucket that sorts first.
    """

    items = db.execute(
        select(Equipment)
        .where(Equipment.status == STATUS_IN_USE, _not_deleted())
        .order_by(Equipment.created_at, Equipment.id)
    ).scalars().all()

    groups: dict[str | None, dict[str, Any]] = {}
    for item in items:
        group = groups.get(item.employee_email)
        if group is None:
            group = {
                "employee_email": item.employee_email,
                "assignee_name": item.assignee_name,
                "position": item.position,
                "phone_number": item.phone_number,
                "department": item.department,
                "assets": [],
                "count": 0,
            }
            groups[item.employee_email] = group
        group["assets"].append(item)
        group["count"] += 1
    return sorted(groups.values(), key=lambda g: (g["employee_email"] is not None, g["employee_email"] or ""))
