"""Warranty expiry alerts, recomputed from the store on every call."""

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.statuses import OUT_OF_SERVICE_STATUSES
from ..models.equipment import Equipment


def alert_window(today: date, lookahead_days: int) -> tuple[date, date]:
    return today, today + timedelta(days=lookahead_days)


def list_expiring_warranties(
    db: Session,
    *,
    today: date | None = None,
    lookahead_days: int | None = None,
) -> list[Equipment]:
    """Live, in-service records whose warranty ends within the window.

    Both ends of ``[today, today + lookahead_days]`` are inclusive. Records
    without a warranty date never match.
    """

    days = settings.WARRANTY_LOOKAHEAD_DAYS if lookahead_days is None else lookahead_days
    start, end = alert_window(today or date.today(), days)
    stmt = (
        select(Equipment)
        .where(
            Equipment.is_deleted.is_(False),
            Equipment.status.not_in(sorted(OUT_OF_SERVICE_STATUSES)),
            Equipment.warranty_expiry.is_not(None),
            Equipment.warranty_expiry >= start,
            Equipment.warranty_expiry <= end,
        )
        .order_by(Equipment.warranty_expiry, Equipment.id)
    )
    return db.execute(stmt).scalars().all()
