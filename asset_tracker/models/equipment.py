"""SQLAlchemy model for tracked equipment."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, Date, Float, Integer, Text

from ..core.statuses import DEFAULT_STATUS
from ..db.session import Base


class Equipment(Base):
    """A single physical asset and its current lifecycle state.

    ``assignee_name`` through ``department`` describe who holds the asset
    while it is In Use; ``damage_description`` is only kept while the asset
    is Damaged. Deleting an asset only sets ``is_deleted``.
    """

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(Text, nullable=False, unique=True, index=True)
    category = Column(Text, nullable=False, index=True)
    status = Column(Text, nullable=False, default=DEFAULT_STATUS)
    model = Column(Text, nullable=True)
    serial_number = Column(Text, nullable=True)
    location = Column(Text, nullable=True)
    comment = Column(Text, nullable=True)
    warranty_expiry = Column(Date, nullable=True)
    purchase_price = Column(Float, nullable=False, default=0.0)
    purchase_date = Column(Date, nullable=True)
    assignee_name = Column(Text, nullable=True)
    position = Column(Text, nullable=True)
    employee_email = Column(Text, nullable=True)
    phone_number = Column(Text, nullable=True)
    department = Column(Text, nullable=True)
    damage_description = Column(Text, nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


__all__ = ["Equipment"]
