"""Pydantic schemas for the equipment API.

Attribute names follow the database columns; on the wire every field uses
camelCase (``assetId``, ``serialNumber``...) as the React frontend expects.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EquipmentBase(CamelModel):
    asset_id: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    comment: Optional[str] = None
    # Older clients still send ``warrantyInfo``.
    warranty_expiry: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("warrantyExpiry", "warrantyInfo", "warranty_expiry"),
    )
    purchase_price: Optional[Union[float, str]] = None
    purchase_date: Optional[str] = None
    assignee_name: Optional[str] = None
    position: Optional[str] = None
    employee_email: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    damage_description: Optional[str] = None


class EquipmentCreate(EquipmentBase):
    pass


class EquipmentUpdate(EquipmentBase):
    pass


class EquipmentOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    asset_id: str
    category: str
    status: str
    model: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = None
    comment: Optional[str] = None
    warranty_expiry: Optional[date] = None
    purchase_price: float = 0.0
    purchase_date: Optional[date] = None
    assignee_name: Optional[str] = None
    position: Optional[str] = None
    employee_email: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    damage_description: Optional[str] = None
    is_deleted: bool = False
    created_at: str
    updated_at: str


class WarrantyAlertOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    asset_id: str
    model: Optional[str] = None
    serial_number: Optional[str] = None
    warranty_expiry: date


class AssigneeGroupOut(CamelModel):
    employee_email: Optional[str] = None
    assignee_name: Optional[str] = None
    position: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None
    assets: list[EquipmentOut] = Field(default_factory=list)
    count: int = 0


class EquipmentSummary(CamelModel):
    total_assets: int
    in_use: int
    in_stock: int
    damaged: int
    e_waste: int
    removed: int


class CategoryCount(CamelModel):
    count: int


class TotalValue(CamelModel):
    total_value: float


class NextAssetId(CamelModel):
    asset_id: str


class MessageOut(CamelModel):
    message: str
