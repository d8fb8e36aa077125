from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..core.statuses import DEFAULT_STATUS
from ..crud.equipment import (
    count_by_category,
    create_equipment,
    get_equipment,
    group_in_use_by_email,
    list_equipment,
    list_removed_equipment,
    restore_equipment,
    soft_delete_equipment,
    summarize_equipment,
    total_purchase_value,
    update_equipment,
)
from ..db.session import get_db
from ..deps.auth import require_admin, require_editor, require_reader
from ..schemas.equipment import (
    AssigneeGroupOut,
    CategoryCount,
    EquipmentCreate,
    EquipmentOut,
    EquipmentSummary,
    EquipmentUpdate,
    MessageOut,
    NextAssetId,
    TotalValue,
    WarrantyAlertOut,
)
from ..services.asset_ids import generate_asset_id
from ..services.warranty import list_expiring_warranties

router = APIRouter(prefix="/api/equipment", tags=["equipment"])


@router.get("", response_model=list[EquipmentOut], dependencies=[Depends(require_reader)])
def api_list(
    status: Optional[str] = None,
    category: Optional[str] = None,
    include_deleted: bool = False,
    db: Session = Depends(get_db),
):
    return list_equipment(db, include_deleted=include_deleted, status=status, category=category)


@router.get("/summary", response_model=EquipmentSummary, dependencies=[Depends(require_reader)])
def api_summary(db: Session = Depends(get_db)):
    return summarize_equipment(db)


@router.get("/total-value", response_model=TotalValue, dependencies=[Depends(require_reader)])
def api_total_value(db: Session = Depends(get_db)):
    return {"total_value": total_purchase_value(db)}


@router.get("/expiring-warranty", response_model=list[WarrantyAlertOut], dependencies=[Depends(require_reader)])
def api_expiring_warranty(db: Session = Depends(get_db)):
    return list_expiring_warranties(db)


@router.get("/grouped-by-email", response_model=list[AssigneeGroupOut], dependencies=[Depends(require_reader)])
def api_grouped_by_email(db: Session = Depends(get_db)):
    groups = group_in_use_by_email(db)
    return [
        AssigneeGroupOut.model_validate(
            {**group, "assets": [EquipmentOut.model_validate(item) for item in group["assets"]]}
        )
        for group in groups
    ]


@router.get("/removed", response_model=list[EquipmentOut], dependencies=[Depends(require_reader)])
def api_removed(db: Session = Depends(get_db)):
    return list_removed_equipment(db)


@router.get("/count/{category}", response_model=CategoryCount, dependencies=[Depends(require_reader)])
def api_count(category: str, db: Session = Depends(get_db)):
    return {"count": count_by_category(db, category)}


@router.get("/next-asset-id/{category}", response_model=NextAssetId, dependencies=[Depends(require_reader)])
def api_next_asset_id(category: str, db: Session = Depends(get_db)):
    return {"asset_id": generate_asset_id(db, category)}


@router.post("", response_model=EquipmentOut, status_code=201, dependencies=[Depends(require_editor)])
def api_create(payload: EquipmentCreate, db: Session = Depends(get_db)):
    data = payload.model_dump(exclude_unset=True)
    if not (data.get("status") or "").strip():
        data["status"] = DEFAULT_STATUS
    if not (data.get("asset_id") or "").strip() and (data.get("category") or "").strip():
        data["asset_id"] = generate_asset_id(db, data["category"])
    return create_equipment(db, data)


@router.get("/{item_id}", response_model=EquipmentOut, dependencies=[Depends(require_reader)])
def api_get(item_id: int, db: Session = Depends(get_db)):
    item = get_equipment(db, item_id)
    if item is None:
        raise NotFoundError("Equipment not found")
    return item


@router.put("/{item_id}", response_model=EquipmentOut, dependencies=[Depends(require_editor)])
def api_update(item_id: int, payload: EquipmentUpdate, db: Session = Depends(get_db)):
    return update_equipment(db, item_id, payload.model_dump(exclude_unset=True))


@router.delete("/{item_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def api_delete(item_id: int, db: Session = Depends(get_db)):
    soft_delete_equipment(db, item_id)
    return {"message": "Equipment marked as deleted successfully"}


@router.post("/{item_id}/restore", response_model=EquipmentOut, dependencies=[Depends(require_admin)])
def api_restore(item_id: int, db: Session = Depends(get_db)):
    return restore_equipment(db, item_id)
