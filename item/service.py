import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from location.service import get_location_for_tenant
from tenant.service import lock_tenant, next_asset_id
from .models import Item
from .schemas import ItemCreate, ItemUpdate

logger = logging.getLogger(__name__)


def _require_location(db: Session, location_id: str, tenant_id: int) -> None:
    if not get_location_for_tenant(db, location_id, tenant_id):
        raise NotFoundError("Location not found")

def get_items(db: Session, *, tenant_id: int, location_id: Optional[str] = None) -> List[Item]:
    stmt = select(Item).where(Item.tenant_id == tenant_id)
    if location_id is not None:
        stmt = stmt.where(Item.location_id == location_id)
    stmt = stmt.order_by(Item.name.asc())
    return list(db.scalars(stmt))

def get_item_for_tenant(db: Session, item_id: str, tenant_id: int) -> Optional[Item]:
    stmt = select(Item).where(Item.id == item_id, Item.tenant_id == tenant_id)
    return db.scalars(stmt).first()

def create_item(db: Session, dto: ItemCreate) -> Item:
    lock_tenant(db, dto.tenant_id)
    _require_location(db, dto.location_id, dto.tenant_id)

    asset_id = (dto.asset_id or "").strip() or next_asset_id(db, dto.tenant_id)
    row = Item(
        tenant_id=dto.tenant_id,
        location_id=dto.location_id,
        name=dto.name.strip(),
        description=dto.description or "",
        asset_id=asset_id,
        quantity=dto.quantity,
        created_by=dto.created_by,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Created item %s (asset %s) in location %s", row.id, row.asset_id, row.location_id)
    return row

def update_item(db: Session, item_id: str, tenant_id: int, patch: ItemUpdate) -> Item:
    lock_tenant(db, tenant_id)
    row = get_item_for_tenant(db, item_id, tenant_id)
    if not row:
        raise NotFoundError("Item not found")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    if "location" in data:
        _require_location(db, data["location"], tenant_id)
        row.location_id = data.pop("location")
    for k, v in data.items():
        setattr(row, k, v)
    db.commit()
    db.refresh(row)
    return row

def delete_item(db: Session, item_id: str, tenant_id: int) -> bool:
    row = get_item_for_tenant(db, item_id, tenant_id)
    if not row:
        return False
    db.delete(row)
    db.commit()
    return True
