from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from core.schemas import ApiResponse
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager, require_member
from .schemas import ItemSchema, ItemCreatePayload, ItemCreate, ItemUpdate
from . import service

item_router = APIRouter(prefix="/items", tags=["Items"])

# List items, optionally in one location
@item_router.get("", response_model=ApiResponse[list[ItemSchema]])
def list_items(
    location_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(require_member),
    ):
    rows = service.get_items(db, tenant_id=tenant_id, location_id=location_id)
    return {"success": True, "count": len(rows), "data": rows}

@item_router.get("/{item_id}", response_model=ApiResponse[ItemSchema])
def item_detail(item_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    obj = service.get_item_for_tenant(db, item_id, tenant_id)
    if not obj:
        raise NotFoundError("Item not found")
    return {"success": True, "data": obj}

@item_router.post("", response_model=ApiResponse[ItemSchema], status_code=status.HTTP_201_CREATED)
def item_post(
    payload: ItemCreatePayload,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    tenant_id: int = Depends(require_manager),
    ):
    internal = ItemCreate(
        tenant_id=tenant_id,
        location_id=payload.location,
        name=payload.name,
        description=payload.description,
        asset_id=payload.asset_id,
        quantity=payload.quantity,
        created_by=user.id,
    )
    obj = service.create_item(db, internal)
    return {"success": True, "message": "Item created successfully", "data": obj}

@item_router.put("/{item_id}", response_model=ApiResponse[ItemSchema])
def item_put(item_id: str, payload: ItemUpdate, db: Session = Depends(get_db), tenant_id: int = Depends(require_manager)):
    obj = service.update_item(db, item_id, tenant_id, payload)
    return {"success": True, "message": "Item updated successfully", "data": obj}

@item_router.delete("/{item_id}", response_model=ApiResponse[None])
def item_delete(item_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_manager)):
    if not service.delete_item(db, item_id, tenant_id):
        raise NotFoundError("Item not found")
    return {"success": True, "message": "Item deleted"}
