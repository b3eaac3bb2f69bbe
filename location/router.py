from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from core.schemas import ApiResponse
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager, require_member
from .schemas import (
    LocationBulkPayload,
    LocationCreate,
    LocationCreatePayload,
    LocationDetail,
    LocationSchema,
    LocationTreeNode,
    LocationUpdate,
    LocationUpdatePayload,
    LocationWithCount,
)
from . import service

location_router = APIRouter(prefix="/locations", tags=["Locations"])

# List all locations, as a tree unless flat=true
@location_router.get("", response_model=None)
def list_locations(
    flat: bool = Query(default=False),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(require_member),
    ):
    data = service.list_for_tenant(db, tenant_id=tenant_id, flat=flat)
    envelope = ApiResponse[list[LocationWithCount]] if flat else ApiResponse[list[LocationTreeNode]]
    return envelope(count=service.count_locations(db, tenant_id=tenant_id), data=data)

@location_router.get("/count", response_model=ApiResponse[None])
def location_count(db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    return {"success": True, "count": service.count_locations(db, tenant_id=tenant_id)}

# Create several locations at once
@location_router.post("/bulk", response_model=ApiResponse[list[LocationSchema]], status_code=status.HTTP_201_CREATED)
def location_bulk_post(
    payload: LocationBulkPayload,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    tenant_id: int = Depends(require_manager),
    ):
    rows = service.bulk_create_locations(db, tenant_id=tenant_id, entries=payload.locations, created_by=user.id)
    return {"success": True, "count": len(rows), "data": rows}

# Get location by id, with item count and direct children
@location_router.get("/{location_id}", response_model=ApiResponse[LocationDetail])
def location_detail(location_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    return {"success": True, "data": service.get_location_detail(db, location_id, tenant_id)}

@location_router.get("/{location_id}/path", response_model=ApiResponse[list[LocationSchema]])
def location_full_path(location_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    rows = service.get_full_path(db, location_id, tenant_id)
    return {"success": True, "count": len(rows), "data": rows}

@location_router.get("/{location_id}/descendants", response_model=ApiResponse[list[LocationSchema]])
def location_descendants(location_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    rows = service.get_children(db, location_id, tenant_id)
    return {"success": True, "count": len(rows), "data": rows}

# Create location
@location_router.post("", response_model=ApiResponse[LocationWithCount], status_code=status.HTTP_201_CREATED)
def location_post(
    payload: LocationCreatePayload,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    tenant_id: int = Depends(require_manager),
    ):
    internal = LocationCreate(
        tenant_id=tenant_id,
        name=payload.name,
        description=payload.description,
        parent_id=payload.parent or None,
        created_by=user.id,
    )
    obj = service.create_location(db, internal)
    data = LocationWithCount.model_validate(obj)
    return {"success": True, "message": "Location created successfully", "data": data}

# Update location
@location_router.put("/{location_id}", response_model=ApiResponse[LocationWithCount])
def location_put(
    location_id: str,
    payload: LocationUpdatePayload,
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    tenant_id: int = Depends(require_manager),
    ):
    fields = payload.model_dump(exclude_unset=True)
    if "parent" in fields:
        fields["parent_id"] = fields.pop("parent") or None
    patch = LocationUpdate(**fields)

    obj = service.update_location(db, location_id, tenant_id, patch, updated_by=user.id)
    data = LocationWithCount.model_validate(obj).model_copy(
        update={"item_count": service.item_count_at(db, obj.id, tenant_id)}
    )
    return {"success": True, "message": "Location updated successfully", "data": data}

# Delete location
@location_router.delete("/{location_id}", response_model=ApiResponse[None])
def location_delete(location_id: str, db: Session = Depends(get_db), tenant_id: int = Depends(require_manager)):
    obj = service.get_location_for_tenant(db, location_id, tenant_id)
    if not obj:
        raise NotFoundError("Location not found")
    name = obj.name
    service.delete_location(db, location_id, tenant_id)
    return {"success": True, "message": f"Location {name} deleted successfully"}
