from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from core.exceptions import NotFoundError
from core.schemas import ApiResponse
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager

from .schemas import TenantSchema, TenantSettingsUpdate
from . import service

tenant_router = APIRouter(prefix="/tenants", tags=["Tenants"])

@tenant_router.get("/me", response_model=ApiResponse[TenantSchema])
def my_tenant(
    db: Session = Depends(get_db),
    user = Depends(get_current_active_user),
    ):
    obj = service.get_tenant(db, user.tenant_id)
    if not obj:
        raise NotFoundError("Tenant not found")
    return {"success": True, "data": obj}

# Update settings of the caller's tenant
@tenant_router.patch("/me", response_model=ApiResponse[TenantSchema])
def my_tenant_patch(
    payload: TenantSettingsUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(require_manager),
    ):
    obj = service.update_tenant_settings(db, tenant_id, payload)
    return {"success": True, "message": "Tenant updated successfully", "data": obj}
