from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth.services.auth_service import get_current_active_user
from authz.deps import require_member
from core.database import get_db
from core.schemas import ApiResponse
from user.models import User
from user.schemas import UserSchema
from user.service import get_users_for_tenant

user_router = APIRouter(
    prefix='/users',
    tags=['Users']
)

# Get all users of the caller's tenant
@user_router.get('', response_model=ApiResponse[list[UserSchema]])
def user_list(db: Session = Depends(get_db), tenant_id: int = Depends(require_member)):
    users = get_users_for_tenant(db, tenant_id)
    return {"success": True, "count": len(users), "data": users}

# Get current user
@user_router.get('/me', response_model=ApiResponse[UserSchema])
def user_me(current_user: User = Depends(get_current_active_user)):
    return {"success": True, "data": current_user}
