from fastapi import Depends

from auth.services.auth_service import get_current_active_user
from core.exceptions import ForbiddenError
from user.models import User, UserRole

WRITE_ROLES = frozenset({UserRole.owner, UserRole.admin})


def can_write(user) -> bool:
    return user.role in WRITE_ROLES


def require_member(user: User = Depends(get_current_active_user)) -> int:
    return user.tenant_id


def require_manager(user: User = Depends(get_current_active_user)) -> int:
    if not can_write(user):
        raise ForbiddenError(f"User role {getattr(user.role, 'value', user.role)} is not authorized to access this route")
    return user.tenant_id
