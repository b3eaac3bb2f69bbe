from pydantic import BaseModel, EmailStr, ConfigDict

from user.models import UserRole

class UserSchema(BaseModel):
    id: int
    tenant_id: int
    username: str
    email: EmailStr
    role: UserRole
    model_config = ConfigDict(from_attributes=True)

# internal DTO, users are provisioned by the admin tooling
class UserCreate(BaseModel):
    tenant_id: int
    username: str
    email: EmailStr
    role: UserRole = UserRole.user
