from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class TenantSchema(BaseModel):
    id: int
    name: str
    description: str
    asset_id_prefix: str
    auto_increment_asset_id: bool
    model_config = ConfigDict(from_attributes=True)

# internal DTO for service
class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field(default="", max_length=500)
    asset_id_prefix: str = Field(default="000-", max_length=20)
    auto_increment_asset_id: bool = True

# what clients send to PATCH /tenants/me
class TenantSettingsUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    asset_id_prefix: Optional[str] = Field(default=None, max_length=20)
    auto_increment_asset_id: Optional[bool] = None
    model_config = ConfigDict(extra="forbid")
