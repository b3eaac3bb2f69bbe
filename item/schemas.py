from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class ItemSchema(BaseModel):
    id: str
    tenant_id: int
    location_id: str
    name: str
    description: str = ""
    asset_id: Optional[str] = None
    quantity: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

# PUBLIC payload, what clients send
class ItemCreatePayload(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    location: str
    description: Optional[str] = Field(default=None, max_length=1000)
    asset_id: Optional[str] = Field(default=None, max_length=64)
    quantity: int = Field(default=1, ge=0)
    model_config = ConfigDict(extra="forbid")

# INTERNAL DTO for the service
class ItemCreate(BaseModel):
    tenant_id: int
    location_id: str
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    asset_id: Optional[str] = None
    quantity: int = Field(default=1, ge=0)
    created_by: Optional[int] = None

class ItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    model_config = ConfigDict(extra="forbid")
