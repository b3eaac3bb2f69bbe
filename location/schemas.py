from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NAME_MAX = 50
DESCRIPTION_MAX = 500


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Name is required")
    # length is checked on the trimmed value
    if len(v) > NAME_MAX:
        raise ValueError(f"Name cannot be more than {NAME_MAX} characters")
    return v


class LocationSchema(BaseModel):
    id: str
    tenant_id: int
    name: str
    description: str = ""
    parent_id: Optional[str] = None
    path: str
    level: int
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class LocationWithCount(LocationSchema):
    item_count: int = 0

class LocationTreeNode(LocationWithCount):
    children: list[LocationTreeNode] = []

class LocationDetail(LocationWithCount):
    children: list[LocationSchema] = []

LocationTreeNode.model_rebuild()


# PUBLIC payloads, what clients send
class LocationCreatePayload(BaseModel):
    name: str
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX)
    parent: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

class LocationUpdatePayload(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX)
    parent: Optional[str] = None
    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

class LocationBulkEntry(BaseModel):
    name: str
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX)
    parent: Optional[str] = None
    parent_index: Optional[int] = Field(default=None, ge=0)
    model_config = ConfigDict(extra="forbid")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

class LocationBulkPayload(BaseModel):
    locations: list[LocationBulkEntry] = Field(min_length=1)
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTOs for the service
class LocationCreate(BaseModel):
    tenant_id: int
    name: str
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX)
    parent_id: Optional[str] = None
    created_by: Optional[int] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

class LocationUpdate(BaseModel):
    """Only fields that were explicitly set are applied; parent_id=None moves to root."""
    name: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX)
    parent_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)
