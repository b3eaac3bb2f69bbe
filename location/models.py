from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func
from core.database import Base

PATH_SEPARATOR = ","


def new_location_id() -> str:
    return uuid.uuid4().hex


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_location_id)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    # tree fields
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey("locations.id", ondelete="RESTRICT"), index=True, nullable=True)
    path: Mapped[str] = mapped_column(Text, index=True, nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # audit trail
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    @property
    def path_ids(self) -> list[str]:
        return self.path.split(PATH_SEPARATOR)
