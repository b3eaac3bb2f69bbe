from __future__ import annotations
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    # asset id settings
    asset_id_prefix: Mapped[str] = mapped_column(String(20), nullable=False, default="000-")
    auto_increment_asset_id: Mapped[bool] = mapped_column(Boolean, server_default=text("true"), default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # relationships
    users = relationship("User", back_populates="tenant", cascade="all, delete")
    counter = relationship("AssetIdCounter", back_populates="tenant", uselist=False, cascade="all, delete-orphan")


class AssetIdCounter(Base):
    """One row per tenant, bumped inside the transaction that consumes the value."""
    __tablename__ = "asset_id_counters"

    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    next_value: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    tenant = relationship("Tenant", back_populates="counter")
