import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, InternalError, NotFoundError
from .models import AssetIdCounter, Tenant
from .schemas import TenantCreate, TenantSettingsUpdate

logger = logging.getLogger(__name__)

ASSET_ID_WIDTH = 3


def get_tenant(db: Session, tenant_id: int) -> Optional[Tenant]:
    return db.get(Tenant, tenant_id)


def create_tenant(db: Session, dto: TenantCreate) -> Tenant:
    tenant = Tenant(
        name=dto.name.strip(),
        description=dto.description,
        asset_id_prefix=dto.asset_id_prefix,
        auto_increment_asset_id=dto.auto_increment_asset_id,
    )
    db.add(tenant)
    try:
        db.flush()
        db.add(AssetIdCounter(tenant_id=tenant.id, next_value=1))
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Tenant name already exists")
    db.refresh(tenant)
    logger.info("Created tenant %s (%s)", tenant.id, tenant.name)
    return tenant


def update_tenant_settings(db: Session, tenant_id: int, patch: TenantSettingsUpdate) -> Tenant:
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")

    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k, v in data.items():
        setattr(tenant, k, v)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Tenant name already exists")
    db.refresh(tenant)
    return tenant


def lock_tenant(db: Session, tenant_id: int) -> Tenant:
    """
    Take the per-tenant mutation lock for the current transaction.

    Issues a no-op UPDATE on the tenant row, so the write lock is held from
    here until commit/rollback: a row lock on PostgreSQL, the database write
    lock on SQLite. Checks done after this call cannot race another writer
    in the same tenant.
    """
    locked = db.execute(
        update(Tenant)
        .where(Tenant.id == tenant_id)
        .values(id=Tenant.id)
        .execution_options(synchronize_session=False)
    )
    if locked.rowcount == 0:
        raise NotFoundError("Tenant not found")
    return db.get(Tenant, tenant_id)


def format_asset_id(prefix: str, value: int) -> str:
    return f"{prefix}{str(value).zfill(ASSET_ID_WIDTH)}"


def next_asset_id(db: Session, tenant_id: int) -> Optional[str]:
    """
    Reserve the next asset id for a tenant.

    The counter row is bumped with a single UPDATE (which holds the row lock
    until the caller commits), then read back. Returns None when the tenant
    has auto-increment switched off. Does not commit.
    """
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise NotFoundError("Tenant not found")
    if not tenant.auto_increment_asset_id:
        return None

    bumped = db.execute(
        update(AssetIdCounter)
        .where(AssetIdCounter.tenant_id == tenant_id)
        .values(next_value=AssetIdCounter.next_value + 1)
        .execution_options(synchronize_session=False)
    )
    if bumped.rowcount == 0:
        # create_tenant and the initial migration always add the counter row
        logger.error("Tenant %s has no asset id counter", tenant_id)
        raise InternalError("Asset id counter missing")

    stmt = select(AssetIdCounter.next_value).where(AssetIdCounter.tenant_id == tenant_id)
    reserved = db.scalar(stmt) - 1
    return format_asset_id(tenant.asset_id_prefix, reserved)
