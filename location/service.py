"""
Location hierarchy stored as a materialized path.

Every location keeps ``path`` (comma-joined ancestor ids ending in its own id)
and ``level`` (0 for roots). Descendants are found with an indexed prefix match
on ``path + ","``, so no recursive queries are needed.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from item.models import Item
from tenant.service import lock_tenant
from .models import PATH_SEPARATOR, Location, new_location_id
from .schemas import LocationBulkEntry, LocationCreate, LocationUpdate

logger = logging.getLogger(__name__)


def build_path(location_id: str, parent: Optional[Location]) -> tuple[str, int]:
    if parent is None:
        return location_id, 0
    return f"{parent.path}{PATH_SEPARATOR}{location_id}", parent.level + 1


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise InternalError()


# ---- queries ----

def get_locations(db: Session, *, tenant_id: int) -> List[Location]:
    stmt = select(Location).where(Location.tenant_id == tenant_id).order_by(Location.name.asc())
    return list(db.scalars(stmt))

def get_location(db: Session, location_id: str) -> Optional[Location]:
    return db.get(Location, location_id)

def get_location_for_tenant(db: Session, location_id: str, tenant_id: int) -> Optional[Location]:
    stmt = select(Location).where(Location.id == location_id, Location.tenant_id == tenant_id)
    return db.scalars(stmt).first()

def _require_location(db: Session, location_id: str, tenant_id: int) -> Location:
    loc = get_location_for_tenant(db, location_id, tenant_id)
    if not loc:
        raise NotFoundError("Location not found")
    return loc

def _require_parent(db: Session, parent_id: str, tenant_id: int) -> Location:
    parent = get_location_for_tenant(db, parent_id, tenant_id)
    if not parent:
        raise NotFoundError("Parent location not found")
    return parent

def count_locations(db: Session, *, tenant_id: int) -> int:
    stmt = select(func.count()).select_from(Location).where(Location.tenant_id == tenant_id)
    return db.scalar(stmt) or 0

def _descendants_of(db: Session, loc: Location) -> List[Location]:
    prefix = f"{loc.path}{PATH_SEPARATOR}"
    stmt = (
        select(Location)
        .where(Location.tenant_id == loc.tenant_id, Location.path.startswith(prefix, autoescape=True))
        .order_by(Location.level.asc(), Location.name.asc())
    )
    return list(db.scalars(stmt))

def get_children(db: Session, location_id: str, tenant_id: int) -> List[Location]:
    """All descendants (not only direct children) of a location."""
    return _descendants_of(db, _require_location(db, location_id, tenant_id))

def get_direct_children(db: Session, location_id: str, tenant_id: int) -> List[Location]:
    stmt = (
        select(Location)
        .where(Location.tenant_id == tenant_id, Location.parent_id == location_id)
        .order_by(Location.name.asc())
    )
    return list(db.scalars(stmt))

def get_full_path(db: Session, location_id: str, tenant_id: int) -> List[Location]:
    """Ancestor chain from the root down to the location itself."""
    loc = _require_location(db, location_id, tenant_id)
    stmt = select(Location).where(Location.tenant_id == tenant_id, Location.id.in_(loc.path_ids))
    return sorted(db.scalars(stmt), key=lambda l: l.level)

def item_counts(db: Session, *, tenant_id: int) -> Dict[str, int]:
    stmt = (
        select(Item.location_id, func.count(Item.id))
        .where(Item.tenant_id == tenant_id)
        .group_by(Item.location_id)
    )
    return {location_id: n for location_id, n in db.execute(stmt)}

def item_count_at(db: Session, location_id: str, tenant_id: int) -> int:
    stmt = select(func.count(Item.id)).where(Item.tenant_id == tenant_id, Item.location_id == location_id)
    return db.scalar(stmt) or 0

def _as_dict(loc: Location, item_count: int) -> dict:
    return {
        "id": loc.id,
        "tenant_id": loc.tenant_id,
        "name": loc.name,
        "description": loc.description,
        "parent_id": loc.parent_id,
        "path": loc.path,
        "level": loc.level,
        "created_by": loc.created_by,
        "updated_by": loc.updated_by,
        "created_at": loc.created_at,
        "updated_at": loc.updated_at,
        "item_count": item_count,
    }

def build_tree(nodes: List[dict]) -> List[dict]:
    """
    Group flat location dicts by parent and return the roots.

    Input order is kept inside each children list. A node whose parent is
    not in the list is returned as a root.
    """
    by_id = {}
    for node in nodes:
        node["children"] = []
        by_id[node["id"]] = node

    roots = []
    for node in nodes:
        parent = by_id.get(node["parent_id"]) if node["parent_id"] else None
        if parent is not None:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots

def list_for_tenant(db: Session, *, tenant_id: int, flat: bool = False) -> List[dict]:
    counts = item_counts(db, tenant_id=tenant_id)
    nodes = [_as_dict(loc, counts.get(loc.id, 0)) for loc in get_locations(db, tenant_id=tenant_id)]
    if flat:
        return nodes
    return build_tree(nodes)

def get_location_detail(db: Session, location_id: str, tenant_id: int) -> dict:
    loc = _require_location(db, location_id, tenant_id)
    detail = _as_dict(loc, item_count_at(db, loc.id, tenant_id))
    detail["children"] = get_direct_children(db, loc.id, tenant_id)
    return detail


# ---- mutations ----

def _new_location(db: Session, dto: LocationCreate, parent: Optional[Location]) -> Location:
    loc_id = new_location_id()
    path, level = build_path(loc_id, parent)
    loc = Location(
        id=loc_id,
        tenant_id=dto.tenant_id,
        name=dto.name,
        description=dto.description or "",
        parent_id=parent.id if parent else None,
        path=path,
        level=level,
        created_by=dto.created_by,
    )
    db.add(loc)
    return loc

def create_location(db: Session, dto: LocationCreate) -> Location:
    lock_tenant(db, dto.tenant_id)
    parent = _require_parent(db, dto.parent_id, dto.tenant_id) if dto.parent_id else None

    loc = _new_location(db, dto, parent)
    _commit(db, "create location")
    db.refresh(loc)
    logger.info("Created location %s (level %s) for tenant %s", loc.id, loc.level, loc.tenant_id)
    return loc

def bulk_create_locations(
    db: Session, *, tenant_id: int, entries: List[LocationBulkEntry], created_by: Optional[int] = None,
    ) -> List[Location]:
    """
    Create several locations in one transaction.

    ``parent_index`` points at an earlier entry of the same batch; ``parent``
    names an existing location. Any failure leaves nothing behind.
    """
    lock_tenant(db, tenant_id)
    created: List[Location] = []
    try:
        for i, entry in enumerate(entries):
            if entry.parent and entry.parent_index is not None:
                raise ValidationError(f"Entry {i}: use either parent or parent_index, not both")
            if entry.parent_index is not None:
                if entry.parent_index >= i:
                    raise ValidationError(f"Entry {i}: parent_index must refer to an earlier entry")
                parent = created[entry.parent_index]
            elif entry.parent:
                parent = _require_parent(db, entry.parent, tenant_id)
            else:
                parent = None

            dto = LocationCreate(
                tenant_id=tenant_id,
                name=entry.name,
                description=entry.description,
                created_by=created_by,
            )
            created.append(_new_location(db, dto, parent))
            db.flush()
    except (ValidationError, NotFoundError):
        db.rollback()
        raise

    _commit(db, "bulk create locations")
    for loc in created:
        db.refresh(loc)
    logger.info("Bulk created %d locations for tenant %s", len(created), tenant_id)
    return created

def _reparent(db: Session, loc: Location, parent_id: Optional[str]) -> None:
    if parent_id == loc.id:
        raise ValidationError("Location cannot be its own parent")

    descendants = _descendants_of(db, loc)
    if parent_id is not None and any(d.id == parent_id for d in descendants):
        raise ValidationError("Cannot set a child location as parent")

    parent = _require_parent(db, parent_id, loc.tenant_id) if parent_id else None

    old_path, old_level = loc.path, loc.level
    loc.parent_id = parent.id if parent else None
    loc.path, loc.level = build_path(loc.id, parent)

    # cascade to the whole subtree in the same transaction
    shift = loc.level - old_level
    for d in descendants:
        d.path = loc.path + d.path[len(old_path):]
        d.level = d.level + shift

    if descendants:
        logger.info("Re-parented location %s, rewrote %d descendants", loc.id, len(descendants))

def update_location(
    db: Session, location_id: str, tenant_id: int, patch: LocationUpdate, *, updated_by: Optional[int] = None,
    ) -> Location:
    lock_tenant(db, tenant_id)
    loc = _require_location(db, location_id, tenant_id)

    data = patch.model_dump(exclude_unset=True)
    try:
        if "parent_id" in data and data["parent_id"] != loc.parent_id:
            _reparent(db, loc, data["parent_id"])
    except (ValidationError, NotFoundError):
        db.rollback()
        raise

    if data.get("name") is not None:
        loc.name = data["name"]
    if "description" in data:
        loc.description = data["description"] or ""
    if updated_by is not None:
        loc.updated_by = updated_by

    _commit(db, "update location")
    db.refresh(loc)
    return loc

def delete_location(db: Session, location_id: str, tenant_id: int) -> None:
    lock_tenant(db, tenant_id)
    loc = _require_location(db, location_id, tenant_id)

    n_items = item_count_at(db, loc.id, tenant_id)
    if n_items > 0:
        logger.warning("Refused to delete location %s: %d items", loc.id, n_items)
        raise ConflictError(f"Cannot delete location. It contains {n_items} items.")

    n_children = len(get_direct_children(db, loc.id, tenant_id))
    if n_children > 0:
        logger.warning("Refused to delete location %s: %d children", loc.id, n_children)
        raise ConflictError(f"Cannot delete location. It has {n_children} child locations.")

    db.delete(loc)
    _commit(db, "delete location")
    logger.info("Deleted location %s for tenant %s", location_id, tenant_id)
