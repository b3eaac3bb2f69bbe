from sqlalchemy.orm import Session

from user.models import User
from user.schemas import UserCreate


def get_user(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_users_for_tenant(db: Session, tenant_id: int):
    return db.query(User).filter(User.tenant_id == tenant_id).order_by(User.username.asc()).all()


def create_user(db: Session, user: UserCreate):
    db_user = User(
        tenant_id=user.tenant_id,
        email=str(user.email),
        username=user.username,
        role=user.role,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user
