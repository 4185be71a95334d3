import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from ..models.company import Company
from ..models.user import AdminUser
from ..schemas.auth import LoginRequest
from ..schemas.user import AdminUserCreate, AdminUserUpdate
from ..core.security import verify_password, get_password_hash, create_access_token

logger = logging.getLogger(__name__)


def authenticate_user(db: Session, credentials: LoginRequest) -> str:
    user = db.query(AdminUser).filter(AdminUser.username == credentials.username).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not verify_password(credentials.password, user.password_hash):
        logger.warning("Failed login for username=%s", credentials.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return create_access_token(user)


def _ensure_company_exists(db: Session, company_id: int | None) -> None:
    if company_id is not None and not db.get(Company, company_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company not found")


def create_admin_user(db: Session, data: AdminUserCreate) -> AdminUser:
    existing = db.query(AdminUser).filter(AdminUser.username == data.username).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
    if not data.is_superuser and data.company_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Company is required for non-superusers")
    _ensure_company_exists(db, data.company_id)
    user = AdminUser(
        username=data.username,
        password_hash=get_password_hash(data.password),
        is_active=data.is_active,
        is_superuser=data.is_superuser,
        role=data.role,
        company_id=data.company_id,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_admin_user(db: Session, user_id: int, data: AdminUserUpdate) -> AdminUser:
    user = db.query(AdminUser).filter(AdminUser.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if data.username and data.username != user.username:
        taken = db.query(AdminUser).filter(AdminUser.username == data.username, AdminUser.id != user_id).first()
        if taken:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists")
        user.username = data.username
    if data.password:
        user.password_hash = get_password_hash(data.password)
    if data.is_active is not None:
        user.is_active = data.is_active
    if data.role is not None:
        user.role = data.role
    if data.is_superuser is not None:
        user.is_superuser = data.is_superuser
    if "company_id" in data.model_fields_set:
        _ensure_company_exists(db, data.company_id)
        user.company_id = data.company_id
    if data.first_name is not None:
        user.first_name = data.first_name
    if data.last_name is not None:
        user.last_name = data.last_name
    db.commit()
    db.refresh(user)
    return user
