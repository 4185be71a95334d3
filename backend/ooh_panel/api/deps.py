from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import get_current_active_user
from ..models.company import Company
from ..models.user import AdminUser, UserRole


def get_active_admin(current_user: AdminUser = Depends(get_current_active_user)) -> AdminUser:
    return current_user


def get_superuser(current_user: AdminUser = Depends(get_current_active_user)) -> AdminUser:
    if not current_user.is_superuser:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superuser access required")
    return current_user


def get_company(company_name: str, db: Session = Depends(get_db)) -> Company:
    company = db.query(Company).filter(Company.name == company_name).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    if not company.is_active:
        raise HTTPException(status_code=403, detail="Company is inactive")
    return company


def get_company_user(
    current_user: AdminUser = Depends(get_current_active_user),
    company: Company = Depends(get_company),
) -> AdminUser:
    if not current_user.is_superuser and current_user.company_id != company.id:
        raise HTTPException(status_code=403, detail="Access denied to this company")
    return current_user


def get_company_admin(current_user: AdminUser = Depends(get_company_user)) -> AdminUser:
    if not current_user.is_superuser and current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin role required")
    return current_user
