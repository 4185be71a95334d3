import logging

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.company import Company
from ..models.product import Product, ContentType
from ..models.screen_schedule import ScreenSchedule
from ..models.user import AdminUser
from ..schemas.company import CompanyCreate, CompanyUpdate

logger = logging.getLogger(__name__)


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Company.id).filter(Company.name == name)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    return query.first() is not None


def get_company_or_404(db: Session, company_id: int) -> Company:
    company = db.get(Company, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def create_company(db: Session, data: CompanyCreate) -> Company:
    if _name_taken(db, data.name):
        raise HTTPException(status_code=400, detail="Company name already exists")
    company = Company(**data.model_dump())
    db.add(company)
    db.commit()
    db.refresh(company)
    logger.info("Created company %s", company.name)
    return company


def update_company(db: Session, company_id: int, data: CompanyUpdate) -> Company:
    company = get_company_or_404(db, company_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes and changes["name"] != company.name and _name_taken(db, changes["name"], company_id):
        raise HTTPException(status_code=400, detail="Company name already exists")
    for field, value in changes.items():
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    return company


def inventory_summary(db: Session, company_id: int) -> dict:
    """Live (not deleted) site counts per content type."""
    rows = (
        db.query(Product.content_type, func.count(Product.id))
        .filter(Product.company_id == company_id, Product.deleted.is_(False))
        .group_by(Product.content_type)
        .all()
    )
    counts = {kind.value: 0 for kind in ContentType}
    counts.update({kind: total for kind, total in rows})
    return {"company_id": company_id, "total": sum(counts.values()), **counts}


def delete_company(db: Session, company_id: int, confirm_name: str, current_user: AdminUser) -> str:
    company = get_company_or_404(db, company_id)
    if confirm_name != company.name:
        raise HTTPException(status_code=400, detail="Company name confirmation does not match")

    if current_user.company_id == company_id:
        current_user.company_id = None

    # spot bookings reference products
    db.query(ScreenSchedule).filter(ScreenSchedule.company_id == company_id).delete(synchronize_session=False)
    db.query(Product).filter(Product.company_id == company_id).delete(synchronize_session=False)

    members = db.query(AdminUser).filter(AdminUser.company_id == company_id)
    members.filter(AdminUser.is_superuser.is_(True)).update({AdminUser.company_id: None}, synchronize_session=False)
    members.filter(AdminUser.is_superuser.is_(False)).delete(synchronize_session=False)

    name = company.name
    db.delete(company)
    db.commit()
    logger.info("Deleted company id=%s name=%s with its inventory", company_id, name)
    return name
