from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..api.deps import get_superuser, get_company, get_company_user
from ..schemas.company import CompanyCreate, CompanyUpdate, CompanyOut, CompanyDeleteRequest, CompanySummaryOut
from ..models.company import Company
from ..models.user import AdminUser
from ..services import company_service

router = APIRouter()


@router.get("/", response_model=list[CompanyOut])
def list_companies(db: Session = Depends(get_db), _: AdminUser = Depends(get_superuser)):
    """List all companies (superuser only)"""
    return db.query(Company).order_by(Company.id.asc()).all()


@router.post("/", response_model=CompanyOut)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db), _: AdminUser = Depends(get_superuser)):
    return company_service.create_company(db, payload)


@router.get("/{company_name}", response_model=CompanyOut)
def get_company_by_name(company: Company = Depends(get_company), _: AdminUser = Depends(get_company_user)):
    return company


@router.get("/{company_name}/summary", response_model=CompanySummaryOut)
def company_summary(
    company: Company = Depends(get_company),
    _: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    return company_service.inventory_summary(db, company.id)


@router.put("/{company_id}", response_model=CompanyOut)
def update_company(
    company_id: int,
    payload: CompanyUpdate,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(get_superuser),
):
    return company_service.update_company(db, company_id, payload)


@router.delete("/{company_id}")
def delete_company(
    company_id: int,
    payload: CompanyDeleteRequest,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_superuser),
):
    """Hard delete a company with its inventory and users (superuser only)."""
    name = company_service.delete_company(db, company_id, payload.confirm_name, current_user)
    return {"deleted": True, "id": company_id, "name": name}
