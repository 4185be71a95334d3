from fastapi import APIRouter, Depends, UploadFile, File, Query
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..api.deps import get_company, get_company_user, get_company_admin
from ..models.company import Company
from ..models.product import ContentType
from ..models.user import AdminUser
from ..schemas.product import ProductCreate, ProductUpdate, ProductOut, ProductImportResponse
from ..services import product_service

router = APIRouter()


@router.get("/{company_name}/products", response_model=list[ProductOut])
def list_products(
    content_type: ContentType | None = Query(default=None),
    search: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    return product_service.list_products(
        db, company.id, search=search, content_type=content_type, skip=skip, limit=limit
    )


@router.post("/{company_name}/products", response_model=ProductOut)
def create_product(
    payload: ProductCreate,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    """Create a site; digital sites must hold a whole number of loops."""
    return product_service.create_product(db, company.id, payload, seller=user)


@router.post("/{company_name}/products/upload", response_model=ProductImportResponse)
def upload_products(
    file: UploadFile = File(...),
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_admin),
    db: Session = Depends(get_db),
):
    content = file.file.read()
    file.file.close()
    rows = product_service.read_upload_rows(file.filename, content)
    result = product_service.import_products(db, company.id, rows, seller=user)
    return ProductImportResponse(**result)


@router.get("/{company_name}/products/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    return product_service.get_product(db, company.id, product_id)


@router.put("/{company_name}/products/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    return product_service.update_product(db, company.id, product_id, payload)


@router.delete("/{company_name}/products/{product_id}")
def delete_product(
    product_id: int,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_admin),
    db: Session = Depends(get_db),
):
    """Soft delete (admin only)"""
    product_service.soft_delete_product(db, company.id, product_id)
    return {"deleted": True, "id": product_id}
