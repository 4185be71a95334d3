from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import get_current_active_user
from ..models.user import AdminUser
from ..schemas.auth import LoginRequest, Token
from ..schemas.user import AdminProfileOut
from ..services import auth_service

router = APIRouter()


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange credentials for a bearer token bound to the user's company."""
    return Token(access_token=auth_service.authenticate_user(db, payload))


@router.get("/me", response_model=AdminProfileOut)
def get_me(current_user: AdminUser = Depends(get_current_active_user)):
    profile = AdminProfileOut.model_validate(current_user)
    profile.company_name = current_user.company.name if current_user.company else None
    return profile
