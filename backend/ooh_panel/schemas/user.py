from datetime import datetime
from pydantic import BaseModel, Field
from ..models.user import UserRole


class AdminUserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    is_active: bool = True
    role: UserRole = UserRole.ADMIN
    is_superuser: bool = False
    company_id: int | None = None
    first_name: str | None = None
    last_name: str | None = None


class AdminUserCreate(AdminUserBase):
    password: str = Field(..., min_length=8)


class AdminUserUpdate(BaseModel):
    username: str | None = None
    password: str | None = Field(default=None, min_length=8)
    is_active: bool | None = None
    role: UserRole | None = None
    is_superuser: bool | None = None
    company_id: int | None = None
    first_name: str | None = None
    last_name: str | None = None


class AdminUserOut(BaseModel):
    id: int
    username: str
    is_active: bool
    is_superuser: bool
    role: UserRole
    company_id: int | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime
    updated_at: datetime | None

    class Config:
        from_attributes = True


class AdminProfileOut(AdminUserOut):
    display_name: str | None = None
    company_name: str | None = None
