from pydantic import BaseModel, Field
from datetime import datetime

COMPANY_NAME_PATTERN = r"^[a-z0-9][a-z0-9_-]*$"


class CompanyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=64, pattern=COMPANY_NAME_PATTERN, description="URL slug")
    display_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True
    settings: dict = Field(default_factory=dict)


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=64, pattern=COMPANY_NAME_PATTERN)
    display_name: str | None = None
    is_active: bool | None = None
    settings: dict | None = None


class CompanyDeleteRequest(BaseModel):
    confirm_name: str = Field(..., min_length=1, max_length=64)


class CompanyOut(CompanyBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CompanySummaryOut(BaseModel):
    company_id: int
    total: int
    static: int
    digital: int
