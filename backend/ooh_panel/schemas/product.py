from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

from ..models.product import ContentType
from .schedule import CmsConfig


def normalize_content_type(value):
    if isinstance(value, str):
        value = value.strip().lower()
        if value == "dynamic":
            return ContentType.DIGITAL.value
    return value


ContentTypeField = Annotated[ContentType, BeforeValidator(normalize_content_type)]


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    price: float = Field(0, ge=0)
    site_code: str | None = Field(default=None, max_length=64)
    location: str | None = Field(default=None, max_length=500)
    categories: list[str] = Field(default_factory=list)
    content_type: ContentTypeField = ContentType.STATIC
    position: int = 0
    active: bool = True


class ProductCreate(ProductBase):
    cms: CmsConfig | None = None


class ProductUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    site_code: str | None = None
    location: str | None = None
    categories: list[str] | None = None
    content_type: ContentTypeField | None = None
    position: int | None = None
    active: bool | None = None
    cms: CmsConfig | None = None


class ProductOut(ProductBase):
    id: int
    company_id: int
    seller_id: int | None = None
    seller_name: str | None = None
    cms: CmsConfig | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ProductImportResponse(BaseModel):
    processed: int
    errors: list[str] = []
