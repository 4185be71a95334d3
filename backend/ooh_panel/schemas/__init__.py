from .auth import Token, LoginRequest
from .user import AdminUserCreate, AdminUserUpdate, AdminUserOut, AdminProfileOut
from .company import CompanyCreate, CompanyUpdate, CompanyOut, CompanyDeleteRequest, CompanySummaryOut
from .schedule import CmsConfig, LoopValidationRequest, LoopValidationOut, LoopSuggestionOut
from .product import ProductCreate, ProductUpdate, ProductOut, ProductImportResponse
from .screen_schedule import ScreenScheduleCreate, ScreenScheduleOut, TimelineSpotOut, LoopTimelineOut

__all__ = [
    "Token",
    "LoginRequest",
    "AdminUserCreate",
    "AdminUserUpdate",
    "AdminUserOut",
    "AdminProfileOut",
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyOut",
    "CompanyDeleteRequest",
    "CompanySummaryOut",
    "CmsConfig",
    "LoopValidationRequest",
    "LoopValidationOut",
    "LoopSuggestionOut",
    "ProductCreate",
    "ProductUpdate",
    "ProductOut",
    "ProductImportResponse",
    "ScreenScheduleCreate",
    "ScreenScheduleOut",
    "TimelineSpotOut",
    "LoopTimelineOut",
]
