from .company import Company
from .user import AdminUser, UserRole
from .product import Product, ContentType
from .screen_schedule import ScreenSchedule

__all__ = [
    "Company",
    "AdminUser",
    "UserRole",
    "Product",
    "ContentType",
    "ScreenSchedule",
]
