from datetime import datetime
from enum import Enum
from sqlalchemy import String, Boolean, Integer, Float, DateTime, ForeignKey, JSON, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.db import Base


class ContentType(str, Enum):
    STATIC = "static"
    DIGITAL = "digital"


class Product(Base):
    """A billboard site in a company's inventory."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("companies.id"), index=True, nullable=False)
    seller_id: Mapped[int | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    seller_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    price: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    site_code: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    categories: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    content_type: Mapped[str] = mapped_column(String(16), default=ContentType.STATIC.value, nullable=False)

    # digital playback window; loops_per_day holds the spots-per-loop count
    start_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(8), nullable=True)
    spot_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    loops_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)

    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    company = relationship("Company")
    seller = relationship("AdminUser")

    @property
    def is_digital(self) -> bool:
        return self.content_type == ContentType.DIGITAL.value

    @property
    def cms(self) -> dict | None:
        if not self.is_digital:
            return None
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "spot_duration": self.spot_duration,
            "loops_per_day": self.loops_per_day,
        }
