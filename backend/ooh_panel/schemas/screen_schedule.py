from datetime import datetime
from pydantic import BaseModel, Field


class ScreenScheduleCreate(BaseModel):
    spot_number: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    media_url: str | None = Field(default=None, max_length=1000)
    duration: int | None = Field(default=None, ge=1)


class ScreenScheduleOut(BaseModel):
    id: int
    product_id: int
    spot_number: int
    title: str
    description: str
    media_url: str | None
    duration: int | None
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TimelineSpotOut(BaseModel):
    id: str
    number: int
    name: str
    offset_seconds: int
    start_time: str
    end_time: str
    duration: int
    status: str
    is_scheduled: bool
    schedule_id: int | None = None
    title: str | None = None


class LoopTimelineOut(BaseModel):
    product_id: int
    timezone: str
    start_time: str
    end_time: str
    start_label: str
    end_label: str
    spot_duration: int
    spots_per_loop: int
    loop_seconds: int
    loops: int | None = None
    valid: bool
    spots: list[TimelineSpotOut]
