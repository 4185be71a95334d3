from pydantic import BaseModel, Field

from ..services.loop_validator import LoopError, MessageStyle


class CmsConfig(BaseModel):
    """Playback window of a digital site, as typed into the inventory forms."""

    start_time: str | None = Field(default=None, examples=["06:00"])
    end_time: str | None = Field(default=None, examples=["22:00"])
    spot_duration: int | str | None = Field(default=None, description="Seconds per spot")
    loops_per_day: int | str | None = Field(default=None, description="Spots per loop")


class LoopValidationRequest(BaseModel):
    content_type: str = "digital"
    cms: CmsConfig = Field(default_factory=CmsConfig)
    style: MessageStyle = MessageStyle.DETAILED


class LoopSuggestionOut(BaseModel):
    field: str
    value: int
    loops: int

    class Config:
        from_attributes = True


class LoopValidationOut(BaseModel):
    valid: bool
    message: str | None = None
    error: LoopError | None = None
    duration_seconds: int | None = None
    time_per_loop: int | None = None
    loops: float | None = None
    suggestions: list[LoopSuggestionOut] = []
