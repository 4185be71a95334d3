from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models.product import Product
from ..models.screen_schedule import ScreenSchedule
from ..schemas.screen_schedule import ScreenScheduleCreate
from .loop_validator import (
    MINUTES_PER_DAY,
    LoopCheck,
    LoopError,
    ScheduleConfig,
    check_loop_schedule,
    parse_clock,
    render_message,
)

settings = get_settings()


def to_12_hour(clock: str) -> str:
    minutes = parse_clock(clock) % MINUTES_PER_DAY
    hours, minute = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = 12 if hours == 0 else hours - 12 if hours > 12 else hours
    return f"{display_hours}:{minute:02d} {period}"


def _clock_at(start_minutes: int, offset_seconds: int) -> str:
    total = (start_minutes * 60 + offset_seconds) % (MINUTES_PER_DAY * 60)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _playable_check(product: Product) -> LoopCheck:
    if not product.is_digital:
        raise HTTPException(status_code=400, detail="Only digital sites have a loop schedule")
    check = check_loop_schedule(ScheduleConfig.from_mapping(product.cms))
    if check.error in (LoopError.MISSING_FIELDS, LoopError.INVALID_TIME, LoopError.NON_POSITIVE):
        raise HTTPException(status_code=400, detail=render_message(check))
    return check


def list_screen_schedules(db: Session, product: Product) -> list[ScreenSchedule]:
    return (
        db.query(ScreenSchedule)
        .filter(ScreenSchedule.product_id == product.id, ScreenSchedule.deleted.is_(False))
        .order_by(ScreenSchedule.spot_number, ScreenSchedule.id)
        .all()
    )


def create_screen_schedule(db: Session, product: Product, data: ScreenScheduleCreate) -> ScreenSchedule:
    check = _playable_check(product)
    if data.spot_number > check.spots_per_loop:
        raise HTTPException(
            status_code=400,
            detail=f"Spot number must be between 1 and {check.spots_per_loop}",
        )
    schedule = ScreenSchedule(
        product_id=product.id,
        company_id=product.company_id,
        spot_number=data.spot_number,
        title=data.title.strip(),
        description=data.description,
        media_url=data.media_url,
        duration=data.duration,
        active=True,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule


def delete_screen_schedule(db: Session, product: Product, schedule_id: int) -> None:
    schedule = (
        db.query(ScreenSchedule)
        .filter(
            ScreenSchedule.id == schedule_id,
            ScreenSchedule.product_id == product.id,
            ScreenSchedule.deleted.is_(False),
        )
        .first()
    )
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    schedule.deleted = True
    schedule.active = False
    db.commit()


def build_loop_timeline(product: Product, schedules: list[ScreenSchedule]) -> dict:
    """Lay out one loop of a digital site, spot by spot, from the start of its window."""
    check = _playable_check(product)
    scheduled: dict[int, ScreenSchedule] = {}
    for schedule in schedules:
        if schedule.active and not schedule.deleted:
            scheduled.setdefault(schedule.spot_number, schedule)

    start_minutes = parse_clock(product.start_time)
    spots = []
    for number in range(1, check.spots_per_loop + 1):
        offset = (number - 1) * check.spot_duration
        schedule = scheduled.get(number)
        spots.append(
            {
                "id": f"SPOT{number:03d}",
                "number": number,
                "name": f"Spot {number}",
                "offset_seconds": offset,
                "start_time": _clock_at(start_minutes, offset),
                "end_time": _clock_at(start_minutes, offset + check.spot_duration),
                "duration": check.spot_duration,
                "status": "active" if schedule else "available",
                "is_scheduled": schedule is not None,
                "schedule_id": schedule.id if schedule else None,
                "title": schedule.title if schedule else None,
            }
        )

    return {
        "product_id": product.id,
        "timezone": settings.timezone,
        "start_time": product.start_time,
        "end_time": product.end_time,
        "start_label": to_12_hour(product.start_time),
        "end_label": to_12_hour(product.end_time),
        "spot_duration": check.spot_duration,
        "spots_per_loop": check.spots_per_loop,
        "loop_seconds": check.time_per_loop,
        "loops": check.complete_loops if check.valid else None,
        "valid": check.valid,
        "spots": spots,
    }
