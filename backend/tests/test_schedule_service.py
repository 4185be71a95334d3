from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from ooh_panel.models.product import Product
from ooh_panel.schemas.product import ProductCreate
from ooh_panel.schemas.screen_schedule import ScreenScheduleCreate
from ooh_panel.services import product_service, schedule_service


def make_product(**overrides):
    values = dict(
        id=1,
        company_id=1,
        name="EDSA LED",
        content_type="digital",
        start_time="06:00",
        end_time="22:00",
        spot_duration=10,
        loops_per_day=18,
    )
    values.update(overrides)
    return Product(**values)


def booked(spot_number, schedule_id, title="Campaign", active=True, deleted=False):
    return SimpleNamespace(spot_number=spot_number, id=schedule_id, title=title, active=active, deleted=deleted)


@pytest.mark.parametrize(
    "clock, label",
    [("06:00", "6:00 AM"), ("00:30", "12:30 AM"), ("12:00", "12:00 PM"), ("13:05", "1:05 PM"), ("23:59", "11:59 PM")],
)
def test_to_12_hour(clock, label):
    assert schedule_service.to_12_hour(clock) == label


def test_timeline_lays_out_one_loop():
    timeline = schedule_service.build_loop_timeline(
        make_product(),
        [booked(2, 7, "Coffee Ad"), booked(5, 8, active=False), booked(6, 9, deleted=True)],
    )

    assert timeline["valid"] is True
    assert timeline["loops"] == 320
    assert timeline["loop_seconds"] == 180
    assert timeline["start_label"] == "6:00 AM"
    assert timeline["end_label"] == "10:00 PM"
    assert timeline["timezone"] == "Asia/Manila"

    spots = timeline["spots"]
    assert len(spots) == 18
    assert spots[0]["id"] == "SPOT001"
    assert spots[0]["start_time"] == "06:00:00"
    assert spots[0]["end_time"] == "06:00:10"
    assert spots[17]["offset_seconds"] == 170
    assert spots[17]["end_time"] == "06:03:00"

    assert spots[1]["status"] == "active"
    assert spots[1]["schedule_id"] == 7
    assert spots[1]["title"] == "Coffee Ad"
    assert [s["number"] for s in spots if s["is_scheduled"]] == [2]


def test_timeline_wraps_past_midnight():
    product = make_product(start_time="23:59", end_time="00:59", spot_duration=30, loops_per_day=4)
    timeline = schedule_service.build_loop_timeline(product, [])

    assert timeline["loops"] == 30
    assert timeline["start_label"] == "11:59 PM"
    assert timeline["end_label"] == "12:59 AM"
    assert [s["start_time"] for s in timeline["spots"]] == ["23:59:00", "23:59:30", "00:00:00", "00:00:30"]


def test_timeline_of_indivisible_window_has_no_loop_count():
    timeline = schedule_service.build_loop_timeline(make_product(spot_duration=7), [])
    assert timeline["valid"] is False
    assert timeline["loops"] is None
    assert len(timeline["spots"]) == 18


def test_timeline_requires_digital_site():
    with pytest.raises(HTTPException) as exc:
        schedule_service.build_loop_timeline(make_product(content_type="static"), [])
    assert exc.value.status_code == 400


def test_timeline_rejects_unusable_window():
    with pytest.raises(HTTPException) as exc:
        schedule_service.build_loop_timeline(make_product(spot_duration=0), [])
    assert exc.value.detail == "Spot duration and spots per loop must be positive numbers."


def _digital_product(db_session, company):
    return product_service.create_product(
        db_session,
        company.id,
        ProductCreate(
            name="LED",
            content_type="digital",
            cms={"start_time": "06:00", "end_time": "22:00", "spot_duration": 10, "loops_per_day": 18},
        ),
    )


def test_create_and_delete_screen_schedule(db_session, company):
    product = _digital_product(db_session, company)
    schedule = schedule_service.create_screen_schedule(
        db_session, product, ScreenScheduleCreate(spot_number=3, title=" Morning Promo ", duration=10)
    )
    assert schedule.title == "Morning Promo"
    assert schedule.company_id == company.id
    assert [s.id for s in schedule_service.list_screen_schedules(db_session, product)] == [schedule.id]

    schedule_service.delete_screen_schedule(db_session, product, schedule.id)
    assert schedule_service.list_screen_schedules(db_session, product) == []
    with pytest.raises(HTTPException) as exc:
        schedule_service.delete_screen_schedule(db_session, product, schedule.id)
    assert exc.value.status_code == 404


def test_spot_number_must_fit_in_loop(db_session, company):
    product = _digital_product(db_session, company)
    with pytest.raises(HTTPException) as exc:
        schedule_service.create_screen_schedule(
            db_session, product, ScreenScheduleCreate(spot_number=19, title="Late")
        )
    assert exc.value.detail == "Spot number must be between 1 and 18"
