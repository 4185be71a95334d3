from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..api.deps import get_active_admin, get_company, get_company_user
from ..core.db import get_db
from ..models.company import Company
from ..models.user import AdminUser
from ..schemas.schedule import LoopValidationRequest, LoopValidationOut, LoopSuggestionOut
from ..schemas.screen_schedule import ScreenScheduleCreate, ScreenScheduleOut, LoopTimelineOut
from ..services import product_service, schedule_service
from ..services.loop_validator import MessageStyle, ScheduleConfig, ValidationResult, validate

router = APIRouter()


def _validation_out(result: ValidationResult) -> LoopValidationOut:
    check = result.check
    if check is None or check.time_per_loop == 0:
        return LoopValidationOut(valid=result.valid, message=result.message, error=check.error if check else None)
    return LoopValidationOut(
        valid=result.valid,
        message=result.message,
        error=check.error,
        duration_seconds=check.duration_seconds,
        time_per_loop=check.time_per_loop,
        loops=round(check.loops, 2),
        suggestions=[LoopSuggestionOut.model_validate(s) for s in check.suggestions],
    )


@router.post("/schedule/validate", response_model=LoopValidationOut, dependencies=[Depends(get_active_admin)])
def validate_schedule(payload: LoopValidationRequest):
    """Live check for the inventory forms; call again whenever a field changes."""
    result = validate(ScheduleConfig(**payload.cms.model_dump()), payload.content_type, style=payload.style)
    return _validation_out(result)


@router.get("/companies/{company_name}/products/{product_id}/validate-schedule", response_model=LoopValidationOut)
def validate_stored_schedule(
    product_id: int,
    style: MessageStyle = MessageStyle.DETAILED,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, company.id, product_id)
    return _validation_out(product_service.validate_product_schedule(product, style=style))


@router.get("/companies/{company_name}/products/{product_id}/timeline", response_model=LoopTimelineOut)
def get_timeline(
    product_id: int,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, company.id, product_id)
    schedules = schedule_service.list_screen_schedules(db, product)
    return schedule_service.build_loop_timeline(product, schedules)


@router.get("/companies/{company_name}/products/{product_id}/schedules", response_model=list[ScreenScheduleOut])
def list_schedules(
    product_id: int,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, company.id, product_id)
    return schedule_service.list_screen_schedules(db, product)


@router.post("/companies/{company_name}/products/{product_id}/schedules", response_model=ScreenScheduleOut)
def create_schedule(
    product_id: int,
    payload: ScreenScheduleCreate,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, company.id, product_id)
    return schedule_service.create_screen_schedule(db, product, payload)


@router.delete("/companies/{company_name}/products/{product_id}/schedules/{schedule_id}")
def delete_schedule(
    product_id: int,
    schedule_id: int,
    company: Company = Depends(get_company),
    user: AdminUser = Depends(get_company_user),
    db: Session = Depends(get_db),
):
    product = product_service.get_product(db, company.id, product_id)
    schedule_service.delete_screen_schedule(db, product, schedule_id)
    return {"deleted": True, "id": schedule_id}
