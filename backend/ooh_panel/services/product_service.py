from datetime import datetime, time, timezone
import csv
import io
import logging
import zipfile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..models.product import Product, ContentType
from ..models.user import AdminUser
from ..schemas.product import ProductCreate, ProductUpdate, normalize_content_type
from .loop_validator import (
    ERROR_MESSAGES,
    LoopError,
    MessageStyle,
    ScheduleConfig,
    ValidationResult,
    format_clock,
    parse_count,
    validate,
)

settings = get_settings()
logger = logging.getLogger(__name__)

CMS_FIELDS = ("start_time", "end_time", "spot_duration", "loops_per_day")
REQUIRED_FIELDS = {"name", "description", "price", "categories", "position", "active"}
CLOCK_COLUMN_LENGTH = 8
UNREADABLE_UPLOAD = "Unable to read the uploaded file."


def _clocks_fit(content_type: str, cms: ScheduleConfig) -> bool:
    # only called once the window has validated, so both times parse
    if content_type != ContentType.DIGITAL.value:
        return True
    return all(len(format_clock(value)) <= CLOCK_COLUMN_LENGTH for value in (cms.start_time, cms.end_time))


def ensure_schedule_valid(
    content_type: str,
    cms: ScheduleConfig,
    style: MessageStyle = MessageStyle.COMPACT,
) -> ValidationResult:
    """Block a write whose playback window does not hold whole loops."""
    result = validate(cms, content_type, style=style)
    if not result.valid:
        logger.info(
            "Rejected %s schedule %s: %s",
            content_type,
            cms,
            result.check.error.value if result.check and result.check.error else "invalid",
        )
        raise HTTPException(status_code=400, detail=result.message)
    if not _clocks_fit(content_type, cms):
        raise HTTPException(status_code=400, detail=ERROR_MESSAGES[LoopError.INVALID_TIME])
    return result


def _apply_cms(product: Product, content_type: str, cms: ScheduleConfig) -> None:
    if content_type != ContentType.DIGITAL.value:
        # static sites carry no playback window
        for field in CMS_FIELDS:
            setattr(product, field, None)
        return
    product.start_time = format_clock(cms.start_time)
    product.end_time = format_clock(cms.end_time)
    product.spot_duration = parse_count(cms.spot_duration)
    product.loops_per_day = parse_count(cms.loops_per_day)


def _content_type_value(value) -> str:
    return value.value if isinstance(value, ContentType) else normalize_content_type(value)


def list_products(
    db: Session,
    company_id: int,
    search: str | None = None,
    content_type: ContentType | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[Product]:
    query = db.query(Product).filter(Product.company_id == company_id, Product.deleted.is_(False))
    if content_type:
        query = query.filter(Product.content_type == content_type.value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(Product.name.ilike(pattern), Product.site_code.ilike(pattern), Product.location.ilike(pattern))
        )
    return query.order_by(Product.position.asc(), Product.id.desc()).offset(skip).limit(limit).all()


def get_product(db: Session, company_id: int, product_id: int) -> Product:
    product = (
        db.query(Product)
        .filter(Product.id == product_id, Product.company_id == company_id, Product.deleted.is_(False))
        .first()
    )
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def create_product(db: Session, company_id: int, data: ProductCreate, seller: AdminUser | None = None) -> Product:
    content_type = _content_type_value(data.content_type)
    cms = ScheduleConfig.from_mapping(data.cms.model_dump() if data.cms else None)
    ensure_schedule_valid(content_type, cms)

    product = Product(
        company_id=company_id,
        seller_id=seller.id if seller else None,
        seller_name=seller.display_name if seller else None,
        name=data.name.strip(),
        description=data.description,
        price=data.price,
        site_code=data.site_code,
        location=data.location,
        categories=list(data.categories),
        content_type=content_type,
        position=data.position,
        active=data.active,
    )
    _apply_cms(product, content_type, cms)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Created %s product id=%s for company=%s", content_type, product.id, company_id)
    return product


def update_product(db: Session, company_id: int, product_id: int, data: ProductUpdate) -> Product:
    product = get_product(db, company_id, product_id)
    changes = data.model_dump(exclude_unset=True, exclude={"cms"}, mode="json")
    content_type = changes.pop("content_type", None) or product.content_type

    # incoming CMS fields override the stored ones, the merged window is what gets validated
    merged = {field: getattr(product, field) for field in CMS_FIELDS}
    if data.cms is not None:
        merged.update(data.cms.model_dump(exclude_unset=True))
    cms = ScheduleConfig.from_mapping(merged)
    ensure_schedule_valid(content_type, cms)

    for field, value in changes.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        if field == "name":
            value = value.strip()
        setattr(product, field, value)
    product.content_type = content_type
    _apply_cms(product, content_type, cms)
    db.commit()
    db.refresh(product)
    return product


def soft_delete_product(db: Session, company_id: int, product_id: int) -> Product:
    product = get_product(db, company_id, product_id)
    product.deleted = True
    product.deleted_at = datetime.now(timezone.utc)
    db.commit()
    logger.info("Soft deleted product id=%s for company=%s", product_id, company_id)
    return product


def validate_product_schedule(product: Product, style: MessageStyle = MessageStyle.DETAILED) -> ValidationResult:
    return validate(ScheduleConfig.from_mapping(product.cms), product.content_type, style=style)


def _cell_text(value) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def read_upload_rows(filename: str, content: bytes) -> list[dict]:
    """Header-keyed rows from an uploaded .csv or .xlsx inventory sheet."""
    name = (filename or "").lower()
    if name.endswith(".csv"):
        try:
            reader = csv.DictReader(io.StringIO(content.decode("utf-8-sig")))
            rows = [
                {(key or "").strip().lower(): _cell_text(value) for key, value in row.items()}
                for row in reader
            ]
        except (UnicodeDecodeError, csv.Error) as exc:
            logger.warning("Unreadable csv upload %s: %s", filename, exc)
            raise HTTPException(status_code=400, detail=UNREADABLE_UPLOAD) from exc
    elif name.endswith(".xlsx"):
        try:
            wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        except (zipfile.BadZipFile, InvalidFileException, KeyError, OSError) as exc:
            logger.warning("Unreadable xlsx upload %s: %s", filename, exc)
            raise HTTPException(status_code=400, detail=UNREADABLE_UPLOAD) from exc
        try:
            values = wb.active.iter_rows(values_only=True)
            header = [str(cell or "").strip().lower() for cell in next(values, ())]
            rows = [
                {key: _cell_text(cell) for key, cell in zip(header, row) if key}
                for row in values
                if any(cell is not None for cell in row)
            ]
        finally:
            wb.close()
    else:
        raise HTTPException(status_code=400, detail="Invalid file type. Only .csv and .xlsx files are allowed.")

    if not rows:
        raise HTTPException(status_code=400, detail="The uploaded file is empty or contains no valid data.")
    if len(rows) > settings.import_max_rows:
        raise HTTPException(status_code=400, detail=f"Too many rows (max {settings.import_max_rows})")
    return rows


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def validate_import_row(row: dict, row_number: int) -> list[str]:
    errors = []
    if not row.get("name"):
        errors.append(f"Row {row_number}: Product name is required")
    if row.get("price") is not None and not _is_number(row["price"]):
        errors.append(f"Row {row_number}: Price must be number")
    if row.get("position") is not None and parse_count(row["position"]) is None:
        errors.append(f"Row {row_number}: Position must be number")
    content_type = normalize_content_type(row.get("content_type") or ContentType.STATIC.value)
    if content_type not in {c.value for c in ContentType}:
        errors.append(f"Row {row_number}: Content type must be static or digital")
    return errors


def import_products(db: Session, company_id: int, rows: list[dict], seller: AdminUser | None = None) -> dict:
    processed = 0
    errors: list[str] = []
    for row_number, row in enumerate(rows, start=1):
        row_errors = validate_import_row(row, row_number)
        if row_errors:
            errors.extend(row_errors)
            continue
        try:
            data = ProductCreate(
                name=row["name"],
                description=row.get("description") or "",
                price=float(row.get("price") or 0),
                site_code=row.get("site_code"),
                location=row.get("location"),
                categories=[c.strip() for c in (row.get("categories") or "").split(",") if c.strip()],
                content_type=row.get("content_type") or ContentType.STATIC.value,
                position=parse_count(row.get("position") or 0),
                cms={field: row.get(field) for field in CMS_FIELDS},
            )
        except ValidationError as exc:
            errors.append(f"Row {row_number}: {exc.errors()[0]['msg']}")
            continue

        content_type = _content_type_value(data.content_type)
        cms = ScheduleConfig.from_mapping(data.cms.model_dump())
        result = validate(cms, content_type, style=MessageStyle.COMPACT)
        if not result.valid:
            errors.append(f"Row {row_number}: {result.message.splitlines()[0]}")
            continue
        if not _clocks_fit(content_type, cms):
            errors.append(f"Row {row_number}: {ERROR_MESSAGES[LoopError.INVALID_TIME]}")
            continue

        product = Product(
            company_id=company_id,
            seller_id=seller.id if seller else None,
            seller_name=seller.display_name if seller else None,
            name=data.name,
            description=data.description,
            price=data.price,
            site_code=data.site_code,
            location=data.location,
            categories=data.categories,
            content_type=content_type,
            position=data.position,
        )
        _apply_cms(product, content_type, cms)
        db.add(product)
        processed += 1
    db.commit()
    logger.info("Imported %s products for company=%s (%s row errors)", processed, company_id, len(errors))
    return {"processed": processed, "errors": errors}
