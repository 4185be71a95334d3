import io

import openpyxl
import pytest
from fastapi import HTTPException

from ooh_panel.models.product import ContentType
from ooh_panel.schemas.product import ProductCreate, ProductUpdate
from ooh_panel.services import product_service

VALID_CMS = {"start_time": "06:00", "end_time": "22:00", "spot_duration": "10", "loops_per_day": "18"}


def test_create_digital_product_stores_parsed_window(db_session, company, admin_user):
    data = ProductCreate(name=" EDSA Guadalupe LED ", content_type="Dynamic", cms=VALID_CMS)
    product = product_service.create_product(db_session, company.id, data, seller=admin_user)

    assert product.id is not None
    assert product.name == "EDSA Guadalupe LED"
    assert product.content_type == ContentType.DIGITAL.value
    assert product.spot_duration == 10
    assert product.loops_per_day == 18
    assert product.seller_id == admin_user.id
    assert product.seller_name == "Test Acme_Admin"


def test_create_rejects_indivisible_window_before_writing(db_session, company):
    data = ProductCreate(name="C5 LED", content_type="digital", cms={**VALID_CMS, "spot_duration": "7"})
    with pytest.raises(HTTPException) as exc:
        product_service.create_product(db_session, company.id, data)

    assert exc.value.status_code == 400
    assert "457.14 loops" in exc.value.detail
    assert product_service.list_products(db_session, company.id) == []


def test_create_digital_without_cms_is_rejected(db_session, company):
    with pytest.raises(HTTPException) as exc:
        product_service.create_product(db_session, company.id, ProductCreate(name="LED", content_type="digital"))
    assert exc.value.detail == "All dynamic content fields are required."


def test_static_product_drops_playback_window(db_session, company):
    data = ProductCreate(name="Static Billboard", content_type="static", cms={**VALID_CMS, "spot_duration": "7"})
    product = product_service.create_product(db_session, company.id, data)

    assert product.cms is None
    assert product.spot_duration is None


def test_update_validates_merged_window(db_session, company):
    product = product_service.create_product(
        db_session, company.id, ProductCreate(name="LED", content_type="digital", cms=VALID_CMS)
    )

    with pytest.raises(HTTPException) as exc:
        product_service.update_product(
            db_session, company.id, product.id, ProductUpdate(cms={"loops_per_day": "17"})
        )
    assert exc.value.status_code == 400
    assert "Change spots per loop to 18" in exc.value.detail

    updated = product_service.update_product(
        db_session, company.id, product.id, ProductUpdate(cms={"end_time": "06:00", "start_time": "22:00"})
    )
    assert updated.start_time == "22:00"
    assert updated.spot_duration == 10


def test_update_switching_to_digital_requires_window(db_session, company):
    product = product_service.create_product(db_session, company.id, ProductCreate(name="Board"))
    with pytest.raises(HTTPException):
        product_service.update_product(db_session, company.id, product.id, ProductUpdate(content_type="digital"))

    updated = product_service.update_product(
        db_session, company.id, product.id, ProductUpdate(content_type="digital", cms=VALID_CMS, price=15000)
    )
    assert updated.is_digital
    assert updated.price == 15000


def test_soft_deleted_products_are_hidden(db_session, company, other_company):
    product = product_service.create_product(db_session, company.id, ProductCreate(name="Board"))
    product_service.soft_delete_product(db_session, company.id, product.id)

    assert product.deleted_at is not None
    assert product_service.list_products(db_session, company.id) == []
    with pytest.raises(HTTPException) as exc:
        product_service.get_product(db_session, company.id, product.id)
    assert exc.value.status_code == 404


def test_products_are_scoped_to_company(db_session, company, other_company):
    product = product_service.create_product(db_session, company.id, ProductCreate(name="Board"))
    with pytest.raises(HTTPException) as exc:
        product_service.get_product(db_session, other_company.id, product.id)
    assert exc.value.status_code == 404


def test_list_filters_by_type_and_search(db_session, company):
    product_service.create_product(db_session, company.id, ProductCreate(name="Static Board", site_code="ST-1"))
    product_service.create_product(
        db_session, company.id, ProductCreate(name="LED Wall", content_type="digital", cms=VALID_CMS)
    )

    digital = product_service.list_products(db_session, company.id, content_type=ContentType.DIGITAL)
    assert [p.name for p in digital] == ["LED Wall"]
    found = product_service.list_products(db_session, company.id, search="st-1")
    assert [p.name for p in found] == ["Static Board"]


def test_validate_product_schedule_uses_detailed_message(db_session, company):
    product = product_service.create_product(
        db_session, company.id, ProductCreate(name="LED", content_type="digital", cms=VALID_CMS)
    )
    result = product_service.validate_product_schedule(product)
    assert result.valid
    assert result.message.startswith("✓ Valid Configuration: 320 complete loops")


def test_read_csv_rows():
    content = b"Name,Price,Content_Type\nBoard A,100,static\n"
    rows = product_service.read_upload_rows("sites.csv", content)
    assert rows == [{"name": "Board A", "price": "100", "content_type": "static"}]


def test_read_xlsx_rows_normalises_cells():
    wb = openpyxl.Workbook()
    sheet = wb.active
    sheet.append(["name", "content_type", "start_time", "end_time", "spot_duration", "loops_per_day"])
    sheet.append(["LED", "digital", "06:00", "22:00", 10.0, 18])
    sheet.append([None, None, None, None, None, None])
    buffer = io.BytesIO()
    wb.save(buffer)

    rows = product_service.read_upload_rows("sites.xlsx", buffer.getvalue())
    assert rows == [
        {
            "name": "LED",
            "content_type": "digital",
            "start_time": "06:00",
            "end_time": "22:00",
            "spot_duration": "10",
            "loops_per_day": "18",
        }
    ]


def test_read_rejects_other_file_types():
    with pytest.raises(HTTPException) as exc:
        product_service.read_upload_rows("sites.pdf", b"%PDF")
    assert exc.value.status_code == 400


def test_import_collects_row_errors_and_keeps_going(db_session, company, admin_user):
    rows = [
        {"name": "Board A", "price": "1500", "categories": "Billboard, Highway"},
        {"name": None, "price": "abc"},
        {"name": "LED Bad", "content_type": "digital", **VALID_CMS, "spot_duration": "7"},
        {"name": "LED Good", "content_type": "Dynamic", **VALID_CMS},
        {"name": "Mystery", "content_type": "hologram"},
    ]
    result = product_service.import_products(db_session, company.id, rows, seller=admin_user)

    assert result["processed"] == 2
    assert result["errors"] == [
        "Row 2: Product name is required",
        "Row 2: Price must be number",
        "Row 3: Invalid Input: The current configuration results in 457.14 loops, which is not a whole number. ",
        "Row 5: Content type must be static or digital",
    ]
    names = sorted(p.name for p in product_service.list_products(db_session, company.id))
    assert names == ["Board A", "LED Good"]
    board = next(p for p in product_service.list_products(db_session, company.id) if p.name == "Board A")
    assert board.categories == ["Billboard", "Highway"]


@pytest.mark.parametrize(
    "filename, content",
    [("sites.csv", b"name,price\n\xff\xfeBad,1\n"), ("sites.xlsx", b"not a zip")],
)
def test_read_rejects_unreadable_files(filename, content):
    with pytest.raises(HTTPException) as exc:
        product_service.read_upload_rows(filename, content)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Unable to read the uploaded file."


def test_stored_times_are_zero_padded(db_session, company):
    cms = {"start_time": " 6:0 ", "end_time": "22:00:00:00", "spot_duration": "10", "loops_per_day": "18"}
    product = product_service.create_product(
        db_session, company.id, ProductCreate(name="LED", content_type="digital", cms=cms)
    )
    assert product.start_time == "06:00"
    assert product.end_time == "22:00"


def test_times_too_wide_for_storage_are_rejected(db_session, company):
    cms = {**VALID_CMS, "start_time": "1000000:00", "end_time": "1000016:00"}
    with pytest.raises(HTTPException) as exc:
        product_service.create_product(
            db_session, company.id, ProductCreate(name="LED", content_type="digital", cms=cms)
        )
    assert exc.value.detail == "Invalid time format."

    rows = [{"name": "LED", "content_type": "digital", **cms}]
    result = product_service.import_products(db_session, company.id, rows)
    assert result == {"processed": 0, "errors": ["Row 1: Invalid time format."]}
