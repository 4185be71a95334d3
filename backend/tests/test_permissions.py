from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from ooh_panel.api.deps import get_company, get_company_admin, get_company_user, get_superuser
from ooh_panel.core.security import create_access_token, decode_access_token, get_current_user
from ooh_panel.models.user import UserRole
from ooh_panel.schemas.user import AdminUserCreate
from ooh_panel.services import auth_service


def test_get_company_user_allows_superuser():
    user = SimpleNamespace(is_superuser=True, company_id=None)
    company = SimpleNamespace(id=2)
    assert get_company_user(user, company) is user


def test_get_company_user_blocks_wrong_company_user():
    user = SimpleNamespace(is_superuser=False, company_id=1)
    company = SimpleNamespace(id=2)
    with pytest.raises(HTTPException) as exc:
        get_company_user(user, company)
    assert exc.value.status_code == 403


def test_get_company_admin_requires_admin_role():
    sales = SimpleNamespace(is_superuser=False, role=UserRole.SALES)
    with pytest.raises(HTTPException) as exc:
        get_company_admin(sales)
    assert exc.value.detail == "Admin role required"

    admin = SimpleNamespace(is_superuser=False, role=UserRole.ADMIN)
    assert get_company_admin(admin) is admin
    root = SimpleNamespace(is_superuser=True, role=UserRole.SALES)
    assert get_company_admin(root) is root


def test_get_superuser_blocks_company_admin():
    with pytest.raises(HTTPException) as exc:
        get_superuser(SimpleNamespace(is_superuser=False))
    assert exc.value.status_code == 403


def test_get_company_rejects_inactive_company():
    class FakeQuery:
        def filter(self, *args, **kwargs):
            return self

        def first(self):
            return SimpleNamespace(id=1, name="acme", is_active=False)

    class FakeDB:
        def query(self, _model):
            return FakeQuery()

    with pytest.raises(HTTPException) as exc:
        get_company("acme", FakeDB())
    assert exc.value.status_code == 403


def test_token_is_bound_to_company(db_session, admin_user, other_company):
    token = create_access_token(admin_user)
    assert decode_access_token(token)["cid"] == admin_user.company_id
    assert get_current_user(db_session, token) is admin_user

    admin_user.company_id = other_company.id
    db_session.commit()
    with pytest.raises(HTTPException) as exc:
        get_current_user(db_session, token)
    assert exc.value.status_code == 401


def test_decode_rejects_garbage_token():
    assert decode_access_token("not-a-token") is None


def test_company_user_needs_company(db_session):
    with pytest.raises(HTTPException) as exc:
        auth_service.create_admin_user(db_session, AdminUserCreate(username="orphan", password="password123"))
    assert exc.value.detail == "Company is required for non-superusers"
