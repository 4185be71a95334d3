import os

# settings are read at import time, so the test database must be configured first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from ooh_panel.core.db import Base, SessionLocal, engine, get_db  # noqa: E402
from ooh_panel.core.security import create_access_token  # noqa: E402
from ooh_panel.main import app  # noqa: E402
from ooh_panel.models import AdminUser, Company, UserRole  # noqa: E402


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def company(db_session):
    company = Company(name="acme", display_name="Acme Outdoor", settings={})
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def other_company(db_session):
    company = Company(name="rival", display_name="Rival Media", settings={})
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


def _make_user(db_session, username, company_id=None, role=UserRole.ADMIN, is_superuser=False):
    # the hash is never checked by token-authenticated requests
    user = AdminUser(
        username=username,
        password_hash="not-a-real-hash",
        is_active=True,
        is_superuser=is_superuser,
        role=role,
        company_id=company_id,
        first_name="Test",
        last_name=username.title(),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session, company):
    return _make_user(db_session, "acme_admin", company_id=company.id)


@pytest.fixture
def sales_user(db_session, company):
    return _make_user(db_session, "acme_sales", company_id=company.id, role=UserRole.SALES)


@pytest.fixture
def superuser(db_session):
    return _make_user(db_session, "root", is_superuser=True)


def _bearer(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def headers_for():
    return _bearer


@pytest.fixture
def auth_headers(admin_user):
    return _bearer(admin_user)


@pytest.fixture
def rival_admin(db_session, other_company):
    return _make_user(db_session, "rival_admin", company_id=other_company.id)
