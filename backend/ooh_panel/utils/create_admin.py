import argparse
from sqlalchemy.orm import Session

from ..core.db import SessionLocal, Base, engine
from ..services.auth_service import create_admin_user
from ..schemas.user import AdminUserCreate
from ..models.user import AdminUser
from .. import models  # noqa: F401


def main():
    parser = argparse.ArgumentParser(description="Create a superuser for the inventory panel")
    parser.add_argument("username")
    parser.add_argument("password")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()
    try:
        existing = db.query(AdminUser).filter_by(username=args.username).first()
        if existing:
            print("User already exists")
            return
        user = create_admin_user(
            db,
            AdminUserCreate(username=args.username, password=args.password, is_active=True, is_superuser=True),
        )
        print(f"Created superuser {user.username}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
