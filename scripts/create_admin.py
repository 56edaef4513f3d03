"""Create the first admin account (idempotent).

Usage: ADMIN_EMAIL=admin@example.com python scripts/create_admin.py
"""
import os
import sys

from sqlalchemy.exc import SQLAlchemyError

from studyhub.core.database import SessionLocal
from studyhub.models.user import User, UserRole


def main() -> int:
    email = os.getenv("ADMIN_EMAIL", "admin@studyhub.local")

    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            if existing.role != UserRole.admin:
                role = existing.role.value if existing.role else "user without a role"
                print(f"{email} exists as {role}; not changing it.", file=sys.stderr)
                return 1
            print(f"Admin {email} already exists (id {existing.id}).")
            return 0

        admin = User(
            email=email,
            first_name="Admin",
            last_name="User",
            role=UserRole.admin,
            email_verified=True,
            onboarding_completed=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
    except SQLAlchemyError as exc:
        db.rollback()
        print(f"Could not create admin: {exc}", file=sys.stderr)
        return 1
    finally:
        db.close()

    print(f"Created admin {email} with id {admin.id}; send it as X-User-Id.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
