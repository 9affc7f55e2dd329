"""
python -m scripts.seed

Creates two demo tenants:
    acme   (FREE) admin@acme.com / user@acme.com
    globex (PRO)  admin@globex.com / user@globex.com
All accounts use the password "password".
"""

import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from app.database import SessionLocal
from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.models.tenant import Plan
from app.models.user import Role

DEMO_PASSWORD = "password"

TENANTS = [
    ("acme", "Acme Corporation", Plan.FREE),
    ("globex", "Globex Corporation", Plan.PRO),
]


def seed():
    """Insert demo tenants and users, skipping tenants that already exist."""
    db = SessionLocal()

    try:
        for slug, name, plan in TENANTS:
            if tenant_crud.get_by_slug(db, slug):
                print(f"Skipped: tenant {slug} already exists")
                continue

            tenant, admin = tenant_crud.create_with_admin(
                db,
                name=name,
                slug=slug,
                email=f"admin@{slug}.com",
                password=DEMO_PASSWORD,
                plan=plan,
            )
            member = user_crud.create(
                db,
                email=f"user@{slug}.com",
                password=DEMO_PASSWORD,
                tenant_id=tenant.id,
                role=Role.MEMBER,
            )
            print(f"Added: {tenant.name} ({plan.value}) with {admin.email}, {member.email}")

        print("\nSeeding complete")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
