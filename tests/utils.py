from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.core.security import create_access_token
from app.core.tenant_context import UserContext
from app.models import Note, Plan, Role, User

PASSWORD = "password"


def make_tenant(db, slug, plan=Plan.FREE):
    """Create a tenant with admin@<slug>.com (ADMIN) and user@<slug>.com (MEMBER)."""
    tenant, admin = tenant_crud.create_with_admin(
        db,
        name=f"{slug.title()} Corporation",
        slug=slug,
        email=f"admin@{slug}.com",
        password=PASSWORD,
        plan=plan,
    )
    member = user_crud.create(
        db,
        email=f"user@{slug}.com",
        password=PASSWORD,
        tenant_id=tenant.id,
        role=Role.MEMBER,
    )
    return tenant, admin, member


def context_for(user: User) -> UserContext:
    return UserContext(
        user_id=user.id,
        email=user.email,
        role=user.role,
        tenant_id=user.tenant_id,
        tenant_slug=user.tenant.slug,
    )


def auth_headers(user: User) -> dict:
    token = create_access_token(data=context_for(user).to_claims())
    return {"Authorization": f"Bearer {token}"}


def add_notes(db, user: User, count: int):
    for i in range(count):
        db.add(Note(title=f"Note {i + 1}", content=f"Body {i + 1}", author_id=user.id, tenant_id=user.tenant_id))
    db.commit()
