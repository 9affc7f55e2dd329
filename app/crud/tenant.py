from typing import Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from app.models.tenant import Tenant, Plan
from app.models.user import User, Role
from app.crud.user import user as user_crud
from app.crud.note import note as note_crud
from app.core.exceptions import ConflictError, InternalError


class CRUDTenant:
    """
    CRUD operations for Tenant model.

    Note: Tenant model doesn't have tenant_id (it IS the tenant),
    so we don't inherit from CRUDBase.
    """

    def __init__(self):
        self.model = Tenant

    def get(self, db: Session, tenant_id: int) -> Optional[Tenant]:
        return db.get(Tenant, tenant_id)

    def get_by_slug(self, db: Session, slug: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.slug == slug)
        return db.execute(stmt).scalar_one_or_none()

    def get_usage(self, db: Session, tenant_id: int) -> Tuple[int, int]:
        """
        Current resource counts of a tenant.

        Returns:
            Tuple of (note count, user count)
        """
        return (
            note_crud.count(db, tenant_id=tenant_id),
            user_crud.count(db, tenant_id=tenant_id),
        )

    def set_plan(self, db: Session, *, db_obj: Tenant, plan: Plan) -> Tenant:
        """Single field update; no data is migrated between plans."""
        db_obj.plan = plan
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def create_with_admin(
        self,
        db: Session,
        *,
        name: str,
        slug: str,
        email: str,
        password: str,
        plan: Plan = Plan.FREE
    ) -> Tuple[Tenant, User]:
        """
        Create a tenant and its initial admin user atomically.

        Args:
            db: Database session
            name: Tenant display name
            slug: Unique URL-safe tenant identifier
            email: Admin user email
            password: Admin user password (will be hashed)
            plan: Starting subscription plan

        Returns:
            Tuple of (created Tenant, created User)

        Raises:
            ConflictError: If the slug is already taken
        """
        try:
            tenant = Tenant(name=name, slug=slug, plan=plan)
            db.add(tenant)
            db.flush()  # Get tenant.id without committing

            admin = user_crud.create(
                db=db,
                email=email,
                password=password,
                tenant_id=tenant.id,
                role=Role.ADMIN,
                commit=False  # Don't commit yet - we'll commit both together
            )

            # Commit both tenant and user atomically
            db.commit()
            db.refresh(tenant)
            db.refresh(admin)

            return tenant, admin

        except IntegrityError as e:
            db.rollback()
            if "slug" in str(e).lower() or "unique" in str(e).lower():
                raise ConflictError(f"Tenant with slug {slug} already exists")
            raise InternalError("Failed to create tenant") from e


# Create singleton instance
tenant = CRUDTenant()
