from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func
from app.models.user import User, Role
from app.core.security import get_password_hash
from app.core.exceptions import ConflictError, InternalError


class CRUDUser:
    """
    CRUD operations for User model.

    Note: While User model has tenant_id, we don't inherit from CRUDBase
    because login needs a global lookup by email and creation hashes the
    password.
    """

    def __init__(self):
        self.model = User

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        """
        Retrieve the first user with this email across all tenants.

        Only used by login, where the tenant is not known yet.
        """
        stmt = (
            select(User)
            .where(User.email == email)
            .options(selectinload(User.tenant))
            .order_by(User.id)
            .limit(1)
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_by_email_in_tenant(self, db: Session, email: str, tenant_id: int) -> Optional[User]:
        stmt = select(User).where(User.email == email, User.tenant_id == tenant_id)
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get(self, db: Session, user_id: int, tenant_id: int) -> Optional[User]:
        """
        Retrieve user by ID within a tenant.

        Returns:
            User instance or None if not found in that tenant
        """
        stmt = select(User).where(User.id == user_id, User.tenant_id == tenant_id)
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_multi_by_tenant(
        self,
        db: Session,
        *,
        tenant_id: int,
        skip: int = 0,
        limit: int = 50,
        role: Optional[Role] = None
    ) -> List[User]:
        stmt = select(User).where(User.tenant_id == tenant_id)
        if role is not None:
            stmt = stmt.where(User.role == role)
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
        return list(db.execute(stmt).scalars().all())

    def count(self, db: Session, *, tenant_id: int, role: Optional[Role] = None) -> int:
        stmt = select(func.count()).select_from(User).where(User.tenant_id == tenant_id)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return db.execute(stmt).scalar_one()

    def create(
        self,
        db: Session,
        *,
        email: str,
        password: str,
        tenant_id: int,
        role: Role = Role.MEMBER,
        commit: bool = True
    ) -> User:
        """
        Create a new user with hashed password.

        Args:
            db: Database session
            email: User email
            password: Plain text password (will be hashed)
            tenant_id: Tenant ID the user belongs to
            role: ADMIN or MEMBER
            commit: Whether to commit immediately; pass False to join a
                larger transaction

        Returns:
            Created User instance

        Raises:
            ConflictError: If the email is already taken in this tenant
        """
        hashed_password = get_password_hash(password)
        db_user = User(
            email=email,
            hashed_password=hashed_password,
            tenant_id=tenant_id,
            role=role
        )
        db.add(db_user)

        try:
            if commit:
                db.commit()
                db.refresh(db_user)
            else:
                db.flush()  # Get ID without committing
        except IntegrityError as e:
            db.rollback()
            if "unique" in str(e).lower() or "user_email_tenant_id_key" in str(e):
                raise ConflictError(f"User with email {email} already exists in this organization")
            raise InternalError("Failed to create user") from e

        return db_user


# Create singleton instance
user = CRUDUser()
