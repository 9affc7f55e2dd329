from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, update
from app.crud.base import CRUDBase
from app.models.invitation import Invitation, InvitationStatus
from app.schemas.invitation import InvitationCreate


class CRUDInvitation(CRUDBase[Invitation, InvitationCreate, InvitationCreate]):
    """
    CRUD operations for Invitation model.

    Token lookups are global (the accepting user has no tenant yet); every
    other query is tenant-filtered.
    """

    def get_pending_by_token(self, db: Session, token: str) -> Optional[Invitation]:
        stmt = (
            select(Invitation)
            .where(
                Invitation.token == token,
                Invitation.status == InvitationStatus.PENDING
            )
            .options(selectinload(Invitation.tenant), selectinload(Invitation.inviter))
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_pending_for_email(self, db: Session, *, email: str, tenant_id: int) -> Optional[Invitation]:
        stmt = select(Invitation).where(
            Invitation.email == email,
            Invitation.tenant_id == tenant_id,
            Invitation.status == InvitationStatus.PENDING
        ).limit(1)
        return db.execute(stmt).scalar_one_or_none()

    def count_pending(self, db: Session, *, tenant_id: int) -> int:
        stmt = select(func.count()).select_from(Invitation).where(
            Invitation.tenant_id == tenant_id,
            Invitation.status == InvitationStatus.PENDING
        )
        return db.execute(stmt).scalar_one()

    def list_for_tenant(
        self,
        db: Session,
        *,
        tenant_id: int,
        status: Optional[InvitationStatus] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Invitation], int]:
        conditions = [Invitation.tenant_id == tenant_id]
        if status is not None:
            conditions.append(Invitation.status == status)

        stmt = (
            select(Invitation)
            .where(*conditions)
            .options(selectinload(Invitation.inviter))
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
            .offset(skip)
            .limit(limit)
        )
        invitations = list(db.execute(stmt).scalars().all())
        total = db.execute(
            select(func.count()).select_from(Invitation).where(*conditions)
        ).scalar_one()
        return invitations, total

    def set_status(
        self,
        db: Session,
        *,
        db_obj: Invitation,
        status: InvitationStatus
    ) -> Invitation:
        """Unconditionally set the status and commit."""
        return self.update(db=db, db_obj=db_obj, obj_in={"status": status})

    def mark_accepted_if_pending(
        self,
        db: Session,
        *,
        invitation_id: int,
        accepted_at: datetime
    ) -> bool:
        """
        Flip a PENDING invitation to ACCEPTED without committing.

        The update only matches while the row is still PENDING, so of two
        concurrent accepts only one sees a matched row.

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == invitation_id,
                Invitation.status == InvitationStatus.PENDING
            )
            .values(status=InvitationStatus.ACCEPTED, accepted_at=accepted_at)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(stmt)
        return result.rowcount == 1


# Create a singleton instance
invitation = CRUDInvitation(Invitation)
