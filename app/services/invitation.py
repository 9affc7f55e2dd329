from datetime import timedelta
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.crud.invitation import invitation as invitation_crud
from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.models.invitation import Invitation, InvitationStatus
from app.models.tenant import Plan
from app.models.user import User
from app.schemas.invitation import InvitationAccept, InvitationCreate
from app.core import subscription as plans
from app.core.config import settings
from app.core.exceptions import (
    ConflictError,
    InvitationExpiredError,
    LimitExceededError,
    NotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.permissions import Permission, require_permission
from app.core.security import generate_invitation_token
from app.core.tenant_context import UserContext
from app.utils.timeutils import ensure_utc, utcnow


class InvitationService:
    """
    Service layer for the invitation workflow.

    PENDING -> ACCEPTED when accepted before expiry, PENDING -> EXPIRED when
    previewed or accepted afterwards, PENDING -> CANCELLED by an admin.
    Nothing leaves ACCEPTED, EXPIRED or CANCELLED.
    """

    def __init__(self, db: Session):
        self.db = db
        self.crud = invitation_crud

    def build_invitation_link(self, token: str) -> str:
        return f"{settings.APP_URL.rstrip('/')}/accept-invitation?token={token}"

    def create_invitation(self, context: UserContext, invitation_data: InvitationCreate) -> Invitation:
        """
        Issue an invitation for an email address into the caller's tenant.

        Raises:
            AuthorizationError: If the caller lacks INVITE_USERS
            ConflictError: If the email already belongs to a user of the
                tenant or has a pending invitation
            LimitExceededError: If users plus pending invitations would
                exceed the plan's user cap
        """
        require_permission(context, Permission.INVITE_USERS)
        email = invitation_data.email.lower()

        if user_crud.get_by_email_in_tenant(self.db, email=email, tenant_id=context.tenant_id):
            raise ConflictError("User already exists in this organization")

        if self.crud.get_pending_for_email(self.db, email=email, tenant_id=context.tenant_id):
            raise ConflictError("Invitation already sent to this email")

        tenant = tenant_crud.get(self.db, context.tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found")

        limits = plans.get_plan_limits(tenant.plan)
        if limits.max_users is not None:
            user_count = user_crud.count(self.db, tenant_id=context.tenant_id)
            pending_count = self.crud.count_pending(self.db, tenant_id=context.tenant_id)
            if user_count + pending_count + 1 > limits.max_users:
                raise LimitExceededError(
                    f"User limit reached. {plans.get_plan_display_name(tenant.plan)} allows "
                    f"{limits.max_users} users. Upgrade to Pro for unlimited users.",
                    details={
                        "current_users": user_count,
                        "pending_invitations": pending_count,
                        "limit": limits.max_users,
                    },
                )

        invitation = self.crud.create(
            self.db,
            obj_in={
                "email": email,
                "role": invitation_data.role,
                "token": generate_invitation_token(),
                "status": InvitationStatus.PENDING,
                "invited_by": context.user_id,
                "expires_at": utcnow() + timedelta(days=settings.INVITATION_EXPIRE_DAYS),
            },
            tenant_id=context.tenant_id,
        )
        logger.info(
            f"Invitation created: id={invitation.id}, email={email}, role={invitation.role.value}, "
            f"tenant_id={context.tenant_id}, invited_by={context.email}"
        )
        return invitation

    def list_invitations(
        self,
        context: UserContext,
        *,
        status: Optional[InvitationStatus] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Invitation], int]:
        require_permission(context, Permission.INVITE_USERS)
        return self.crud.list_for_tenant(
            self.db,
            tenant_id=context.tenant_id,
            status=status,
            skip=(page - 1) * limit,
            limit=limit,
        )

    def _get_valid_invitation(self, token: str) -> Invitation:
        invitation = self.crud.get_pending_by_token(self.db, token)
        if not invitation:
            raise NotFoundError("Invalid or expired invitation")

        if ensure_utc(invitation.expires_at) <= utcnow():
            self.crud.set_status(self.db, db_obj=invitation, status=InvitationStatus.EXPIRED)
            logger.info(f"Invitation expired: id={invitation.id}, email={invitation.email}")
            raise InvitationExpiredError("Invitation has expired")

        return invitation

    def preview_invitation(self, token: str) -> Invitation:
        """
        Look up a pending invitation for display before acceptance.

        Raises:
            NotFoundError: If no PENDING invitation has this token
            InvitationExpiredError: If it is past its expiry (it is marked
                EXPIRED)
            ConflictError: If a user with that email already joined the tenant
        """
        invitation = self._get_valid_invitation(token)
        if user_crud.get_by_email_in_tenant(self.db, email=invitation.email, tenant_id=invitation.tenant_id):
            raise ConflictError("User already exists in this organization")
        return invitation

    def accept_invitation(self, accept_data: InvitationAccept) -> Tuple[User, Invitation]:
        """
        Create the invited user and consume the invitation in one commit.

        Returns:
            Tuple of (created User, accepted Invitation)

        Raises:
            NotFoundError: If no PENDING invitation has this token
            InvitationExpiredError: If it is past its expiry
            ConflictError: If the user already exists or the invitation was
                consumed concurrently
            LimitExceededError: If a FREE tenant is already at its user cap
        """
        invitation = self._get_valid_invitation(accept_data.token)
        tenant = invitation.tenant

        if user_crud.get_by_email_in_tenant(self.db, email=invitation.email, tenant_id=invitation.tenant_id):
            self.crud.update(
                self.db,
                db_obj=invitation,
                obj_in={"status": InvitationStatus.ACCEPTED, "accepted_at": utcnow()},
            )
            raise ConflictError("User already exists in this organization")

        if Plan(tenant.plan) == Plan.FREE:
            user_count = user_crud.count(self.db, tenant_id=tenant.id)
            if not plans.can_invite_user(Plan.FREE, user_count):
                raise LimitExceededError(
                    "User limit reached for this organization",
                    details={"current_users": user_count, "limit": plans.get_plan_limits(Plan.FREE).max_users},
                )

        user = user_crud.create(
            self.db,
            email=invitation.email,
            password=accept_data.password,
            tenant_id=invitation.tenant_id,
            role=invitation.role,
            commit=False,
        )

        if not self.crud.mark_accepted_if_pending(
            self.db, invitation_id=invitation.id, accepted_at=utcnow()
        ):
            self.db.rollback()
            raise ConflictError("Invitation has already been used")

        self.db.commit()
        self.db.refresh(user)
        self.db.refresh(invitation)

        logger.info(
            f"Invitation accepted: id={invitation.id}, user_id={user.id}, "
            f"email={user.email}, tenant_id={user.tenant_id}"
        )
        return user, invitation

    def cancel_invitation(self, context: UserContext, invitation_id: int) -> Invitation:
        """
        Raises:
            NotFoundError: If the invitation is not in the caller's tenant
            ValidationError: If it is no longer PENDING
        """
        require_permission(context, Permission.INVITE_USERS)
        invitation = self.crud.get(self.db, id=invitation_id, tenant_id=context.tenant_id)
        if not invitation:
            raise NotFoundError("Invitation not found")

        if invitation.status != InvitationStatus.PENDING:
            raise ValidationError(f"Cannot cancel invitation with status {invitation.status.value}")

        invitation = self.crud.set_status(self.db, db_obj=invitation, status=InvitationStatus.CANCELLED)
        logger.info(f"Invitation cancelled: id={invitation.id}, by={context.email}")
        return invitation
