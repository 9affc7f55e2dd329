import enum
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from app.crud.tenant import tenant as tenant_crud
from app.models.tenant import Tenant, Plan
from app.core import subscription as plans
from app.core.exceptions import (
    AuthorizationError,
    LimitExceededError,
    NotFoundError,
    ValidationError,
)
from app.core.logging_config import logger
from app.core.permissions import Permission, require_permission
from app.core.tenant_context import UserContext
from app.schemas.common import SubscriptionUsage
from app.schemas.tenant import (
    LimitCheckResult,
    PlanLimitsResponse,
    RemainingResponse,
    SubscriptionStatus,
    TenantResponse,
    UpgradeBenefits,
    UpgradeDetails,
    UpgradedBy,
    UpgradeEligibility,
    UpgradeEligibilityResponse,
    UpgradeResult,
    UsageResponse,
)


class SubscriptionEvent(str, enum.Enum):
    LIMIT_CHECKED = "limit_checked"
    LIMIT_REACHED = "limit_reached"
    UPGRADE_REQUESTED = "upgrade_requested"
    UPGRADE_COMPLETED = "upgrade_completed"


def log_subscription_event(
    event: SubscriptionEvent,
    tenant_id: int,
    user_id: int,
    **metadata
) -> None:
    logger.info(
        f"[SUBSCRIPTION] {event.value}: tenant_id={tenant_id}, user_id={user_id}, "
        f"metadata={metadata}"
    )


class SubscriptionService:
    """
    Plan lookups and limit enforcement backed by the database.

    Limit checks are check-then-act: the count is read, compared, and the
    caller inserts afterwards without any row lock, so two concurrent
    creates next to the cap can both pass.
    """

    def __init__(self, db: Session):
        self.db = db
        self.crud = tenant_crud

    def get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.crud.get(self.db, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found")
        return tenant

    def get_status(self, tenant_id: int) -> SubscriptionStatus:
        """
        Full subscription picture for a tenant.

        Raises:
            NotFoundError: If the tenant does not exist
        """
        tenant = self.get_tenant(tenant_id)
        return self._build_status(tenant)

    def _build_status(self, tenant: Tenant) -> SubscriptionStatus:
        plan = Plan(tenant.plan)
        limits = plans.get_plan_limits(plan)
        note_count, user_count = self.crud.get_usage(self.db, tenant.id)

        return SubscriptionStatus(
            plan=plan,
            plan_display_name=plans.get_plan_display_name(plan),
            limits=PlanLimitsResponse(max_notes=limits.max_notes, max_users=limits.max_users),
            usage=UsageResponse(current_notes=note_count, current_users=user_count),
            remaining=RemainingResponse(
                notes=plans.get_remaining_notes(plan, note_count),
                users=plans.get_remaining_users(plan, user_count),
            ),
            features=dict(limits.features),
            can_upgrade=plans.can_upgrade_plan(plan),
        )

    def get_note_usage(self, tenant_id: int) -> SubscriptionUsage:
        status = self.get_status(tenant_id)
        return SubscriptionUsage(
            plan=status.plan,
            notes_used=status.usage.current_notes,
            notes_limit=status.limits.max_notes,
            notes_remaining=status.remaining.notes,
        )

    def check_note_limit(self, context: UserContext) -> LimitCheckResult:
        """Compare the tenant's note count to its plan cap."""
        status = self.get_status(context.tenant_id)
        current = status.usage.current_notes
        limit = status.limits.max_notes
        allowed = plans.can_create_note(status.plan, current)

        log_subscription_event(
            SubscriptionEvent.LIMIT_CHECKED,
            context.tenant_id,
            context.user_id,
            resource="note",
            current_count=current,
            limit=limit,
            allowed=allowed,
        )
        if not allowed:
            log_subscription_event(
                SubscriptionEvent.LIMIT_REACHED,
                context.tenant_id,
                context.user_id,
                resource="note",
                current_count=current,
                limit=limit,
            )

        return LimitCheckResult(
            allowed=allowed,
            reason=None if allowed else (
                f"Note limit reached. {status.plan_display_name} allows {limit} notes. "
                "Upgrade to Pro for unlimited notes."
            ),
            current_usage=current,
            limit=limit,
            plan_required=None if allowed else Plan.PRO,
        )

    def enforce_note_limit(self, context: UserContext) -> None:
        """
        Raises:
            LimitExceededError: If the tenant is at its note cap
        """
        result = self.check_note_limit(context)
        if not result.allowed:
            raise LimitExceededError(
                result.reason or "Note creation limit exceeded",
                details={
                    "current_usage": result.current_usage,
                    "limit": result.limit,
                    "plan_required": result.plan_required.value if result.plan_required else None,
                },
            )

    def _get_own_tenant_by_slug(self, context: UserContext, slug: str) -> Tenant:
        tenant = self.crud.get_by_slug(self.db, slug)
        if not tenant:
            raise NotFoundError("Tenant not found")
        if tenant.id != context.tenant_id:
            logger.warning(
                f"User {context.email} tried to access tenant {slug} "
                f"but belongs to tenant_id={context.tenant_id}"
            )
            raise AuthorizationError("Forbidden")
        return tenant

    def get_upgrade_eligibility(self, context: UserContext, slug: str) -> UpgradeEligibilityResponse:
        tenant = self._get_own_tenant_by_slug(context, slug)
        status = self._build_status(tenant)
        can_upgrade = status.can_upgrade
        pro_limits = plans.get_plan_limits(Plan.PRO)

        return UpgradeEligibilityResponse(
            tenant=TenantResponse.model_validate(tenant),
            plan_display_name=status.plan_display_name,
            upgrade=UpgradeEligibility(
                eligible=can_upgrade,
                current_plan=status.plan,
                target_plan=Plan.PRO if can_upgrade else status.plan,
                reason=None if can_upgrade else "Tenant is already on the highest plan",
            ),
            current_usage=status.usage,
            limits_after_upgrade=PlanLimitsResponse(
                max_notes=pro_limits.max_notes,
                max_users=pro_limits.max_users,
            ),
        )

    def upgrade_tenant(self, context: UserContext, slug: str) -> UpgradeResult:
        """
        Move the caller's tenant to PRO.

        Raises:
            AuthorizationError: If the caller is not ADMIN or the slug names
                another tenant
            NotFoundError: If no tenant has this slug
            ValidationError: If the tenant is already on PRO
        """
        require_permission(context, Permission.UPGRADE_SUBSCRIPTION)
        tenant = self._get_own_tenant_by_slug(context, slug)

        old_plan = Plan(tenant.plan)
        log_subscription_event(
            SubscriptionEvent.UPGRADE_REQUESTED,
            context.tenant_id,
            context.user_id,
            tenant_slug=slug,
            current_plan=old_plan.value,
            requested_by=context.email,
        )

        if not plans.can_upgrade_plan(old_plan):
            raise ValidationError("Tenant is already on PRO plan")

        tenant = self.crud.set_plan(self.db, db_obj=tenant, plan=Plan.PRO)
        note_count, user_count = self.crud.get_usage(self.db, tenant.id)

        free_limits = plans.get_plan_limits(Plan.FREE)
        benefits = UpgradeBenefits(
            notes_unlocked=free_limits.max_notes is not None,
            users_unlocked=free_limits.max_users is not None,
            features_unlocked=plans.features_unlocked_by_upgrade(),
        )

        log_subscription_event(
            SubscriptionEvent.UPGRADE_COMPLETED,
            context.tenant_id,
            context.user_id,
            tenant_slug=slug,
            old_plan=old_plan.value,
            new_plan=Plan.PRO.value,
            features_unlocked=benefits.features_unlocked,
        )
        logger.info(
            f"Tenant upgrade successful: {slug} ({tenant.name}) upgraded from "
            f"{old_plan.value} to {Plan.PRO.value} by {context.email}"
        )

        return UpgradeResult(
            tenant=TenantResponse.model_validate(tenant),
            upgrade=UpgradeDetails(
                from_plan=old_plan,
                to_plan=Plan(tenant.plan),
                timestamp=datetime.now(timezone.utc),
                upgraded_by=UpgradedBy(user_id=context.user_id, email=context.email),
                benefits=benefits,
            ),
            current_usage=UsageResponse(current_notes=note_count, current_users=user_count),
        )
