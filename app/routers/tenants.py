from fastapi import APIRouter, Depends
from app.schemas.common import ApiResponse
from app.schemas.tenant import TenantInfo, UpgradeEligibilityResponse, UpgradeResult
from app.services.subscription import SubscriptionService
from app.services.tenant import TenantService
from app.core.tenant_context import UserContext
from app.core.logging_config import logger
from app.dependencies import get_subscription_service, get_tenant_service, get_user_context

# Mounted at /api/tenant
info_router = APIRouter()

# Mounted at /api/tenants
router = APIRouter()


@info_router.get("/info", response_model=ApiResponse[TenantInfo])
def get_tenant_info(
    service: TenantService = Depends(get_tenant_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Tenant details, the caller's role and the full subscription status.
    """
    return ApiResponse(data=service.get_tenant_info(context))


@router.get("/{slug}/upgrade", response_model=ApiResponse[UpgradeEligibilityResponse])
def get_upgrade_eligibility(
    slug: str,
    service: SubscriptionService = Depends(get_subscription_service),
    context: UserContext = Depends(get_user_context)
):
    """Whether your tenant can move to PRO and what it would unlock."""
    return ApiResponse(data=service.get_upgrade_eligibility(context, slug))


@router.post("/{slug}/upgrade", response_model=ApiResponse[UpgradeResult])
def upgrade_tenant(
    slug: str,
    service: SubscriptionService = Depends(get_subscription_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Upgrade your tenant to the PRO plan.

    Admin only. The slug must be your own tenant's.

    Returns:
        Updated tenant, upgrade details and current usage
    """
    try:
        result = service.upgrade_tenant(context, slug)
    except Exception as e:
        logger.error(f"Error upgrading tenant {slug}: {type(e).__name__}: {str(e)}")
        raise

    return ApiResponse(
        data=result,
        message=f"Successfully upgraded {result.tenant.name} to Pro plan",
    )
