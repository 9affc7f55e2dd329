from fastapi import APIRouter, Depends, Header, status
from typing import Optional
from app.schemas.common import ApiResponse
from app.schemas.tenant import TenantCreate, TenantProvisioned, TenantResponse
from app.services.tenant import TenantService
from app.core.config import settings
from app.core.exceptions import AuthorizationError
from app.core.logging_config import logger
from app.dependencies import get_tenant_service

router = APIRouter()


def verify_admin_key(x_admin_key: Optional[str] = Header(None)):
    """Verify the operator API key from the x-admin-key header."""
    if not x_admin_key or x_admin_key != settings.ADMIN_API_KEY:
        logger.warning("Rejected admin request with invalid API key")
        raise AuthorizationError("Invalid admin API key")


@router.post(
    "/tenants",
    response_model=ApiResponse[TenantProvisioned],
    status_code=status.HTTP_201_CREATED
)
def create_tenant(
    request: TenantCreate,
    service: TenantService = Depends(get_tenant_service),
    _: None = Depends(verify_admin_key)
):
    """
    Create a new tenant and its initial admin user.

    Protected by x-admin-key header.

    Args:
        request: Tenant name, slug, plan and the admin's email and password

    Returns:
        Created tenant and admin user information

    Raises:
        ConflictError: If the slug is already taken
    """
    tenant, admin = service.provision_tenant(request)
    return ApiResponse(
        data=TenantProvisioned(
            tenant=TenantResponse.model_validate(tenant),
            admin_user_id=admin.id,
            admin_email=admin.email,
        ),
        message="Tenant created successfully",
    )
