from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.models.tenant import Tenant
from app.models.user import Role, User
from app.schemas.tenant import TenantCreate, TenantInfo, TenantResponse
from app.services.subscription import SubscriptionService
from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging_config import logger
from app.core.permissions import Permission, require_permission
from app.core.tenant_context import UserContext


class TenantService:
    """Tenant overview, member listing and operator provisioning."""

    def __init__(self, db: Session):
        self.db = db
        self.crud = tenant_crud
        self.subscriptions = SubscriptionService(db)

    def get_tenant_info(self, context: UserContext) -> TenantInfo:
        """
        Raises:
            NotFoundError: If the caller's tenant no longer exists
        """
        tenant = self.crud.get(self.db, context.tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found")

        return TenantInfo(
            tenant=TenantResponse.model_validate(tenant),
            user_id=context.user_id,
            user_role=context.role.value,
            subscription=self.subscriptions.get_status(tenant.id),
        )

    def list_users(
        self,
        context: UserContext,
        *,
        page: int = 1,
        limit: int = 50,
        role: Optional[Role] = None
    ) -> Tuple[List[User], int]:
        """
        Raises:
            AuthorizationError: If the caller lacks LIST_USERS
        """
        require_permission(context, Permission.LIST_USERS)
        users = user_crud.get_multi_by_tenant(
            self.db,
            tenant_id=context.tenant_id,
            skip=(page - 1) * limit,
            limit=limit,
            role=role,
        )
        total = user_crud.count(self.db, tenant_id=context.tenant_id, role=role)
        return users, total

    def provision_tenant(self, tenant_data: TenantCreate) -> Tuple[Tenant, User]:
        """
        Create a tenant together with its first ADMIN user.

        Raises:
            ConflictError: If the slug is already taken
        """
        if self.crud.get_by_slug(self.db, tenant_data.slug):
            raise ConflictError(f"Tenant with slug {tenant_data.slug} already exists")

        tenant, admin = self.crud.create_with_admin(
            self.db,
            name=tenant_data.name,
            slug=tenant_data.slug,
            email=tenant_data.email.lower(),
            password=tenant_data.password,
            plan=tenant_data.plan,
        )
        logger.info(
            f"Tenant provisioned: id={tenant.id}, slug={tenant.slug}, plan={tenant.plan.value}, "
            f"admin={admin.email}"
        )
        return tenant, admin
