from datetime import timedelta
from sqlalchemy.orm import Session
from app.crud.tenant import tenant as tenant_crud
from app.crud.user import user as user_crud
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    LogoutResponse,
    TokenClaims,
    TokenRefresh,
    TokenValidation,
)
from app.schemas.tenant import TenantResponse
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging_config import logger
from app.core.security import (
    create_access_token,
    get_token_expiration,
    verify_password,
    verify_token,
)
from app.core.tenant_context import UserContext
from app.utils.timeutils import utcnow


def format_expires_in(minutes: int) -> str:
    """Render a token lifetime the way clients expect it, e.g. ``24h``."""
    if minutes % 60 == 0:
        return f"{minutes // 60}h"
    return f"{minutes}m"


class AuthService:
    """
    Login and token lifecycle.

    Tokens are stateless; logout only acknowledges the request and the client
    discards its token.
    """

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, credentials: LoginRequest) -> LoginResponse:
        """
        Check credentials and issue a token.

        The same error is raised for an unknown email and a wrong password.

        Raises:
            AuthenticationError: If the credentials do not match
        """
        email = credentials.email.lower()
        logger.info(f"Login attempt for email: {email}")

        user = user_crud.get_by_email(self.db, email=email)
        if not user or not verify_password(credentials.password, user.hashed_password):
            logger.warning(f"Login failed for email: {email}")
            raise AuthenticationError("Invalid email or password")

        tenant = user.tenant
        context = UserContext(
            user_id=user.id,
            email=user.email,
            role=user.role,
            tenant_id=tenant.id,
            tenant_slug=tenant.slug,
        )
        token = create_access_token(data=context.to_claims())
        logger.info(f"Login successful for {email} (tenant={tenant.slug}, role={user.role.value})")

        return LoginResponse(
            token=token,
            user=LoginUser.model_validate(user),
            tenant=TenantResponse.model_validate(tenant),
            expires_in=format_expires_in(settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def validate_token(self, token: str) -> TokenValidation:
        """
        Raises:
            AuthenticationError: If the token is invalid or expired
        """
        payload = verify_token(token)
        context = UserContext.from_claims(payload)
        return TokenValidation(
            valid=True,
            user=TokenClaims(
                user_id=context.user_id,
                email=context.email,
                role=context.role,
                tenant_id=context.tenant_id,
                tenant_slug=context.tenant_slug,
            ),
            expires_at=get_token_expiration(payload),
        )

    def refresh_token(self, token: str) -> TokenRefresh:
        """
        Issue a fresh token for a still-valid one.

        Claims are rebuilt from the database so a removed user cannot keep
        refreshing and role changes take effect.

        Raises:
            AuthenticationError: If the token is invalid or its user is gone
        """
        context = UserContext.from_claims(verify_token(token))
        user = user_crud.get(self.db, user_id=context.user_id, tenant_id=context.tenant_id)
        tenant = tenant_crud.get(self.db, context.tenant_id)
        if not user or not tenant:
            raise AuthenticationError("User no longer exists")

        refreshed = UserContext(
            user_id=user.id,
            email=user.email,
            role=user.role,
            tenant_id=tenant.id,
            tenant_slug=tenant.slug,
        )
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        new_token = create_access_token(data=refreshed.to_claims(), expires_delta=expires_delta)
        logger.info(f"Token refreshed for {user.email}")

        return TokenRefresh(
            token=new_token,
            expires_at=get_token_expiration(verify_token(new_token)),
        )

    def logout(self, context: UserContext) -> LogoutResponse:
        logger.info(f"Logout for {context.email}")
        return LogoutResponse(logged_out=True, timestamp=utcnow())
