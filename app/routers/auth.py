from fastapi import APIRouter, Depends
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    TokenRefresh,
    TokenValidation,
)
from app.schemas.common import ApiResponse
from app.services.auth import AuthService
from app.core.tenant_context import UserContext
from app.dependencies import get_auth_service, get_bearer_token, get_user_context

router = APIRouter()


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(credentials: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Exchange email and password for a JWT.

    Args:
        credentials: Email and password

    Returns:
        Token, user, tenant and token lifetime

    Raises:
        AuthenticationError: If the credentials are invalid (401)
    """
    return ApiResponse(data=service.authenticate(credentials), message="Login successful")


@router.get("/validate", response_model=ApiResponse[TokenValidation])
def validate_token(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service)
):
    """Decode the bearer token and report its claims and expiry."""
    return ApiResponse(data=service.validate_token(token), message="Token is valid")


@router.post("/refresh", response_model=ApiResponse[TokenRefresh])
def refresh_token(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service)
):
    """Issue a new 24h token in exchange for a still-valid one."""
    return ApiResponse(data=service.refresh_token(token), message="Token refreshed")


@router.post("/logout", response_model=ApiResponse[LogoutResponse])
def logout(
    context: UserContext = Depends(get_user_context),
    service: AuthService = Depends(get_auth_service)
):
    """
    Acknowledge a logout.

    Tokens are stateless, so the client is responsible for discarding it.
    """
    return ApiResponse(data=service.logout(context), message="Logged out successfully")
