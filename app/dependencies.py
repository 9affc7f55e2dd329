from fastapi import Depends, Request
from sqlalchemy.orm import Session
from app.database import get_db
from app.core.security import verify_token
from app.core.tenant_context import UserContext
from app.core.exceptions import AuthenticationError
from app.services.auth import AuthService
from app.services.invitation import InvitationService
from app.services.note import NoteService
from app.services.subscription import SubscriptionService
from app.services.tenant import TenantService


def get_bearer_token(request: Request) -> str:
    """
    Extract the raw token from the Authorization Bearer header.

    Raises:
        AuthenticationError: If the header is missing or not a Bearer token
    """
    authorization = request.headers.get("Authorization")
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Authentication token required")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Authentication token required")
    return token


def get_user_context(token: str = Depends(get_bearer_token)) -> UserContext:
    """
    Verify the JWT once and return the caller's identity.

    This is the request boundary: downstream handlers and services trust the
    returned context and never re-read the token. Tenant isolation comes from
    passing ``context.tenant_id`` explicitly into every query.

    Raises:
        AuthenticationError: If the token is invalid, expired, or its claims
            are malformed
    """
    payload = verify_token(token)
    return UserContext.from_claims(payload)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_note_service(db: Session = Depends(get_db)) -> NoteService:
    return NoteService(db)


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(db)


def get_tenant_service(db: Session = Depends(get_db)) -> TenantService:
    return TenantService(db)


def get_invitation_service(db: Session = Depends(get_db)) -> InvitationService:
    return InvitationService(db)
