from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.models.invitation import Invitation, InvitationStatus
from app.models.user import Role
from app.schemas.common import ApiResponse, Pagination
from app.schemas.invitation import (
    AcceptedUser,
    InvitationAccept,
    InvitationCreate,
    InvitationCreated,
    InvitationList,
    InvitationPreview,
    InvitationResponse,
)
from app.schemas.user import UserList, UserResponse
from app.services.invitation import InvitationService
from app.services.tenant import TenantService
from app.core.tenant_context import UserContext
from app.core.logging_config import logger
from app.dependencies import get_invitation_service, get_tenant_service, get_user_context

router = APIRouter()


def _to_invitation_response(invitation: Invitation) -> InvitationResponse:
    return InvitationResponse(
        id=invitation.id,
        email=invitation.email,
        role=invitation.role,
        status=invitation.status,
        expires_at=invitation.expires_at,
        accepted_at=invitation.accepted_at,
        created_at=invitation.created_at,
        invited_by=invitation.inviter.email if invitation.inviter else "Unknown",
    )


@router.get("", response_model=ApiResponse[UserList])
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    role: Optional[Role] = None,
    service: TenantService = Depends(get_tenant_service),
    context: UserContext = Depends(get_user_context)
):
    """List users of your tenant. Admin only."""
    users, total = service.list_users(context, page=page, limit=limit, role=role)
    return ApiResponse(
        data=UserList(
            users=[UserResponse.model_validate(u) for u in users],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.post("/invite", response_model=ApiResponse[InvitationCreated], status_code=status.HTTP_201_CREATED)
def create_invitation(
    invitation_data: InvitationCreate,
    service: InvitationService = Depends(get_invitation_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Invite someone to join your tenant.

    Admin only. No email is sent; the response carries the token and the
    accept link for the admin to share.
    """
    try:
        invitation = service.create_invitation(context, invitation_data)
    except Exception as e:
        logger.error(f"Error creating invitation: {type(e).__name__}: {str(e)}")
        raise

    return ApiResponse(
        data=InvitationCreated(
            id=invitation.id,
            email=invitation.email,
            role=invitation.role,
            status=invitation.status,
            expires_at=invitation.expires_at,
            tenant_name=invitation.tenant.name,
            invited_by=context.email,
            invitation_token=invitation.token,
            invitation_link=service.build_invitation_link(invitation.token),
        ),
        message="Invitation created successfully",
    )


@router.get("/invite", response_model=ApiResponse[InvitationList])
def list_invitations(
    status_filter: Optional[InvitationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    service: InvitationService = Depends(get_invitation_service),
    context: UserContext = Depends(get_user_context)
):
    """List invitations of your tenant, newest first. Admin only."""
    invitations, total = service.list_invitations(
        context,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return ApiResponse(
        data=InvitationList(
            invitations=[_to_invitation_response(i) for i in invitations],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/invite/accept", response_model=ApiResponse[InvitationPreview])
def preview_invitation(
    token: str = Query(..., min_length=1),
    service: InvitationService = Depends(get_invitation_service)
):
    """
    Show who is invited to which tenant. Public, authenticated by the token.
    """
    invitation = service.preview_invitation(token)
    return ApiResponse(
        data=InvitationPreview(
            email=invitation.email,
            role=invitation.role,
            tenant_name=invitation.tenant.name,
            invited_by=invitation.inviter.email if invitation.inviter else "Unknown",
            expires_at=invitation.expires_at,
        )
    )


@router.post("/invite/accept", response_model=ApiResponse[AcceptedUser], status_code=status.HTTP_201_CREATED)
def accept_invitation(
    accept_data: InvitationAccept,
    service: InvitationService = Depends(get_invitation_service)
):
    """
    Accept an invitation and create the account.

    Public. The new user logs in afterwards with the chosen password.
    """
    try:
        user, invitation = service.accept_invitation(accept_data)
    except Exception as e:
        logger.error(f"Error accepting invitation: {type(e).__name__}: {str(e)}")
        raise

    return ApiResponse(
        data=AcceptedUser(
            id=user.id,
            email=user.email,
            role=user.role,
            tenant_id=user.tenant_id,
            tenant_name=invitation.tenant.name,
            tenant_slug=invitation.tenant.slug,
        ),
        message="Account created successfully. You can now log in.",
    )


@router.delete("/invite/{invitation_id}", response_model=ApiResponse[InvitationResponse])
def cancel_invitation(
    invitation_id: int,
    service: InvitationService = Depends(get_invitation_service),
    context: UserContext = Depends(get_user_context)
):
    """Cancel a pending invitation. Admin only."""
    invitation = service.cancel_invitation(context, invitation_id)
    return ApiResponse(
        data=_to_invitation_response(invitation),
        message="Invitation cancelled",
    )
