from fastapi import APIRouter, Depends, Query, Response, status
from typing import Optional
from app.schemas.common import ApiResponse, Pagination, SubscriptionUsage
from app.schemas.note import (
    NoteCreate,
    NoteCreated,
    NoteDeleted,
    NoteDetail,
    NoteList,
    NoteResponse,
    NoteUpdate,
    SEARCH_MAX_LENGTH,
)
from app.services.note import NoteService
from app.core.subscription import format_limit
from app.core.tenant_context import UserContext
from app.core.logging_config import logger
from app.dependencies import get_note_service, get_user_context

router = APIRouter()


def set_subscription_headers(response: Response, usage: SubscriptionUsage) -> None:
    response.headers["X-Subscription-Plan"] = usage.plan.value
    response.headers["X-Notes-Used"] = str(usage.notes_used)
    response.headers["X-Notes-Limit"] = format_limit(usage.notes_limit)
    response.headers["X-Notes-Remaining"] = format_limit(usage.notes_remaining)


@router.get("", response_model=ApiResponse[NoteList])
def list_notes(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=SEARCH_MAX_LENGTH),
    sort_by: str = Query("createdAt", alias="sortBy", pattern="^(createdAt|updatedAt|title)$"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    service: NoteService = Depends(get_note_service),
    context: UserContext = Depends(get_user_context)
):
    """
    List notes of your tenant.

    Args:
        page: Page number, starting at 1
        limit: Page size (1-100)
        search: Case-insensitive match against title or content
        sort_by: createdAt, updatedAt or title
        sort_order: asc or desc

    Returns:
        Notes, pagination and the tenant's note quota
    """
    notes, total = service.list_notes(
        context,
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    usage = service.subscriptions.get_note_usage(context.tenant_id)
    set_subscription_headers(response, usage)

    return ApiResponse(
        data=NoteList(
            notes=[NoteResponse.model_validate(n) for n in notes],
            pagination=Pagination.build(page, limit, total),
            subscription=usage,
        )
    )


@router.post("", response_model=ApiResponse[NoteCreated], status_code=status.HTTP_201_CREATED)
def create_note(
    note_data: NoteCreate,
    response: Response,
    service: NoteService = Depends(get_note_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Create a new note.

    The author and tenant come from the JWT. Fails with 403 once a FREE
    tenant holds its maximum number of notes.
    """
    try:
        logger.info(f"Creating note: title={note_data.title!r}, tenant_id={context.tenant_id}")
        note = service.create_note(context, note_data)
        logger.info(f"Note created successfully: id={note.id}")
    except Exception as e:
        logger.error(f"Error creating note: {type(e).__name__}: {str(e)}")
        raise

    usage = service.subscriptions.get_note_usage(context.tenant_id)
    set_subscription_headers(response, usage)
    return ApiResponse(
        data=NoteCreated(note=NoteResponse.model_validate(note), subscription=usage),
        message="Note created successfully",
    )


@router.get("/{note_id}", response_model=ApiResponse[NoteDetail])
def get_note(
    note_id: int,
    service: NoteService = Depends(get_note_service),
    context: UserContext = Depends(get_user_context)
):
    """Retrieve a note of your tenant by ID."""
    note = service.get_note(context, note_id)
    return ApiResponse(data=NoteDetail(note=NoteResponse.model_validate(note)))


@router.put("/{note_id}", response_model=ApiResponse[NoteDetail])
def update_note(
    note_id: int,
    note_data: NoteUpdate,
    service: NoteService = Depends(get_note_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Update a note.

    Members may only edit notes they wrote; admins may edit any note.
    """
    try:
        logger.info(f"Updating note: id={note_id}, user_id={context.user_id}")
        note = service.update_note(context, note_id, note_data)
        logger.info(f"Note updated successfully: id={note.id}")
    except Exception as e:
        logger.error(f"Error updating note {note_id}: {type(e).__name__}: {str(e)}")
        raise

    return ApiResponse(
        data=NoteDetail(note=NoteResponse.model_validate(note)),
        message="Note updated successfully",
    )


@router.delete("/{note_id}", response_model=ApiResponse[NoteDeleted])
def delete_note(
    note_id: int,
    response: Response,
    service: NoteService = Depends(get_note_service),
    context: UserContext = Depends(get_user_context)
):
    """
    Delete a note.

    Members may only delete notes they wrote; admins may delete any note.
    """
    try:
        logger.info(f"Deleting note: id={note_id}, user_id={context.user_id}")
        deleted = service.delete_note(context, note_id)
        logger.info(f"Note deleted successfully: id={note_id}")
    except Exception as e:
        logger.error(f"Error deleting note {note_id}: {type(e).__name__}: {str(e)}")
        raise

    usage = service.subscriptions.get_note_usage(context.tenant_id)
    set_subscription_headers(response, usage)
    return ApiResponse(
        data=NoteDeleted(deleted_note=deleted, subscription=usage),
        message="Note deleted successfully",
    )
