from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.crud.note import note as note_crud
from app.crud.user import user as user_crud
from app.models.note import Note
from app.schemas.note import NoteCreate, NoteSummary, NoteUpdate
from app.services.subscription import SubscriptionService
from app.core.exceptions import AuthorizationError, NotFoundError
from app.core.permissions import Permission, require_action, require_permission
from app.core.tenant_context import UserContext


class NoteService:
    """
    Service layer for note business logic.

    Every call takes the caller's UserContext; the tenant filter always comes
    from ``context.tenant_id``. Members may read every note of their tenant
    but only change their own; admins may change any note of their tenant.
    """

    def __init__(self, db: Session):
        self.db = db
        self.crud = note_crud
        self.subscriptions = SubscriptionService(db)

    def get_note(self, context: UserContext, note_id: int) -> Note:
        """
        Get a note by ID with tenant isolation.

        Raises:
            NotFoundError: If the note does not exist in the caller's tenant
        """
        note = self.crud.get(self.db, id=note_id, tenant_id=context.tenant_id)
        if not note:
            raise NotFoundError("Note not found")
        return note

    def list_notes(
        self,
        context: UserContext,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc"
    ) -> Tuple[List[Note], int]:
        """
        Page through the tenant's notes.

        Returns:
            Tuple of (notes on this page, total matching notes)
        """
        return self.crud.search(
            self.db,
            tenant_id=context.tenant_id,
            skip=(page - 1) * limit,
            limit=limit,
            search=search or None,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    def create_note(self, context: UserContext, note_data: NoteCreate) -> Note:
        """
        Create a note authored by the caller.

        Raises:
            AuthorizationError: If the caller lacks CREATE_NOTE or no longer
                belongs to the tenant
            LimitExceededError: If the tenant's plan cap is reached
        """
        require_permission(context, Permission.CREATE_NOTE)
        self.subscriptions.enforce_note_limit(context)

        author = user_crud.get(self.db, user_id=context.user_id, tenant_id=context.tenant_id)
        if not author:
            raise AuthorizationError("Author not found or does not belong to tenant")

        return self.crud.create(
            self.db,
            obj_in={
                "title": note_data.title,
                "content": note_data.content,
                "author_id": author.id,
            },
            tenant_id=context.tenant_id,
        )

    def update_note(self, context: UserContext, note_id: int, note_data: NoteUpdate) -> Note:
        """
        Raises:
            NotFoundError: If the note does not exist in the caller's tenant
            AuthorizationError: If a member targets someone else's note
        """
        note = self.get_note(context, note_id)
        require_action(
            context,
            Permission.UPDATE_OWN_NOTES,
            note.author_id,
            message="You can only edit your own notes",
        )
        return self.crud.update(
            self.db,
            db_obj=note,
            obj_in=note_data.model_dump(exclude_none=True),
        )

    def delete_note(self, context: UserContext, note_id: int) -> NoteSummary:
        """
        Delete a note and return a summary of the removed row.

        Raises:
            NotFoundError: If the note does not exist in the caller's tenant
            AuthorizationError: If a member targets someone else's note
        """
        note = self.get_note(context, note_id)
        require_action(
            context,
            Permission.DELETE_OWN_NOTES,
            note.author_id,
            message="You can only delete your own notes",
        )
        deleted = NoteSummary.model_validate(note)
        self.crud.delete(self.db, id=note.id, tenant_id=context.tenant_id)
        return deleted
