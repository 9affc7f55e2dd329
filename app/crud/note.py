from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func, or_
from app.crud.base import CRUDBase
from app.models.note import Note
from app.schemas.note import NoteCreate, NoteUpdate


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


SORT_COLUMNS = {
    "createdAt": Note.created_at,
    "updatedAt": Note.updated_at,
    "title": Note.title,
}


class CRUDNote(CRUDBase[Note, NoteCreate, NoteUpdate]):
    """
    CRUD operations for Note model.

    Inherits tenant-filtered get/create/update/delete from CRUDBase and adds
    search with pagination. Ownership checks belong to the service layer.
    """

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Note]:
        stmt = select(Note).where(
            Note.id == id,
            Note.tenant_id == tenant_id
        ).options(selectinload(Note.author))
        return db.execute(stmt).scalar_one_or_none()

    def search(
        self,
        db: Session,
        *,
        tenant_id: int,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc"
    ) -> Tuple[List[Note], int]:
        """
        List notes of a tenant with optional free-text search.

        Args:
            db: Database session
            tenant_id: Tenant ID for isolation
            skip: Number of records to skip
            limit: Maximum number of records to return
            search: Case-insensitive substring matched against title or content
            sort_by: One of createdAt, updatedAt, title
            sort_order: asc or desc

        Returns:
            Tuple of (page of notes, total matching count)
        """
        conditions = [Note.tenant_id == tenant_id]
        if search:
            pattern = f"%{escape_like(search)}%"
            conditions.append(or_(
                Note.title.ilike(pattern, escape="\\"),
                Note.content.ilike(pattern, escape="\\"),
            ))

        column = SORT_COLUMNS.get(sort_by, Note.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        tiebreak = Note.id.asc() if sort_order == "asc" else Note.id.desc()

        stmt = (
            select(Note)
            .where(*conditions)
            .options(selectinload(Note.author))
            .order_by(ordering, tiebreak)
            .offset(skip)
            .limit(limit)
        )
        notes = list(db.execute(stmt).scalars().all())

        count_stmt = select(func.count()).select_from(Note).where(*conditions)
        total = db.execute(count_stmt).scalar_one()

        return notes, total


# Create a singleton instance
note = CRUDNote(Note)
