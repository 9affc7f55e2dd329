from app.crud.base import CRUDBase
from .note import note
from .invitation import invitation
from .user import user
from .tenant import tenant

__all__ = ["CRUDBase", "note", "invitation", "user", "tenant"]
