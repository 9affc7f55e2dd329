from app.services.auth import AuthService
from app.services.invitation import InvitationService
from .note import NoteService
from .subscription import SubscriptionService
from .tenant import TenantService

__all__ = ["AuthService", "InvitationService", "NoteService", "SubscriptionService", "TenantService"]
