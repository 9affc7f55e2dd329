from .invitation import Invitation, InvitationStatus
from .note import Note
from .tenant import Plan, Tenant
from .user import Role, User
