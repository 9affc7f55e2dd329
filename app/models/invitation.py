import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin
from app.models.user import Role

class InvitationStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"

class Invitation(Base, TimestampMixin):
    """
    Time-limited, single-use invitation to join a tenant with a preset role.
    """
    __tablename__ = "invitation"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, index=True)
    role = Column(Enum(Role, name="role"), nullable=False, default=Role.MEMBER)
    token = Column(String, unique=True, index=True, nullable=False)
    status = Column(Enum(InvitationStatus, name="invitation_status"), nullable=False, default=InvitationStatus.PENDING)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    invited_by = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    tenant = relationship("Tenant", back_populates="invitations")
    inviter = relationship("User")
