import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"

class User(Base, TimestampMixin):
    __tablename__ = "user"
    __table_args__ = (
        UniqueConstraint("email", "tenant_id", name="user_email_tenant_id_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(Role, name="role"), nullable=False, default=Role.MEMBER)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)

    tenant = relationship("Tenant", back_populates="users")
    notes = relationship("Note", back_populates="author", passive_deletes=True)
