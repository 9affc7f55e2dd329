import enum
from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class Plan(str, enum.Enum):
    FREE = "FREE"
    PRO = "PRO"

class Tenant(Base, TimestampMixin):
    __tablename__ = "tenant"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    plan = Column(Enum(Plan, name="plan"), nullable=False, default=Plan.FREE)

    users = relationship("User", back_populates="tenant", cascade="all")
    notes = relationship("Note", back_populates="tenant", cascade="all")
    invitations = relationship("Invitation", back_populates="tenant", cascade="all")
