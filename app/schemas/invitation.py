from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import List, Optional
from app.models.user import Role
from app.models.invitation import InvitationStatus
from app.schemas.common import Pagination

PASSWORD_MIN_LENGTH = 8

class InvitationCreate(BaseModel):
    email: EmailStr
    role: Role = Role.MEMBER

    class Config:
        extra = "forbid"

class InvitationAccept(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    confirm_password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self

class InvitationResponse(BaseModel):
    id: int
    email: str
    role: Role
    status: InvitationStatus
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    created_at: datetime
    invited_by: str

class InvitationCreated(BaseModel):
    id: int
    email: str
    role: Role
    status: InvitationStatus
    expires_at: datetime
    tenant_name: str
    invited_by: str
    invitation_token: str
    invitation_link: str

class InvitationList(BaseModel):
    invitations: List[InvitationResponse]
    pagination: Pagination

class InvitationPreview(BaseModel):
    email: str
    role: Role
    tenant_name: str
    invited_by: str
    expires_at: datetime

class AcceptedUser(BaseModel):
    id: int
    email: str
    role: Role
    tenant_id: int
    tenant_name: str
    tenant_slug: str
