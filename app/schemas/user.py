from datetime import datetime
from pydantic import BaseModel
from typing import List
from app.models.user import Role
from app.schemas.common import Pagination

class UserBase(BaseModel):
    email: str
    role: Role

class UserResponse(UserBase):
    id: int
    tenant_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class UserList(BaseModel):
    users: List[UserResponse]
    pagination: Pagination
