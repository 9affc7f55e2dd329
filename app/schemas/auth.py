from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from app.models.user import Role
from app.schemas.tenant import TenantResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginUser(BaseModel):
    id: int
    email: str
    role: Role
    tenant_id: int

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    token: str
    user: LoginUser
    tenant: TenantResponse
    expires_in: str


class TokenClaims(BaseModel):
    user_id: int
    email: str
    role: Role
    tenant_id: int
    tenant_slug: str


class TokenValidation(BaseModel):
    valid: bool
    user: TokenClaims
    expires_at: datetime


class TokenRefresh(BaseModel):
    token: str
    expires_at: datetime


class LogoutResponse(BaseModel):
    logged_out: bool
    timestamp: datetime
