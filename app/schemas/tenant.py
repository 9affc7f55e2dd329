from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Dict, List, Optional
from app.models.tenant import Plan

class TenantBase(BaseModel):
    slug: str
    name: str
    plan: Plan

class TenantResponse(TenantBase):
    id: int

    class Config:
        from_attributes = True

class TenantCreate(BaseModel):
    """Operator request to provision a tenant with its first admin."""
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    email: EmailStr
    password: str = Field(..., min_length=8)
    plan: Plan = Plan.FREE

class PlanLimitsResponse(BaseModel):
    max_notes: Optional[int] = None
    max_users: Optional[int] = None

class UsageResponse(BaseModel):
    current_notes: int
    current_users: int

class RemainingResponse(BaseModel):
    notes: Optional[int] = None
    users: Optional[int] = None

class SubscriptionStatus(BaseModel):
    """Plan, caps, usage and headroom of a tenant. None means unlimited."""
    plan: Plan
    plan_display_name: str
    limits: PlanLimitsResponse
    usage: UsageResponse
    remaining: RemainingResponse
    features: Dict[str, bool]
    can_upgrade: bool

class LimitCheckResult(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    current_usage: int
    limit: Optional[int] = None
    plan_required: Optional[Plan] = None

class UpgradeBenefits(BaseModel):
    notes_unlocked: bool
    users_unlocked: bool
    features_unlocked: List[str]

class UpgradedBy(BaseModel):
    user_id: int
    email: str

class UpgradeDetails(BaseModel):
    from_plan: Plan
    to_plan: Plan
    timestamp: datetime
    upgraded_by: UpgradedBy
    benefits: UpgradeBenefits

class UpgradeResult(BaseModel):
    tenant: TenantResponse
    upgrade: UpgradeDetails
    current_usage: UsageResponse

class UpgradeEligibility(BaseModel):
    eligible: bool
    current_plan: Plan
    target_plan: Plan
    reason: Optional[str] = None

class UpgradeEligibilityResponse(BaseModel):
    tenant: TenantResponse
    plan_display_name: str
    upgrade: UpgradeEligibility
    current_usage: UsageResponse
    limits_after_upgrade: PlanLimitsResponse

class TenantInfo(BaseModel):
    tenant: TenantResponse
    user_id: int
    user_role: str
    subscription: SubscriptionStatus

class TenantProvisioned(BaseModel):
    tenant: TenantResponse
    admin_user_id: int
    admin_email: str
