"""
Subscription plan limits and the arithmetic on top of them.

Everything here is pure: callers pass in the plan and current counts.
``None`` stands for "unlimited" wherever a limit or remaining count is
returned.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.models.tenant import Plan


@dataclass(frozen=True)
class PlanLimits:
    max_notes: Optional[int]
    max_users: Optional[int]
    features: Dict[str, bool] = field(default_factory=dict)


SUBSCRIPTION_LIMITS: Dict[Plan, PlanLimits] = {
    Plan.FREE: PlanLimits(
        max_notes=3,
        max_users=5,
        features={
            "basicNotes": True,
            "advancedEditor": False,
            "apiAccess": False,
            "customIntegrations": False,
            "prioritySupport": False,
        },
    ),
    Plan.PRO: PlanLimits(
        max_notes=None,
        max_users=None,
        features={
            "basicNotes": True,
            "advancedEditor": True,
            "apiAccess": True,
            "customIntegrations": True,
            "prioritySupport": True,
        },
    ),
}

PLAN_DISPLAY_NAMES = {
    Plan.FREE: "Free Plan",
    Plan.PRO: "Pro Plan",
}


def get_plan_limits(plan: Plan) -> PlanLimits:
    return SUBSCRIPTION_LIMITS[Plan(plan)]


def _below_limit(limit: Optional[int], count: int) -> bool:
    return limit is None or count < limit


def _remaining(limit: Optional[int], count: int) -> Optional[int]:
    if limit is None:
        return None
    return max(0, limit - count)


def can_create_note(plan: Plan, current_note_count: int) -> bool:
    return _below_limit(get_plan_limits(plan).max_notes, current_note_count)


def can_invite_user(plan: Plan, current_user_count: int) -> bool:
    """
    ``current_user_count`` is whatever the caller counts against the cap;
    issuing an invitation counts existing users plus pending invitations.
    """
    return _below_limit(get_plan_limits(plan).max_users, current_user_count)


def get_remaining_notes(plan: Plan, current_note_count: int) -> Optional[int]:
    return _remaining(get_plan_limits(plan).max_notes, current_note_count)


def get_remaining_users(plan: Plan, current_user_count: int) -> Optional[int]:
    return _remaining(get_plan_limits(plan).max_users, current_user_count)


def get_plan_display_name(plan: Plan) -> str:
    return PLAN_DISPLAY_NAMES[Plan(plan)]


def can_upgrade_plan(current_plan: Plan) -> bool:
    return current_plan == Plan.FREE


def has_feature(plan: Plan, feature: str) -> bool:
    return get_plan_limits(plan).features.get(feature, False)


def features_unlocked_by_upgrade() -> List[str]:
    """Features PRO enables that FREE does not."""
    free = SUBSCRIPTION_LIMITS[Plan.FREE].features
    return [
        name for name, enabled in SUBSCRIPTION_LIMITS[Plan.PRO].features.items()
        if enabled and not free.get(name, False)
    ]


def format_limit(value: Optional[int]) -> str:
    """Header/display form of a limit or remaining count."""
    return "unlimited" if value is None else str(value)
