from app.core import subscription as plans
from app.models.tenant import Plan


def test_free_plan_limits():
    limits = plans.get_plan_limits(Plan.FREE)
    assert limits.max_notes == 3
    assert limits.max_users == 5
    assert limits.features["basicNotes"] is True


def test_pro_plan_is_unlimited():
    limits = plans.get_plan_limits(Plan.PRO)
    assert limits.max_notes is None
    assert limits.max_users is None
    assert plans.can_create_note(Plan.PRO, 10_000)
    assert plans.can_invite_user(Plan.PRO, 10_000)
    assert plans.get_remaining_notes(Plan.PRO, 50) is None


def test_free_note_cap():
    assert plans.can_create_note(Plan.FREE, 0)
    assert plans.can_create_note(Plan.FREE, 2)
    assert not plans.can_create_note(Plan.FREE, 3)
    assert not plans.can_create_note(Plan.FREE, 4)


def test_free_user_cap():
    assert plans.can_invite_user(Plan.FREE, 4)
    assert not plans.can_invite_user(Plan.FREE, 5)


def test_remaining_never_negative():
    assert plans.get_remaining_notes(Plan.FREE, 1) == 2
    assert plans.get_remaining_notes(Plan.FREE, 7) == 0
    assert plans.get_remaining_users(Plan.FREE, 2) == 3


def test_upgrade_path():
    assert plans.can_upgrade_plan(Plan.FREE)
    assert not plans.can_upgrade_plan(Plan.PRO)
    unlocked = plans.features_unlocked_by_upgrade()
    assert "apiAccess" in unlocked
    assert "basicNotes" not in unlocked


def test_features_and_display_names():
    assert plans.has_feature(Plan.PRO, "prioritySupport")
    assert not plans.has_feature(Plan.FREE, "prioritySupport")
    assert not plans.has_feature(Plan.FREE, "noSuchFeature")
    assert plans.get_plan_display_name(Plan.FREE) == "Free Plan"
    assert plans.get_plan_display_name(Plan.PRO) == "Pro Plan"


def test_format_limit():
    assert plans.format_limit(None) == "unlimited"
    assert plans.format_limit(3) == "3"
