import pytest

from app.core.exceptions import AuthorizationError
from app.core.permissions import (
    PERMISSIONS,
    Permission,
    can_perform_action,
    has_permission,
    require_action,
    require_permission,
)
from app.core.tenant_context import UserContext, require_admin
from app.models.user import Role


def make_context(role, user_id=1):
    return UserContext(user_id=user_id, email="someone@acme.com", role=role, tenant_id=1, tenant_slug="acme")


def test_every_permission_has_roles():
    """The permission table covers the whole enum."""
    assert set(PERMISSIONS) == set(Permission)
    for roles in PERMISSIONS.values():
        assert Role.ADMIN in roles


def test_admin_has_every_permission():
    for permission in Permission:
        assert has_permission(Role.ADMIN, permission)


@pytest.mark.parametrize("permission", [
    Permission.CREATE_NOTE,
    Permission.READ_OWN_NOTES,
    Permission.UPDATE_OWN_NOTES,
    Permission.DELETE_OWN_NOTES,
])
def test_member_note_permissions(permission):
    assert has_permission(Role.MEMBER, permission)


@pytest.mark.parametrize("permission", [
    Permission.INVITE_USERS,
    Permission.LIST_USERS,
    Permission.UPGRADE_SUBSCRIPTION,
    Permission.DELETE_ALL_NOTES,
])
def test_member_lacks_admin_permissions(permission):
    assert not has_permission(Role.MEMBER, permission)
    with pytest.raises(AuthorizationError):
        require_permission(make_context(Role.MEMBER), permission)


def test_member_can_only_act_on_own_resources():
    member = make_context(Role.MEMBER, user_id=7)
    assert can_perform_action(member, Permission.UPDATE_OWN_NOTES, 7)
    assert not can_perform_action(member, Permission.UPDATE_OWN_NOTES, 8)
    assert can_perform_action(member, Permission.UPDATE_OWN_NOTES)


def test_admin_can_act_on_any_resource():
    admin = make_context(Role.ADMIN, user_id=1)
    assert can_perform_action(admin, Permission.DELETE_OWN_NOTES, 99)


def test_require_action_uses_custom_message():
    member = make_context(Role.MEMBER, user_id=7)
    with pytest.raises(AuthorizationError, match="only edit your own"):
        require_action(member, Permission.UPDATE_OWN_NOTES, 8, message="You can only edit your own notes")


def test_require_admin():
    require_admin(make_context(Role.ADMIN))
    with pytest.raises(AuthorizationError):
        require_admin(make_context(Role.MEMBER))
