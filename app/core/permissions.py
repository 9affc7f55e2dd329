"""
Role-based access control for tenant users.

Permissions are a closed enum; ``PERMISSIONS`` maps each one to the roles
allowed to exercise it. Ownership rules sit on top: an ADMIN may act on any
resource in the tenant, a MEMBER only on resources they own.

Usage:
    from app.core.permissions import Permission, require_action

    require_action(context, Permission.UPDATE_OWN_NOTES, note.author_id)
"""

import enum
from typing import Dict, FrozenSet, Optional

from app.core.exceptions import AuthorizationError
from app.core.tenant_context import UserContext
from app.models.user import Role


class Permission(str, enum.Enum):
    # Notes
    CREATE_NOTE = "CREATE_NOTE"
    READ_OWN_NOTES = "READ_OWN_NOTES"
    READ_ALL_NOTES = "READ_ALL_NOTES"
    UPDATE_OWN_NOTES = "UPDATE_OWN_NOTES"
    UPDATE_ALL_NOTES = "UPDATE_ALL_NOTES"
    DELETE_OWN_NOTES = "DELETE_OWN_NOTES"
    DELETE_ALL_NOTES = "DELETE_ALL_NOTES"

    # Users
    INVITE_USERS = "INVITE_USERS"
    LIST_USERS = "LIST_USERS"
    UPDATE_USER_ROLES = "UPDATE_USER_ROLES"
    DELETE_USERS = "DELETE_USERS"

    # Tenant
    UPGRADE_SUBSCRIPTION = "UPGRADE_SUBSCRIPTION"
    VIEW_TENANT_STATS = "VIEW_TENANT_STATS"
    MANAGE_TENANT_SETTINGS = "MANAGE_TENANT_SETTINGS"


_ALL_ROLES = frozenset({Role.ADMIN, Role.MEMBER})
_ADMIN_ONLY = frozenset({Role.ADMIN})

PERMISSIONS: Dict[Permission, FrozenSet[Role]] = {
    Permission.CREATE_NOTE: _ALL_ROLES,
    Permission.READ_OWN_NOTES: _ALL_ROLES,
    Permission.READ_ALL_NOTES: _ADMIN_ONLY,
    Permission.UPDATE_OWN_NOTES: _ALL_ROLES,
    Permission.UPDATE_ALL_NOTES: _ADMIN_ONLY,
    Permission.DELETE_OWN_NOTES: _ALL_ROLES,
    Permission.DELETE_ALL_NOTES: _ADMIN_ONLY,
    Permission.INVITE_USERS: _ADMIN_ONLY,
    Permission.LIST_USERS: _ADMIN_ONLY,
    Permission.UPDATE_USER_ROLES: _ADMIN_ONLY,
    Permission.DELETE_USERS: _ADMIN_ONLY,
    Permission.UPGRADE_SUBSCRIPTION: _ADMIN_ONLY,
    Permission.VIEW_TENANT_STATS: _ADMIN_ONLY,
    Permission.MANAGE_TENANT_SETTINGS: _ADMIN_ONLY,
}


def has_permission(role: Role, permission: Permission) -> bool:
    """Return True if ``role`` is allowed to exercise ``permission``."""
    return role in PERMISSIONS.get(permission, frozenset())


def require_permission(context: UserContext, permission: Permission) -> None:
    """
    Raises:
        AuthorizationError: If the caller's role lacks the permission
    """
    if not has_permission(context.role, permission):
        raise AuthorizationError(
            f"Permission '{permission.value}' required. Current role: {context.role.value}"
        )


def can_perform_action(
    context: UserContext,
    permission: Permission,
    resource_owner_id: Optional[int] = None
) -> bool:
    """
    Check a permission, optionally against a specific resource owner.

    Without an owner the role check is sufficient. With one, ADMIN is
    allowed unconditionally and MEMBER only on their own resources.
    """
    if not has_permission(context.role, permission):
        return False

    if resource_owner_id is None:
        return True

    if context.role == Role.ADMIN:
        return True

    return context.user_id == resource_owner_id


def require_action(
    context: UserContext,
    permission: Permission,
    resource_owner_id: Optional[int] = None,
    message: Optional[str] = None
) -> None:
    """
    Raises:
        AuthorizationError: If ``can_perform_action`` denies the call
    """
    if can_perform_action(context, permission, resource_owner_id):
        return

    if message is None:
        if resource_owner_id is not None:
            message = f"Cannot perform '{permission.value}' on resource owned by {resource_owner_id}"
        else:
            message = f"Permission '{permission.value}' required"
    raise AuthorizationError(message)
