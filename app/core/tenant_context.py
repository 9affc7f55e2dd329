from dataclasses import dataclass
from app.models.user import Role
from app.core.exceptions import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class UserContext:
    """
    Verified identity of the caller.

    Built once from the JWT at the request boundary and passed explicitly
    through router, service and CRUD layers. Every tenant-scoped query takes
    its tenant_id from here.
    """
    user_id: int
    email: str
    role: Role
    tenant_id: int
    tenant_slug: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_claims(cls, payload: dict) -> "UserContext":
        """
        Build a context from decoded token claims.

        Raises:
            AuthenticationError: If any claim is missing or malformed
        """
        try:
            return cls(
                user_id=int(payload["userId"]),
                email=str(payload["email"]),
                role=Role(payload["role"]),
                tenant_id=int(payload["tenantId"]),
                tenant_slug=str(payload["tenantSlug"]),
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token claims")

    def to_claims(self) -> dict:
        return {
            "userId": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "tenantId": self.tenant_id,
            "tenantSlug": self.tenant_slug,
        }


def require_admin(context: UserContext) -> None:
    if not context.is_admin:
        raise AuthorizationError("Admin role required for this action")
