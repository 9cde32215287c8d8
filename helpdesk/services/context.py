from __future__ import annotations

from dataclasses import dataclass

from helpdesk.core.errors import AuthError, NotFoundError
from helpdesk.schemas.profile import ProfileOut
from helpdesk.services.auth import AuthProvider, Identity
from helpdesk.services.permissions import RolePolicy, policy_for
from helpdesk.services.profiles import ProfileStore


@dataclass(frozen=True)
class AuthContext:
    """The signed-in caller, handed explicitly to every staff operation."""

    identity: Identity
    profile: ProfileOut

    @property
    def user_id(self) -> str:
        return self.identity.id

    @property
    def role(self) -> str:
        return self.profile.role

    @property
    def is_admin(self) -> bool:
        return self.profile.role == "admin"

    @property
    def policy(self) -> RolePolicy:
        return policy_for(self.profile.role)


async def resolve_auth_context(
    auth: AuthProvider, profiles: ProfileStore, token: str | None
) -> AuthContext:
    identity = await auth.get_current_user(token)
    if identity is None:
        raise AuthError("Unauthorized")
    profile = await profiles.get_profile(identity.id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return AuthContext(identity=identity, profile=profile)
