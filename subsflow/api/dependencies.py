"""API Dependencies — platform lookup and role gates for route handlers.

Invariants:
    - get_platform reads the Platform built in the lifespan (app.state.platform)
    - current_profile waits for session restoration to settle before reading identity
    - require_admin raises PermissionDeniedError for non-admin profiles
"""

from fastapi import Depends, Request

from subsflow.core.domain_types import Role
from subsflow.core.entities import Profile
from subsflow.core.errors import NotAuthenticatedError, PermissionDeniedError
from subsflow.services.platform import Platform


def get_platform(request: Request) -> Platform:
    platform = getattr(request.app.state, "platform", None)
    if platform is None:
        raise RuntimeError("Platform not initialized")
    return platform


async def current_profile(platform: Platform = Depends(get_platform)) -> Profile:
    identity = await platform.sessions.wait_until_settled()
    if not identity.is_authenticated:
        raise NotAuthenticatedError()
    return identity.profile


async def require_admin(profile: Profile = Depends(current_profile)) -> Profile:
    if profile.role != Role.ADMIN:
        raise PermissionDeniedError(Role.ADMIN.value)
    return profile
