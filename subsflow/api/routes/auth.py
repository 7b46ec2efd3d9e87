"""Auth Routes — sign-up, sign-in, sign-out and the current identity.

Invariants:
    - GET /me never blocks: it reports "loading" while restoration is in flight
    - Failures surface as SubsFlowError envelopes via the global handlers
"""

from fastapi import APIRouter, Depends, status

from subsflow.api.dependencies import get_platform
from subsflow.schemas.auth import (
    IdentityResponse, ProfileResponse, SignInRequest, SignUpRequest,
)
from subsflow.services.platform import Platform

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/sign-up", response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(body: SignUpRequest, platform: Platform = Depends(get_platform)):
    """Register, sign in and receive the welcome notification."""
    profile = await platform.accounts.sign_up(
        body.email, body.password, body.full_name, body.role,
    )
    return ProfileResponse.from_entity(profile)


@router.post("/sign-in", response_model=ProfileResponse)
async def sign_in(body: SignInRequest, platform: Platform = Depends(get_platform)):
    profile = await platform.accounts.sign_in(body.email, body.password)
    return ProfileResponse.from_entity(profile)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(platform: Platform = Depends(get_platform)):
    await platform.accounts.sign_out()


@router.get("/me", response_model=IdentityResponse)
async def me(platform: Platform = Depends(get_platform)):
    return IdentityResponse.from_entity(platform.accounts.identity)
