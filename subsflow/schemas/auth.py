"""Auth Schemas — Pydantic models for sign-up, sign-in and the current identity.

Invariants:
    - SignUpRequest.full_name: stripped, non-empty ("Full name is required")
    - email is stripped but never case-folded
    - IdentityResponse mirrors the tri-state: loading | authenticated | anonymous

Design Decisions:
    - Literal role over Role enum in the request: Pydantic reports the allowed values
    - password is not stripped: whitespace is part of the credential
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from subsflow.core.entities import CurrentIdentity, Profile


class SignInRequest(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email is required")
        return v


class SignUpRequest(SignInRequest):
    full_name: str = Field(max_length=200)
    role: Literal["user", "admin"] = "user"

    @field_validator("full_name")
    @classmethod
    def require_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str
    role: str

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id, email=profile.email,
            full_name=profile.full_name, role=profile.role.value,
        )


class IdentityResponse(BaseModel):
    status: Literal["loading", "authenticated", "anonymous"]
    account_id: str | None = None
    profile: ProfileResponse | None = None

    @classmethod
    def from_entity(cls, identity: CurrentIdentity) -> "IdentityResponse":
        return cls(
            status=identity.status.value,
            account_id=identity.session.account_id if identity.session else None,
            profile=(
                ProfileResponse.from_entity(identity.profile)
                if identity.profile else None
            ),
        )
