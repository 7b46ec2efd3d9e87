"""Registration Enforcement — pure validation of sign-up input.

Invariants:
    - validate_registration is PURE: returns normalized values or raises FieldValidationError
    - Email is kept case-sensitive as given (only surrounding whitespace is dropped)
    - The credential is never stripped or transformed
    - Role must be one of Role
"""

from subsflow.core.domain_types import Role
from subsflow.core.errors import FieldValidationError


def validate_registration(
    email: str, credential: str, full_name: str, role: str | Role,
) -> tuple[str, str, str, Role]:
    """Return (email, credential, full_name, role) ready for the credential store."""
    email = (email or "").strip()
    if not email:
        raise FieldValidationError("Email is required", "email")
    if not credential:
        raise FieldValidationError("Password is required", "password")

    full_name = (full_name or "").strip()
    if not full_name:
        raise FieldValidationError("Full name is required", "full_name")

    try:
        parsed_role = Role(role)
    except ValueError:
        raise FieldValidationError(
            f"Role must be one of: {', '.join(r.value for r in Role)}", "role",
        ) from None

    return email, credential, full_name, parsed_role
