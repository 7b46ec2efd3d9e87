"""Registration Enforcement — tests for pure sign-up validation.

Tests cover:
    - full name is required (blank and whitespace-only)
    - email and password are required
    - email case is preserved, surrounding whitespace dropped
    - role must be user or admin
"""

import pytest

from subsflow.core.domain_types import Role
from subsflow.core.enforce_registration import validate_registration
from subsflow.core.errors import FieldValidationError


def test_valid_input_is_normalized():
    email, password, name, role = validate_registration(
        "  New@Example.com ", " pw ", "  Jane Doe ", "user",
    )
    assert email == "New@Example.com"
    assert password == " pw "
    assert name == "Jane Doe"
    assert role == Role.USER


def test_admin_role_accepted_as_enum():
    *_, role = validate_registration("a@b.c", "pw", "A", Role.ADMIN)
    assert role == Role.ADMIN


@pytest.mark.parametrize("full_name", ["", "   ", None])
def test_full_name_is_required(full_name):
    with pytest.raises(FieldValidationError) as exc:
        validate_registration("a@b.c", "pw", full_name, "user")
    assert exc.value.message == "Full name is required"
    assert exc.value.field == "full_name"
    assert exc.value.http_status == 400


def test_email_is_required():
    with pytest.raises(FieldValidationError) as exc:
        validate_registration("  ", "pw", "Jane", "user")
    assert exc.value.field == "email"


def test_password_is_required():
    with pytest.raises(FieldValidationError) as exc:
        validate_registration("a@b.c", "", "Jane", "user")
    assert exc.value.field == "password"


def test_unknown_role_rejected():
    with pytest.raises(FieldValidationError) as exc:
        validate_registration("a@b.c", "pw", "Jane", "superuser")
    assert exc.value.field == "role"
    assert "user" in exc.value.message and "admin" in exc.value.message
