"""Validation of raw account payloads into typed inputs.

Every function here takes the snake_case mapping produced by the request
schemas and either returns a frozen input object or raises
:class:`ValidationError`. Nothing in this module touches storage.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional

from .errors import ValidationError
from .models import Address

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 50
MAX_EMAIL_LENGTH = 254

EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,3}$", re.ASCII)
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$", re.ASCII)
_PHONE_SEPARATORS = re.compile(r"[\s().-]")

ADDRESS_LIMITS = {
    "street": 100,
    "city": 50,
    "state": 50,
    "zip_code": 20,
    "country": 50,
}
_ADDRESS_LABELS = {
    "street": "Street",
    "city": "City",
    "state": "State",
    "zip_code": "Zip code",
    "country": "Country",
}


@dataclass(frozen=True, slots=True)
class AccountInput:
    email: str
    first_name: str
    last_name: str
    password: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[Address] = None
    # Optional profile fields present in the payload; an empty value clears the field.
    provided: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class PasswordChangeInput:
    current_password: str
    new_password: str


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_registration(data: Mapping[str, Any]) -> AccountInput:
    """Self-service registration: the password is mandatory."""
    if not _all_present(data, "email", "first_name", "last_name", "password"):
        raise ValidationError("Email, firstName, lastName, and password are required")
    _check_password_length(data["password"])
    return _build_account(data, password=data["password"])


def validate_new_account(data: Mapping[str, Any]) -> AccountInput:
    """Administrative creation: the password may be set later."""
    if not _all_present(data, "email", "first_name", "last_name"):
        raise ValidationError("Email, firstName, and lastName are required")
    password = data.get("password") or None
    if password is not None:
        _check_password_length(password)
    return _build_account(data, password=password)


def validate_account_update(data: Mapping[str, Any]) -> AccountInput:
    if data.get("role") is not None or data.get("password") is not None:
        raise ValidationError("Role and password cannot be changed through this endpoint")
    if not _all_present(data, "email", "first_name", "last_name"):
        raise ValidationError("Email, firstName, and lastName are required")
    return _build_account(data, password=None)


def validate_login(data: Mapping[str, Any]) -> LoginInput:
    if not _all_present(data, "email", "password"):
        raise ValidationError("Email and password are required")
    return LoginInput(email=normalize_email(data["email"]), password=data["password"])


def validate_password_change(data: Mapping[str, Any]) -> PasswordChangeInput:
    if not _all_present(data, "current_password", "new_password"):
        raise ValidationError("currentPassword and newPassword are required")
    _check_password_length(data["new_password"])
    return PasswordChangeInput(
        current_password=data["current_password"],
        new_password=data["new_password"],
    )


# ----------------------------------------------------------------------
def _all_present(data: Mapping[str, Any], *keys: str) -> bool:
    for key in keys:
        value = data.get(key)
        if value is None:
            return False
        if isinstance(value, str) and not value.strip():
            return False
    return True


def _check_password_length(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def _build_account(data: Mapping[str, Any], password: Optional[str]) -> AccountInput:
    errors: List[str] = []

    email = normalize_email(data["email"])
    if len(email) > MAX_EMAIL_LENGTH or not EMAIL_PATTERN.match(email):
        errors.append("Please enter a valid email address")

    first_name = data["first_name"].strip()
    if len(first_name) > MAX_NAME_LENGTH:
        errors.append(f"First name cannot be more than {MAX_NAME_LENGTH} characters")
    last_name = data["last_name"].strip()
    if len(last_name) > MAX_NAME_LENGTH:
        errors.append(f"Last name cannot be more than {MAX_NAME_LENGTH} characters")

    provided = set()
    phone_number = None
    if "phone_number" in data:
        provided.add("phone_number")
        phone_number = (data["phone_number"] or "").strip() or None
        if phone_number and not PHONE_PATTERN.match(_PHONE_SEPARATORS.sub("", phone_number)):
            errors.append("Please enter a valid phone number")

    address = None
    if "address" in data:
        provided.add("address")
        address = _build_address(data["address"], errors)

    if errors:
        raise ValidationError(", ".join(errors))

    return AccountInput(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password=password,
        phone_number=phone_number,
        address=address,
        provided=frozenset(provided),
    )


def _build_address(raw: Optional[Mapping[str, Any]], errors: List[str]) -> Optional[Address]:
    if not raw:
        return None
    values = {}
    for key, limit in ADDRESS_LIMITS.items():
        value = raw.get(key)
        if value is None:
            continue
        value = value.strip()
        if not value:
            continue
        if len(value) > limit:
            errors.append(f"{_ADDRESS_LABELS[key]} cannot be more than {limit} characters")
        values[key] = value
    address = Address(**values)
    return None if address.is_empty() else address
