"""Account domain model shared by authentication, directory and admin flows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(slots=True)
class Address:
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.street, self.city, self.state, self.zip_code, self.country))


class User:
    """
    User entity representing both regular and administrator accounts.

    Attributes:
        id: Opaque unique identifier assigned by the store
        email: Normalized (trimmed, lowercased) email address, unique
        first_name: Given name
        last_name: Family name
        password_hash: bcrypt hash, absent for accounts created without a password
        role: Either ``user`` or ``admin``
        phone_number: Optional contact number
        address: Optional postal address
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    def __init__(
        self,
        id: str,
        email: str,
        first_name: str,
        last_name: str,
        password_hash: Optional[str] = None,
        role: UserRole = UserRole.USER,
        phone_number: Optional[str] = None,
        address: Optional[Address] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.password_hash = password_hash
        self.role = role
        self.phone_number = phone_number
        self.address = address
        self.created_at = created_at or _utcnow()
        self.updated_at = updated_at or _utcnow()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_public_dict(self) -> Dict[str, Any]:
        """Public projection: never includes the password hash."""
        data: Dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
        }
        if self.phone_number:
            data["phoneNumber"] = self.phone_number
        if self.address is not None and not self.address.is_empty():
            address = {
                "street": self.address.street,
                "city": self.address.city,
                "state": self.address.state,
                "zipCode": self.address.zip_code,
                "country": self.address.country,
            }
            data["address"] = {key: value for key, value in address.items() if value is not None}
        data["createdAt"] = _isoformat(self.created_at)
        data["updatedAt"] = _isoformat(self.updated_at)
        return data

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} role={self.role.value}>"


def _isoformat(value: datetime) -> str:
    return value.isoformat(timespec="milliseconds") + "Z"


def _utcnow() -> datetime:
    # Stored values are naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)
