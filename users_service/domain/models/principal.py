from __future__ import annotations

from dataclasses import dataclass

from .user import User, UserRole


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity attached to a request once the bearer token checks out."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
        )

    def has_role(self, role: UserRole) -> bool:
        return self.role == role
