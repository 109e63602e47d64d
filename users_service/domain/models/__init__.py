"""Domain models for the users service."""

from .principal import Principal
from .user import Address, User, UserRole

__all__ = [
    "Address",
    "Principal",
    "User",
    "UserRole",
]
