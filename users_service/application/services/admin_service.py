from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import Principal, User, UserRole
from ...domain.ports.persistence import UserRepository
from ...domain.validation import MIN_PASSWORD_LENGTH, normalize_email
from ...services.credentials import PasswordHasher
from .directory_service import INVALID_ID_MESSAGE

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 5


class AdminService:
    """Role management and aggregate statistics reserved to administrators."""

    def __init__(self, repository: UserRepository, hasher: PasswordHasher) -> None:
        self._repository = repository
        self._hasher = hasher

    # ------------------------------------------------------------------
    def ensure_default_admin(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        if not email or not password:
            return None
        if len(password) < MIN_PASSWORD_LENGTH:
            raise RuntimeError(f"ADMIN_PASSWORD must be at least {MIN_PASSWORD_LENGTH} characters long.")
        email_clean = normalize_email(email)
        existing = self._repository.get_user_by_email(email_clean)
        if existing:
            if not existing.is_admin:
                logger.info("Promoting existing account %s to administrator", email_clean)
                return self._repository.set_role(existing.id, UserRole.ADMIN)
            return existing
        logger.info("Creating default administrator account for %s", email_clean)
        return self._repository.create_user(
            email=email_clean,
            first_name="Admin",
            last_name="User",
            password_hash=self._hasher.hash(password),
            role=UserRole.ADMIN,
        )

    def promote(self, principal: Principal, user_id: str) -> User:
        user = self._get_target(user_id)
        if user.is_admin:
            raise ValidationError("User is already an administrator")
        updated = self._set_role(user, UserRole.ADMIN)
        logger.info("User promoted to admin: %s by admin: %s", updated.email, principal.email)
        return updated

    def demote(self, principal: Principal, user_id: str) -> User:
        user = self._get_target(user_id)
        if not user.is_admin:
            raise ValidationError("User is already a regular user")
        if user.id == principal.id:
            raise ValidationError("Cannot demote yourself")
        updated = self._set_role(user, UserRole.USER)
        logger.info("Admin demoted to user: %s by admin: %s", updated.email, principal.email)
        return updated

    def stats(self) -> Dict[str, Any]:
        total_users = self._repository.count_users()
        total_admins = self._repository.count_users(UserRole.ADMIN)
        return {
            "total_users": total_users,
            "total_admins": total_admins,
            "regular_users": total_users - total_admins,
            "recent_users": self._repository.list_users(limit=RECENT_USERS_LIMIT),
        }

    # ------------------------------------------------------------------
    def _get_target(self, user_id: str) -> User:
        if not self._repository.is_valid_id(user_id):
            raise ValidationError(INVALID_ID_MESSAGE)
        user = self._repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _set_role(self, user: User, role: UserRole) -> User:
        updated = self._repository.set_role(user.id, role)
        if updated is None:
            raise NotFoundError("User not found")
        return updated
