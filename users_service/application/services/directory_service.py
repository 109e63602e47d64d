from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from ...domain.errors import DUPLICATE_EMAIL_MESSAGE, ConflictError, NotFoundError, ValidationError
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from ...domain.validation import validate_account_update, validate_new_account
from ...services.credentials import PasswordHasher

logger = logging.getLogger(__name__)

INVALID_ID_MESSAGE = "Invalid user ID format"


class DirectoryService:
    """Generic CRUD over account records for authenticated callers."""

    def __init__(self, repository: UserRepository, hasher: PasswordHasher) -> None:
        self._repository = repository
        self._hasher = hasher

    def list_users(self) -> List[User]:
        return self._repository.list_users()

    def get_user(self, user_id: str) -> User:
        self.ensure_valid_id(user_id)
        user = self._repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def create_user(self, data: Mapping[str, Any]) -> User:
        account = validate_new_account(data)
        if self._repository.email_taken(account.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        password_hash = self._hasher.hash(account.password) if account.password else None
        user = self._repository.create_user(
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            password_hash=password_hash,
            phone_number=account.phone_number,
            address=account.address,
        )
        logger.info("Created account %s", user.email)
        return user

    def update_user(self, user_id: str, data: Mapping[str, Any]) -> User:
        self.ensure_valid_id(user_id)
        account = validate_account_update(data)
        if self._repository.email_taken(account.email, exclude_id=user_id):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        changes: Dict[str, Any] = {
            "email": account.email,
            "first_name": account.first_name,
            "last_name": account.last_name,
        }
        clear = []
        if "phone_number" in account.provided:
            if account.phone_number:
                changes["phone_number"] = account.phone_number
            else:
                clear.append("phone_number")
        if "address" in account.provided:
            if account.address is not None:
                changes["address"] = account.address
            else:
                clear.append("address")

        user = self._repository.update_profile(user_id, changes, clear=clear)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Updated account %s", user.id)
        return user

    def delete_user(self, user_id: str) -> User:
        self.ensure_valid_id(user_id)
        user = self._repository.delete_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Deleted account %s (%s)", user.id, user.email)
        return user

    def ensure_valid_id(self, user_id: str) -> None:
        if not self._repository.is_valid_id(user_id):
            raise ValidationError(INVALID_ID_MESSAGE)
