from __future__ import annotations

import logging
from typing import Any, Mapping, Tuple

from ...domain.errors import DUPLICATE_EMAIL_MESSAGE, ConflictError, NotFoundError, UnauthorizedError
from ...domain.models import Principal, User
from ...domain.ports.persistence import UserRepository
from ...domain.validation import validate_login, validate_password_change, validate_registration
from ...services.credentials import PasswordHasher
from ...services.tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class AccountService:
    """Self-service registration, login and profile access."""

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._repository = repository
        self._hasher = hasher
        self._tokens = tokens

    # ------------------------------------------------------------------
    def register(self, data: Mapping[str, Any]) -> Tuple[User, str]:
        account = validate_registration(data)
        if self._repository.email_taken(account.email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        user = self._repository.create_user(
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            password_hash=self._hasher.hash(account.password),
            phone_number=account.phone_number,
            address=account.address,
        )
        logger.info("Registered new account %s", user.email)
        return user, self._tokens.issue(user.id)

    def login(self, data: Mapping[str, Any]) -> Tuple[User, str]:
        credentials = validate_login(data)
        user = self._repository.get_user_by_email(credentials.email, include_password=True)
        # Unknown email and wrong password share one response.
        if user is None or not self._hasher.verify(credentials.password, user.password_hash):
            logger.info("Failed login attempt for %s", credentials.email)
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)
        return user, self._tokens.issue(user.id)

    def get_current(self, principal: Principal) -> User:
        user = self._repository.get_user_by_id(principal.id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def change_password(self, principal: Principal, data: Mapping[str, Any]) -> User:
        change = validate_password_change(data)
        user = self._repository.get_user_by_email(principal.email, include_password=True)
        if user is None or user.id != principal.id:
            raise NotFoundError("User not found")
        if not self._hasher.verify(change.current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        updated = self._repository.update_user_password(user.id, self._hasher.hash(change.new_password))
        if updated is None:
            raise NotFoundError("User not found")
        logger.info("Password changed for %s", updated.email)
        return updated
