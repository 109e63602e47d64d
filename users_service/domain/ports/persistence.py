from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol

from ..models import Address, User, UserRole


class UserRepository(Protocol):
    """Persistence functions related to account records.

    Implementations enforce one account per normalized email and raise
    ``ConflictError`` when an insert or update would break that rule.
    """

    def is_valid_id(self, user_id: str) -> bool:
        ...

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str, include_password: bool = False) -> Optional[User]:
        ...

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        ...

    def list_users(self, limit: Optional[int] = None) -> List[User]:
        ...

    def count_users(self, role: Optional[UserRole] = None) -> int:
        ...

    def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        password_hash: Optional[str] = None,
        role: UserRole = UserRole.USER,
        phone_number: Optional[str] = None,
        address: Optional[Address] = None,
    ) -> User:
        ...

    def update_profile(
        self,
        user_id: str,
        changes: Dict[str, Any],
        clear: Iterable[str] = (),
    ) -> Optional[User]:
        ...

    def update_user_password(self, user_id: str, password_hash: str) -> Optional[User]:
        ...

    def set_role(self, user_id: str, role: UserRole) -> Optional[User]:
        ...

    def delete_user(self, user_id: str) -> Optional[User]:
        ...

    def close(self) -> None:
        ...
