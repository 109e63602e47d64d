from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from ...domain.errors import DUPLICATE_EMAIL_MESSAGE, ConflictError
from ...domain.models import Address, User, UserRole
from ...domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)


_FIELD_NAMES = {
    "email": "email",
    "first_name": "firstName",
    "last_name": "lastName",
    "phone_number": "phoneNumber",
    "address": "address",
}
_WITHOUT_PASSWORD = {"passwordHash": 0}
_NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


class MongoUserRepository(UserRepository):
    """MongoDB-backed implementation of the account repository."""

    def __init__(self, client: MongoClient, database: str, collection: str = "users") -> None:
        self._client = client
        self._users: Collection = client[database][collection]
        self._initialize()

    def _initialize(self) -> None:
        self._users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        self._users.create_index([("createdAt", DESCENDING)], name="created_at_desc")
        logger.debug("User collection indexes ensured on %s", self._users.full_name)

    def close(self) -> None:
        self._client.close()

    # Lookups ----------------------------------------------------------------
    def is_valid_id(self, user_id: str) -> bool:
        return ObjectId.is_valid(user_id)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        object_id = self._object_id(user_id)
        if object_id is None:
            return None
        doc = self._users.find_one({"_id": object_id}, _WITHOUT_PASSWORD)
        return self._doc_to_user(doc) if doc else None

    def get_user_by_email(self, email: str, include_password: bool = False) -> Optional[User]:
        projection = None if include_password else _WITHOUT_PASSWORD
        doc = self._users.find_one({"email": email}, projection)
        return self._doc_to_user(doc) if doc else None

    def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        query: Dict[str, Any] = {"email": email}
        object_id = self._object_id(exclude_id) if exclude_id else None
        if object_id is not None:
            query["_id"] = {"$ne": object_id}
        return self._users.find_one(query, {"_id": 1}) is not None

    def list_users(self, limit: Optional[int] = None) -> List[User]:
        cursor = self._users.find({}, _WITHOUT_PASSWORD).sort(_NEWEST_FIRST)
        if limit:
            cursor = cursor.limit(limit)
        return [self._doc_to_user(doc) for doc in cursor]

    def count_users(self, role: Optional[UserRole] = None) -> int:
        query = {"role": role.value} if role else {}
        return self._users.count_documents(query)

    # Mutations --------------------------------------------------------------
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
        now = _now()
        doc: Dict[str, Any] = {
            "email": email,
            "firstName": first_name,
            "lastName": last_name,
            "role": role.value,
            "createdAt": now,
            "updatedAt": now,
        }
        if password_hash:
            doc["passwordHash"] = password_hash
        if phone_number:
            doc["phoneNumber"] = phone_number
        if address is not None:
            doc["address"] = _address_to_doc(address)
        try:
            result = self._users.insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
        doc["_id"] = result.inserted_id
        return self._doc_to_user(doc)

    def update_profile(
        self,
        user_id: str,
        changes: Dict[str, Any],
        clear: Iterable[str] = (),
    ) -> Optional[User]:
        update_set: Dict[str, Any] = {"updatedAt": _now()}
        for key, value in changes.items():
            if key == "address" and value is not None:
                value = _address_to_doc(value)
            update_set[_FIELD_NAMES[key]] = value
        update: Dict[str, Any] = {"$set": update_set}
        unset = {_FIELD_NAMES[key]: "" for key in clear}
        if unset:
            update["$unset"] = unset
        return self._find_and_update(user_id, update)

    def update_user_password(self, user_id: str, password_hash: str) -> Optional[User]:
        return self._find_and_update(
            user_id, {"$set": {"passwordHash": password_hash, "updatedAt": _now()}}
        )

    def set_role(self, user_id: str, role: UserRole) -> Optional[User]:
        return self._find_and_update(user_id, {"$set": {"role": role.value, "updatedAt": _now()}})

    def delete_user(self, user_id: str) -> Optional[User]:
        object_id = self._object_id(user_id)
        if object_id is None:
            return None
        doc = self._users.find_one_and_delete({"_id": object_id}, projection=_WITHOUT_PASSWORD)
        return self._doc_to_user(doc) if doc else None

    # Helpers ----------------------------------------------------------------
    def _find_and_update(self, user_id: str, update: Dict[str, Any]) -> Optional[User]:
        object_id = self._object_id(user_id)
        if object_id is None:
            return None
        try:
            doc = self._users.find_one_and_update(
                {"_id": object_id},
                update,
                projection=_WITHOUT_PASSWORD,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc
        return self._doc_to_user(doc) if doc else None

    @staticmethod
    def _object_id(user_id: Optional[str]) -> Optional[ObjectId]:
        if not user_id or not ObjectId.is_valid(user_id):
            return None
        return ObjectId(user_id)

    @staticmethod
    def _doc_to_user(doc: Mapping[str, Any]) -> User:
        address_doc = doc.get("address")
        address = None
        if address_doc:
            address = Address(
                street=address_doc.get("street"),
                city=address_doc.get("city"),
                state=address_doc.get("state"),
                zip_code=address_doc.get("zipCode"),
                country=address_doc.get("country"),
            )
        return User(
            id=str(doc["_id"]),
            email=doc["email"],
            first_name=doc["firstName"],
            last_name=doc["lastName"],
            password_hash=doc.get("passwordHash"),
            role=UserRole(doc.get("role", UserRole.USER.value)),
            phone_number=doc.get("phoneNumber"),
            address=address,
            created_at=doc["createdAt"],
            updated_at=doc["updatedAt"],
        )


def _address_to_doc(address: Address) -> Dict[str, str]:
    fields = {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "country": address.country,
    }
    return {key: value for key, value in fields.items() if value is not None}


def _now() -> datetime:
    # BSON dates carry millisecond precision.
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)
