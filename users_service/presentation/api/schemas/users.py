"""Pydantic schemas for account payloads.

Every field is optional at the schema level so missing values reach the
validation stage and produce the service's own 400 messages.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressPayload(CamelModel):
    """Postal address sub-document."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


class UserCreateRequest(CamelModel):
    """Administrative account creation; password may be omitted."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[AddressPayload] = None


class UserUpdateRequest(CamelModel):
    """Profile update; role and password are accepted only to be refused."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[AddressPayload] = None
    role: Optional[str] = None
    password: Optional[str] = None
