from typing import Optional

from .users import AddressPayload, CamelModel


class RegisterRequest(CamelModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[AddressPayload] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordChangeRequest(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None
