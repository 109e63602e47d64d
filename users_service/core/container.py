from dataclasses import dataclass

from ..application.services.account_service import AccountService
from ..application.services.admin_service import AdminService
from ..application.services.directory_service import DirectoryService
from .config import Settings
from ..domain.ports.persistence import UserRepository
from ..services.credentials import PasswordHasher
from ..services.tokens import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    repository: UserRepository
    password_hasher: PasswordHasher
    token_service: TokenService
    account_service: AccountService
    directory_service: DirectoryService
    admin_service: AdminService

    @classmethod
    def build(cls, settings: Settings, repository: UserRepository) -> "ApplicationContainer":
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        tokens = TokenService(
            secret_key=settings.jwt_secret,
            expires_in=settings.jwt_expires_in,
            algorithm=settings.jwt_algorithm,
        )
        return cls(
            settings=settings,
            repository=repository,
            password_hasher=hasher,
            token_service=tokens,
            account_service=AccountService(repository, hasher, tokens),
            directory_service=DirectoryService(repository, hasher),
            admin_service=AdminService(repository, hasher),
        )
