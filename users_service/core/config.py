from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


@dataclass(frozen=True)
class Settings:
    """Centralised application configuration, built once at start-up and never mutated."""

    jwt_secret: str
    jwt_expires_in: timedelta = timedelta(days=7)
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 10
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "users-service"
    environment: str = "production"
    admin_default_email: Optional[str] = None
    admin_default_password: Optional[str] = None
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment (and a ``.env`` file when present).

        Raises:
            RuntimeError: If ``JWT_SECRET`` is missing or a value is malformed
        """
        load_dotenv()
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            cors_allow_origins = ["*"]
        return cls(
            jwt_secret=cls._get("JWT_SECRET"),
            jwt_expires_in=parse_duration(os.getenv("JWT_EXPIRES_IN", "7d"), "JWT_EXPIRES_IN"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            bcrypt_rounds=cls._get_int("BCRYPT_ROUNDS", default=10),
            mongodb_uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
            mongodb_database=os.getenv("MONGODB_DATABASE", "users-service"),
            environment=os.getenv("ENVIRONMENT", "production").lower(),
            admin_default_email=os.getenv("ADMIN_EMAIL"),
            admin_default_password=os.getenv("ADMIN_PASSWORD"),
            cors_allow_origins=cors_allow_origins,
        )

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc


def parse_duration(value: str, key: str = "duration") -> timedelta:
    """Parse ``"7d"``, ``"1h"``, ``"30m"``, ``"45s"`` or a bare number of seconds."""
    match = _DURATION_PATTERN.match(value)
    if not match:
        raise RuntimeError(f"Environment variable {key} must look like 7d, 12h, 30m or 3600")
    amount, unit = match.groups()
    duration = timedelta(**{_DURATION_UNITS[unit]: int(amount)})
    if duration <= timedelta(0):
        raise RuntimeError(f"Environment variable {key} must be positive")
    return duration
