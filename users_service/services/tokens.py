"""Issuing and verifying bearer tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt


class TokenErrorReason(str, Enum):
    MALFORMED = "malformed"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid_signature"


class TokenError(Exception):
    """Raised when a bearer token cannot be trusted."""

    def __init__(self, reason: TokenErrorReason, detail: str = "") -> None:
        super().__init__(detail or reason.value)
        self.reason = reason


class TokenService:
    """Signs and checks HS256 JSON Web Tokens carrying an account id as subject."""

    def __init__(
        self,
        secret_key: str,
        expires_in: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ) -> None:
        if not secret_key:
            raise RuntimeError("JWT_SECRET is not configured.")
        self._secret_key = secret_key
        self._expires_in = expires_in
        self._algorithm = algorithm

    @property
    def expires_in(self) -> timedelta:
        return self._expires_in

    def issue(self, subject_id: str) -> str:
        now = datetime.now(tz=timezone.utc)
        payload = {
            "sub": subject_id,
            "iat": now,
            "exp": now + self._expires_in,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """
        Decode a token and return its subject id.

        Raises:
            TokenError: With the reason the token was rejected
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenError(TokenErrorReason.EXPIRED, str(exc)) from exc
        except jwt.InvalidSignatureError as exc:
            raise TokenError(TokenErrorReason.INVALID_SIGNATURE, str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError(TokenErrorReason.MALFORMED, str(exc)) from exc

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise TokenError(TokenErrorReason.MALFORMED, "Token subject is missing")
        return subject
