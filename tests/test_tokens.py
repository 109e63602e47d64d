from datetime import datetime, timedelta, timezone

import jwt
import pytest

from users_service.services.tokens import TokenError, TokenErrorReason, TokenService

USER_ID = "507f1f77bcf86cd799439011"


def test_issue_then_verify_returns_subject(tokens):
    token = tokens.issue(USER_ID)

    assert isinstance(token, str)
    assert tokens.verify(token) == USER_ID


def test_token_carries_issue_and_expiry_times(tokens, settings):
    token = tokens.issue(USER_ID)
    payload = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])

    assert payload["sub"] == USER_ID
    assert payload["exp"] > payload["iat"]
    assert payload["exp"] - payload["iat"] == int(timedelta(hours=1).total_seconds())


def test_different_subjects_get_different_tokens(tokens):
    assert tokens.issue(USER_ID) != tokens.issue("507f1f77bcf86cd799439012")


@pytest.mark.parametrize("token", ["not-a-token", "invalid.token.here", ""])
def test_malformed_tokens(tokens, token):
    with pytest.raises(TokenError) as excinfo:
        tokens.verify(token)
    assert excinfo.value.reason == TokenErrorReason.MALFORMED


def test_expired_token(tokens, settings):
    past = datetime.now(tz=timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {"sub": USER_ID, "iat": past, "exp": past + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm="HS256",
    )

    with pytest.raises(TokenError) as excinfo:
        tokens.verify(token)
    assert excinfo.value.reason == TokenErrorReason.EXPIRED


def test_token_signed_with_another_key(tokens):
    foreign = TokenService("wrong-secret").issue(USER_ID)

    with pytest.raises(TokenError) as excinfo:
        tokens.verify(foreign)
    assert excinfo.value.reason == TokenErrorReason.INVALID_SIGNATURE


def test_token_without_subject_is_malformed(tokens, settings):
    now = datetime.now(tz=timezone.utc)
    token = jwt.encode(
        {"iat": now, "exp": now + timedelta(hours=1)},
        settings.jwt_secret,
        algorithm="HS256",
    )

    with pytest.raises(TokenError) as excinfo:
        tokens.verify(token)
    assert excinfo.value.reason == TokenErrorReason.MALFORMED


def test_missing_secret_is_fatal():
    with pytest.raises(RuntimeError):
        TokenService("")
