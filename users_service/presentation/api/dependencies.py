import logging
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.dependencies import get_token_service, get_user_repository
from ...domain.errors import ForbiddenError, UnauthorizedError
from ...domain.models import Principal, UserRole
from ...domain.ports.persistence import UserRepository
from ...services.tokens import TokenError, TokenService

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def require_auth(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
    repository: UserRepository = Depends(get_user_repository),
) -> Principal:
    """Resolve the bearer token into a principal or reject the request with 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Access token is required")

    try:
        user_id = tokens.verify(credentials.credentials)
    except TokenError as exc:
        logger.info("Rejected bearer token (%s)", exc.reason.value)
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE) from exc

    user = repository.get_user_by_id(user_id)
    if user is None:
        # Deleted accounts answer exactly like a bad token.
        logger.info("Rejected bearer token: user %s not found", user_id)
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE)

    principal = Principal.from_user(user)
    request.state.principal = principal
    return principal


def require_role(role: UserRole) -> Callable[..., Principal]:
    def _checker(request: Request, principal: Principal = Depends(require_auth)) -> Principal:
        if getattr(request.state, "principal", None) is None:
            raise UnauthorizedError("User not authenticated")
        if not principal.has_role(role):
            logger.warning("Unauthorized attempt by user: %s", principal.email)
            raise ForbiddenError("Permission denied: Administrator access required")
        return principal

    return _checker


require_admin = require_role(UserRole.ADMIN)
