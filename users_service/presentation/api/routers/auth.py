from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.models import Principal
from ...api.dependencies import require_auth
from ...api.responses import success
from ...api.schemas.auth import LoginRequest, PasswordChangeRequest, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    user, token = service.register(payload.model_dump(exclude_unset=True))
    return success({"user": user.to_public_dict(), "token": token})


@router.post("/login")
def login(
    payload: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    user, token = service.login(payload.model_dump(exclude_unset=True))
    return success({"user": user.to_public_dict(), "token": token})


@router.get("/me")
def me(
    principal: Principal = Depends(require_auth),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    return success(service.get_current(principal).to_public_dict())


@router.patch("/password")
def change_password(
    payload: PasswordChangeRequest,
    principal: Principal = Depends(require_auth),
    service: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    user = service.change_password(principal, payload.model_dump(exclude_unset=True))
    return success(user.to_public_dict(), message="Password updated successfully")
