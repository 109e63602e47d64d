from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.services.directory_service import DirectoryService
from ....core.dependencies import get_directory_service
from ...api.dependencies import require_auth
from ...api.responses import success
from ...api.schemas.users import UserCreateRequest, UserUpdateRequest

router = APIRouter(prefix="/api/users", tags=["Users"], dependencies=[Depends(require_auth)])


@router.get("")
def list_users(service: DirectoryService = Depends(get_directory_service)) -> Dict[str, Any]:
    users = service.list_users()
    return success([user.to_public_dict() for user in users], count=len(users))


@router.get("/{user_id}")
def get_user(user_id: str, service: DirectoryService = Depends(get_directory_service)) -> Dict[str, Any]:
    return success(service.get_user(user_id).to_public_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    service: DirectoryService = Depends(get_directory_service),
) -> Dict[str, Any]:
    user = service.create_user(payload.model_dump(exclude_unset=True))
    return success(user.to_public_dict())


@router.put("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    service: DirectoryService = Depends(get_directory_service),
) -> Dict[str, Any]:
    user = service.update_user(user_id, payload.model_dump(exclude_unset=True))
    return success(user.to_public_dict())


@router.delete("/{user_id}")
def delete_user(user_id: str, service: DirectoryService = Depends(get_directory_service)) -> Dict[str, Any]:
    user = service.delete_user(user_id)
    return success(user.to_public_dict(), message="User deleted successfully")
