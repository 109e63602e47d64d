from typing import Any, Dict

from fastapi import APIRouter, Depends

from ....application.services.admin_service import AdminService
from ....core.dependencies import get_admin_service
from ....domain.models import Principal
from ...api.dependencies import require_admin
from ...api.responses import success

router = APIRouter(prefix="/api/admin", tags=["Administration"])


@router.get("/stats")
def admin_stats(
    _: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    stats = service.stats()
    return success(
        {
            "stats": {
                "totalUsers": stats["total_users"],
                "totalAdmins": stats["total_admins"],
                "regularUsers": stats["regular_users"],
            },
            "recentUsers": [user.to_public_dict() for user in stats["recent_users"]],
        }
    )


@router.patch("/{user_id}/promote")
def promote_user(
    user_id: str,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    user = service.promote(principal, user_id)
    return success(user.to_public_dict(), message="User promoted to administrator successfully")


@router.patch("/{user_id}/demote")
def demote_user(
    user_id: str,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> Dict[str, Any]:
    user = service.demote(principal, user_id)
    return success(user.to_public_dict(), message="Administrator demoted to user successfully")
