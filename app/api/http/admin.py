from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.http.sharing import to_grant_response
from app.core.auth import require_admin
from app.core.db import get_db
from app.domains.sharing.schemas import (
    AdminShareRequest, GrantResponse, GrantListResponse, RevocationResponse
)
from app.domains.sharing.services import AdminSharingService

# Служебные операции без проверки доступа к документам
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/permissions", response_model=GrantListResponse)
async def list_all_permissions(db: AsyncSession = Depends(get_db)):
    """Все разрешения в системе"""
    admin_service = AdminSharingService(db)
    grants = await admin_service.list_all_grants()
    return GrantListResponse(
        permissions=[to_grant_response(grant) for grant in grants],
        total=len(grants)
    )


@router.put("/permissions", response_model=GrantResponse)
async def grant_permission(
    share_request: AdminShareRequest,
    db: AsyncSession = Depends(get_db)
):
    """Выдача доступа в обход проверки прав"""
    admin_service = AdminSharingService(db)
    grant = await admin_service.grant(share_request.document_id, share_request.user_id, share_request.role)
    return to_grant_response(grant)


@router.delete("/users/{user_id}/permissions", response_model=RevocationResponse)
async def revoke_user_permissions(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Отзыв всех разрешений пользователя"""
    admin_service = AdminSharingService(db)
    removed = await admin_service.revoke_all_for_user(user_id)
    return RevocationResponse(user_id=user_id, removed=removed)
