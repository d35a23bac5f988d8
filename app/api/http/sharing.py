from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from app.core.auth import get_optional_identity
from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.domains.identity.entities import IdentityContext
from app.domains.sharing.entities import SharingGrant
from app.domains.sharing.schemas import ShareRequest, GrantResponse, GrantListResponse
from app.domains.sharing.services import SharingService

router = APIRouter(prefix="/documents/{document_uuid}/permissions", tags=["sharing"])


def to_grant_response(grant: SharingGrant) -> GrantResponse:
    return GrantResponse(
        uuid=grant.uuid,
        document_id=grant.document_id,
        user_id=grant.user_id,
        role=grant.role,
        created_at=grant.created_at,
        updated_at=grant.updated_at
    )


@router.get("", response_model=GrantListResponse)
async def list_permissions(
    document_uuid: uuid.UUID,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Список пользователей с доступом к документу"""
    sharing_service = SharingService(db, settings)
    grants = await sharing_service.list_shares(identity, document_uuid)
    return GrantListResponse(
        permissions=[to_grant_response(grant) for grant in grants],
        total=len(grants)
    )


@router.put("", response_model=GrantResponse)
async def share_document(
    document_uuid: uuid.UUID,
    share_request: ShareRequest,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Выдача или изменение доступа пользователю"""
    sharing_service = SharingService(db, settings)
    grant = await sharing_service.share(identity, document_uuid, share_request.user_id, share_request.role)
    return to_grant_response(grant)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_permission(
    document_uuid: uuid.UUID,
    user_id: str,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Отзыв доступа пользователя"""
    sharing_service = SharingService(db, settings)
    await sharing_service.remove_share(identity, document_uuid, user_id)
