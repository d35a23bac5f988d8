from fastapi import APIRouter, Depends, Query
from typing import Optional, List

from app.core.auth import get_optional_identity
from app.domains.identity.entities import DirectoryScope, IdentityContext
from app.domains.identity.schemas import CurrentUserResponse, ShareableUserResponse
from app.domains.identity.services import DirectoryService
from app.infrastructure.identity.client import IdentityProviderClient, get_identity_client

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[ShareableUserResponse])
async def list_shareable_users(
    scope: DirectoryScope = Query(DirectoryScope.ORGANIZATION),
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    client: IdentityProviderClient = Depends(get_identity_client)
):
    """Пользователи, которым можно выдать доступ"""
    directory_service = DirectoryService(client)
    return await directory_service.list_shareable_users(identity, scope)


@router.get("/me", response_model=Optional[CurrentUserResponse])
async def get_current_user(
    identity: Optional[IdentityContext] = Depends(get_optional_identity)
):
    """Профиль текущего пользователя; null для анонимного запроса"""
    if identity is None:
        return None

    return CurrentUserResponse(
        id=identity.subject,
        name=identity.presence_name,
        email=identity.email,
        avatar=identity.avatar_url or "",
        organization_id=identity.organization_id
    )
