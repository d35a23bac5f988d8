import logging
from typing import Optional, List

from app.core.errors import ExternalServiceFailure, Unauthenticated
from app.domains.identity.entities import DirectoryScope, IdentityContext
from app.domains.identity.schemas import ShareableUserResponse
from app.infrastructure.identity.client import IdentityProviderClient

logger = logging.getLogger(__name__)


class DirectoryService:
    """Список пользователей, которым можно выдать доступ к документу"""

    def __init__(self, client: IdentityProviderClient):
        self.client = client

    async def list_shareable_users(
        self,
        identity: Optional[IdentityContext],
        scope: DirectoryScope = DirectoryScope.ORGANIZATION
    ) -> List[ShareableUserResponse]:
        """Пользователи организации вызывающего или все пользователи.

        Чтение без гарантий: при недоступности провайдера возвращается
        пустой список, ошибка только логируется.
        """
        if identity is None:
            raise Unauthenticated()

        if scope == DirectoryScope.ORGANIZATION and not identity.organization_id:
            return []

        organization_id = identity.organization_id if scope == DirectoryScope.ORGANIZATION else None

        try:
            users = await self.client.list_users(organization_id=organization_id)
        except ExternalServiceFailure as e:
            logger.error(f"Listing shareable users for {identity.subject} failed: {e.message}")
            return []

        return [
            ShareableUserResponse(id=user.id, name=user.display_name, avatar=user.avatar_url or "")
            for user in users
        ]
