import logging
from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.config import Settings
from app.core.errors import InvalidOperation, NotFound
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.sharing_repository import SharingRepository
from app.domains.access.gateway import AccessGateway
from app.domains.access.resolver import Capability
from app.domains.identity.entities import IdentityContext
from app.domains.sharing.entities import SharingGrant, SharingRole

logger = logging.getLogger(__name__)


class SharingService:
    """Управление явными разрешениями на документ"""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.sharing_repository = SharingRepository(session)
        self.gateway = AccessGateway(session, anonymous_read_fallback=settings.anonymous_read_fallback)

    async def share(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID,
        user_id: str,
        role: SharingRole
    ) -> SharingGrant:
        """Выдача или изменение доступа пользователю"""
        document, _ = await self.gateway.authorize(identity, document_uuid, Capability.MANAGE_SHARING)

        if user_id == identity.subject:
            raise InvalidOperation("Cannot share a document with yourself")

        if user_id == document.owner_id:
            raise InvalidOperation("Document owner already has full access")

        grant_id = await self.sharing_repository.upsert_grant(document_uuid, user_id, role)
        logger.info(f"User {identity.subject} granted {SharingRole(role).value} on {document_uuid} to {user_id}")

        grant = await self.sharing_repository.get_grant(document_uuid, user_id)
        if grant is None:
            # Разрешение успели отозвать конкурирующим запросом
            raise NotFound("Permission", str(grant_id))
        return grant

    async def remove_share(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID,
        user_id: str
    ) -> bool:
        """Отзыв доступа; отсутствие разрешения не ошибка"""
        await self.gateway.authorize(identity, document_uuid, Capability.MANAGE_SHARING)

        removed = await self.sharing_repository.remove_grant(document_uuid, user_id)
        if removed:
            logger.info(f"User {identity.subject} revoked access to {document_uuid} from {user_id}")
        return removed

    async def list_shares(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID
    ) -> List[SharingGrant]:
        """Список разрешений документа"""
        await self.gateway.authorize(identity, document_uuid, Capability.READ)
        return await self.sharing_repository.list_grants(document_uuid)


class AdminSharingService:
    """Административные операции в обход проверки доступа.

    Вызываются только из маршрутов, защищенных служебным ключом.
    """

    def __init__(self, session: AsyncSession):
        self.document_repository = DocumentRepository(session)
        self.sharing_repository = SharingRepository(session)

    async def list_all_grants(self) -> List[SharingGrant]:
        return await self.sharing_repository.list_all()

    async def grant(self, document_uuid: uuid.UUID, user_id: str, role: SharingRole) -> SharingGrant:
        """Выдача доступа без проверки прав вызывающего"""
        document = await self.document_repository.get_by_uuid(document_uuid)
        if document is None:
            raise NotFound("Document", str(document_uuid))

        if user_id == document.owner_id:
            raise InvalidOperation("Document owner already has full access")

        await self.sharing_repository.upsert_grant(document_uuid, user_id, role)
        logger.warning(f"Administrative grant of {SharingRole(role).value} on {document_uuid} to {user_id}")

        grant = await self.sharing_repository.get_grant(document_uuid, user_id)
        if grant is None:
            raise NotFound("Permission", f"{document_uuid}/{user_id}")
        return grant

    async def revoke_all_for_user(self, user_id: str) -> int:
        """Отзыв всех разрешений пользователя"""
        removed = await self.sharing_repository.remove_all_for_user(user_id)
        logger.warning(f"Administrative revocation of {removed} permissions for {user_id}")
        return removed
