import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.config import Settings
from app.domains.access.gateway import AccessGateway
from app.domains.access.resolver import Capability
from app.domains.collaboration.entities import SessionScope, presence_info
from app.domains.collaboration.identifiers import sanitize_user_id
from app.domains.identity.entities import IdentityContext
from app.infrastructure.realtime.client import RealtimeAuthorization, RealtimeClient

logger = logging.getLogger(__name__)


class RealtimeSessionService:
    """Выдача токенов сессий совместного редактирования"""

    def __init__(self, session: AsyncSession, settings: Settings, client: RealtimeClient):
        self.gateway = AccessGateway(session, anonymous_read_fallback=settings.anonymous_read_fallback)
        self.client = client

    async def issue_session(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID
    ) -> RealtimeAuthorization:
        """Токен для комнаты документа.

        Требует права чтения. Полный доступ к комнате выдается только при
        наличии права редактирования, иначе сессия только для чтения.
        """
        _, decision = await self.gateway.authorize(identity, document_uuid, Capability.READ)

        scope = SessionScope.FULL if decision.allows(Capability.REALTIME_EDIT) else SessionScope.READ_ONLY
        room = str(document_uuid)

        authorization = await self.client.authorize_user(
            user_id=sanitize_user_id(identity.subject),
            user_info=presence_info(identity),
            permissions={room: scope.permissions},
        )

        logger.info(
            f"Issued {scope.value} realtime session for {identity.subject} "
            f"in room {room} (verdict {decision.verdict.value})"
        )
        return authorization
