import logging
from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.errors import Forbidden, NotFound, Unauthenticated
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.sharing_repository import SharingRepository
from app.domains.access.resolver import (
    AccessDecision, AccessVerdict, Capability, anonymous_read_decision, resolve_access
)
from app.domains.documents.entities import Document
from app.domains.identity.entities import IdentityContext

logger = logging.getLogger(__name__)


class AccessGateway:
    """Единая точка авторизации для всех операций над документом.

    Загружает документ и (только при необходимости) явное разрешение
    вызывающего, получает вердикт у резолвера и превращает отказ в ошибку.
    """

    def __init__(self, session: AsyncSession, anonymous_read_fallback: bool = False):
        self.document_repository = DocumentRepository(session)
        self.sharing_repository = SharingRepository(session)
        self.anonymous_read_fallback = anonymous_read_fallback

    async def load_document(self, document_id: uuid.UUID) -> Document:
        """Документ или NotFound"""
        document = await self.document_repository.get_by_uuid(document_id)
        if document is None:
            raise NotFound("Document", str(document_id))
        return document

    async def decide(self, identity: Optional[IdentityContext], document: Document) -> AccessDecision:
        """Вердикт для уже загруженного документа"""
        decision = resolve_access(identity, document)

        # Владельцу и членам организации разрешение не нужно
        if decision.verdict == AccessVerdict.DENIED and identity is not None:
            grant = await self.sharing_repository.get_grant(document.uuid, identity.subject)
            if grant is not None:
                decision = resolve_access(identity, document, grant)

        logger.debug(
            f"Access verdict {decision.verdict.value} for "
            f"{identity.subject if identity else 'anonymous'} on document {document.uuid}"
        )
        return decision

    async def authorize(
        self,
        identity: Optional[IdentityContext],
        document_id: uuid.UUID,
        capability: Capability
    ) -> Tuple[Document, AccessDecision]:
        """Проверка возможности для вошедшего пользователя"""
        if identity is None:
            raise Unauthenticated()

        document = await self.load_document(document_id)
        decision = await self.decide(identity, document)

        if not decision.allows(capability):
            logger.info(
                f"Denied {capability.value} on document {document_id} "
                f"for {identity.subject} (verdict {decision.verdict.value})"
            )
            raise Forbidden(capability.value)

        return document, decision

    async def authorize_read(
        self,
        identity: Optional[IdentityContext],
        document_id: uuid.UUID
    ) -> Tuple[Document, AccessDecision]:
        """Чтение документа с учетом политики анонимного чтения"""
        if identity is not None:
            return await self.authorize(identity, document_id, Capability.READ)

        document = await self.load_document(document_id)

        if not self.anonymous_read_fallback:
            raise Unauthenticated()

        logger.info(f"Anonymous read of document {document_id} allowed by fallback policy")
        return document, anonymous_read_decision()
