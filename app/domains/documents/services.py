import logging
from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from app.core.config import Settings
from app.core.errors import NotFound, Unauthenticated
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.sharing_repository import SharingRepository
from app.domains.access.gateway import AccessGateway
from app.domains.access.resolver import AccessDecision, Capability
from app.domains.documents.entities import Document
from app.domains.documents.schemas import DocumentCreate, DocumentReference
from app.domains.identity.entities import IdentityContext

logger = logging.getLogger(__name__)

MISSING_DOCUMENT_NAME = "Document not found"


class DocumentService:
    """Сервис для работы с документами"""

    def __init__(self, session: AsyncSession, settings: Settings):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.sharing_repository = SharingRepository(session)
        self.gateway = AccessGateway(session, anonymous_read_fallback=settings.anonymous_read_fallback)

    async def create_document(self, identity: Optional[IdentityContext], document_data: DocumentCreate) -> Document:
        """Создание нового документа"""
        if identity is None:
            raise Unauthenticated()

        document = Document.create_document(
            creator=identity,
            title=document_data.title,
            initial_content=document_data.initial_content
        )

        created_document = await self.document_repository.create(document)
        logger.info(f"Document {created_document.uuid} created by {identity.subject}")
        return created_document

    async def list_documents(
        self,
        identity: Optional[IdentityContext],
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Document], int]:
        """Документы организации вызывающего, а без организации его собственные"""
        if identity is None:
            raise Unauthenticated()

        if identity.organization_id:
            scope = {"organization_id": identity.organization_id}
        else:
            scope = {"owner_id": identity.subject}

        documents = await self.document_repository.list_documents(
            title_query=search, limit=limit, offset=offset, **scope
        )
        total = await self.document_repository.count_documents(title_query=search, **scope)
        return documents, total

    async def get_document(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID
    ) -> Tuple[Document, AccessDecision]:
        """Получение документа по UUID"""
        return await self.gateway.authorize_read(identity, document_uuid)

    async def get_document_titles(
        self,
        identity: Optional[IdentityContext],
        document_uuids: List[uuid.UUID]
    ) -> List[DocumentReference]:
        """Заголовки документов; недоступные и удаленные помечаются заглушкой"""
        if identity is None:
            raise Unauthenticated()

        documents = {doc.uuid: doc for doc in await self.document_repository.get_by_uuids(document_uuids)}

        references = []
        for document_uuid in document_uuids:
            document = documents.get(document_uuid)
            name = MISSING_DOCUMENT_NAME
            if document is not None:
                decision = await self.gateway.decide(identity, document)
                if decision.allows(Capability.READ):
                    name = document.title
            references.append(DocumentReference(id=document_uuid, name=name))

        return references

    async def update_title(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID,
        title: str
    ) -> Document:
        """Обновление заголовка документа"""
        document, _ = await self.gateway.authorize(identity, document_uuid, Capability.WRITE_TITLE)

        document.update_title(title)
        updated = await self.document_repository.update_title(document)
        if updated is None:
            # Документ удалили между проверкой и обновлением
            raise NotFound("Document", str(document_uuid))
        return updated

    async def delete_document(self, identity: Optional[IdentityContext], document_uuid: uuid.UUID) -> None:
        """Удаление документа вместе со всеми его разрешениями"""
        await self.gateway.authorize(identity, document_uuid, Capability.DELETE)

        # Разрешения и документ удаляются в одной транзакции
        removed_grants = await self.sharing_repository.remove_all_for_document(document_uuid, commit=False)
        deleted = await self.document_repository.delete(document_uuid, commit=False)
        await self.session.commit()

        if not deleted:
            raise NotFound("Document", str(document_uuid))

        logger.info(
            f"Document {document_uuid} deleted by {identity.subject}, {removed_grants} permissions removed"
        )

    async def get_access(
        self,
        identity: Optional[IdentityContext],
        document_uuid: uuid.UUID
    ) -> Tuple[Document, AccessDecision]:
        """Возможности вызывающего для документа"""
        return await self.gateway.authorize(identity, document_uuid, Capability.READ)
