from typing import Optional, List, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
import uuid

from app.db.models.document import Document as DocumentModel
from app.domains.documents.entities import Document


class DocumentRepository:
    """Репозиторий для работы с метаданными документов"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: Document) -> Document:
        """Создание нового документа"""
        db_document = DocumentModel(
            uuid=document.uuid,
            title=document.title,
            owner_id=document.owner_id,
            organization_id=document.organization_id,
            initial_content=document.initial_content,
            created_at=document.created_at,
            updated_at=document.updated_at
        )

        self.session.add(db_document)
        await self.session.commit()
        await self.session.refresh(db_document)
        return self._to_domain(db_document)

    async def get_by_uuid(self, document_uuid: uuid.UUID) -> Optional[Document]:
        """Получение документа по UUID"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def get_by_uuids(self, document_uuids: Sequence[uuid.UUID]) -> List[Document]:
        """Получение нескольких документов; отсутствующие пропускаются"""
        if not document_uuids:
            return []

        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid.in_(list(document_uuids)))
        )
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def update_title(self, document: Document) -> Optional[Document]:
        """Обновление заголовка документа"""
        stmt = (
            update(DocumentModel)
            .where(DocumentModel.uuid == document.uuid)
            .values(title=document.title, updated_at=document.updated_at)
        )

        await self.session.execute(stmt)
        await self.session.commit()

        return await self.get_by_uuid(document.uuid)

    async def delete(self, document_uuid: uuid.UUID, commit: bool = True) -> bool:
        """Удаление документа"""
        stmt = delete(DocumentModel).where(DocumentModel.uuid == document_uuid)
        result = await self.session.execute(stmt)
        if commit:
            await self.session.commit()
        return result.rowcount > 0

    async def list_documents(
        self,
        owner_id: Optional[str] = None,
        organization_id: Optional[str] = None,
        title_query: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Document]:
        """Документы владельца или организации, с необязательным поиском по заголовку"""
        base_query = self._scoped_query(select(DocumentModel), owner_id, organization_id, title_query)

        result = await self.session.execute(
            base_query
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def count_documents(
        self,
        owner_id: Optional[str] = None,
        organization_id: Optional[str] = None,
        title_query: Optional[str] = None
    ) -> int:
        """Подсчет документов с теми же условиями, что и list_documents"""
        base_query = self._scoped_query(
            select(func.count(DocumentModel.uuid)), owner_id, organization_id, title_query
        )
        result = await self.session.execute(base_query)
        return result.scalar()

    def _scoped_query(self, base_query, owner_id, organization_id, title_query):
        if organization_id is None and owner_id is None:
            raise ValueError("Document listing must be scoped to an owner or an organization")

        if organization_id is not None:
            base_query = base_query.where(DocumentModel.organization_id == organization_id)
        else:
            base_query = base_query.where(DocumentModel.owner_id == owner_id)

        if title_query:
            base_query = base_query.where(DocumentModel.title.icontains(title_query, autoescape=True))

        return base_query

    def _to_domain(self, db_document: DocumentModel) -> Document:
        """Преобразование модели БД в доменную сущность"""
        return Document(
            uuid=db_document.uuid,
            title=db_document.title,
            owner_id=db_document.owner_id,
            organization_id=db_document.organization_id,
            initial_content=db_document.initial_content,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
