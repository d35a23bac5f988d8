from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
import uuid

from app.core.auth import get_optional_identity
from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.domains.documents.entities import Document
from app.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentResponse, DocumentListResponse,
    DocumentLookupRequest, DocumentReference, DocumentAccessResponse
)
from app.domains.documents.services import DocumentService
from app.domains.identity.entities import IdentityContext

router = APIRouter(prefix="/documents", tags=["documents"])


def _to_response(document: Document) -> DocumentResponse:
    return DocumentResponse(
        uuid=document.uuid,
        title=document.title,
        owner_id=document.owner_id,
        organization_id=document.organization_id,
        initial_content=document.initial_content,
        created_at=document.created_at,
        updated_at=document.updated_at
    )


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Создание нового документа"""
    document_service = DocumentService(db, settings)
    document = await document_service.create_document(identity, document_data)
    return _to_response(document)


@router.get("/", response_model=DocumentListResponse)
async def list_documents(
    search: Optional[str] = Query(None, max_length=255),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Получение списка документов с поиском по заголовку"""
    document_service = DocumentService(db, settings)

    offset = (page - 1) * per_page
    documents, total = await document_service.list_documents(
        identity,
        search=search or None,
        limit=per_page,
        offset=offset
    )

    return DocumentListResponse(
        documents=[_to_response(doc) for doc in documents],
        total=total,
        page=page,
        per_page=per_page
    )


@router.post("/lookup", response_model=List[DocumentReference])
async def lookup_documents(
    lookup: DocumentLookupRequest,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Заголовки документов по списку идентификаторов"""
    document_service = DocumentService(db, settings)
    return await document_service.get_document_titles(identity, lookup.ids)


@router.get("/{document_uuid}", response_model=DocumentResponse)
async def get_document(
    document_uuid: uuid.UUID,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Получение документа по UUID"""
    document_service = DocumentService(db, settings)
    document, _ = await document_service.get_document(identity, document_uuid)
    return _to_response(document)


@router.patch("/{document_uuid}", response_model=DocumentResponse)
async def update_document_title(
    document_uuid: uuid.UUID,
    document_data: DocumentUpdate,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Переименование документа"""
    document_service = DocumentService(db, settings)
    document = await document_service.update_title(identity, document_uuid, document_data.title)
    return _to_response(document)


@router.delete("/{document_uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_uuid: uuid.UUID,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Удаление документа"""
    document_service = DocumentService(db, settings)
    await document_service.delete_document(identity, document_uuid)


@router.get("/{document_uuid}/access", response_model=DocumentAccessResponse)
async def get_document_access(
    document_uuid: uuid.UUID,
    identity: Optional[IdentityContext] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Уровень доступа текущего пользователя к документу"""
    document_service = DocumentService(db, settings)
    document, decision = await document_service.get_access(identity, document_uuid)

    capabilities = decision.capabilities
    return DocumentAccessResponse(
        document_id=document.uuid,
        owner_id=document.owner_id,
        verdict=decision.verdict,
        is_owner=decision.is_owner,
        can_read=capabilities.read,
        can_write_title=capabilities.write_title,
        can_delete=capabilities.delete,
        can_manage_sharing=capabilities.manage_sharing,
        can_edit_realtime=capabilities.realtime_edit
    )
