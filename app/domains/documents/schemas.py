from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Optional, List
import uuid
from datetime import datetime

from app.domains.access.resolver import AccessVerdict


class DocumentCreate(BaseModel):
    """Схема для создания документа"""
    title: Optional[str] = Field(None, max_length=255)
    initial_content: Optional[str] = Field(None, max_length=1000000)  # 1MB max content

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        # Пустой заголовок заменяется заглушкой при создании
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class DocumentUpdate(BaseModel):
    """Схема для обновления заголовка документа"""
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    uuid: uuid.UUID
    title: str
    owner_id: str
    organization_id: Optional[str] = None
    initial_content: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """Схема для списка документов"""
    documents: List[DocumentResponse]
    total: int
    page: int
    per_page: int


class DocumentLookupRequest(BaseModel):
    """Схема для запроса заголовков по списку идентификаторов"""
    ids: List[uuid.UUID] = Field(..., max_length=100)


class DocumentReference(BaseModel):
    """Идентификатор и заголовок документа"""
    id: uuid.UUID
    name: str


class DocumentAccessResponse(BaseModel):
    """Схема для ответа с информацией о доступе к документу"""
    document_id: uuid.UUID
    owner_id: str
    verdict: AccessVerdict
    is_owner: bool
    can_read: bool
    can_write_title: bool
    can_delete: bool
    can_manage_sharing: bool
    can_edit_realtime: bool
