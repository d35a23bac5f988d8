from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import List
import uuid
from datetime import datetime

from app.domains.sharing.entities import SharingRole


class ShareRequest(BaseModel):
    """Схема для выдачи или изменения доступа к документу"""
    user_id: str = Field(..., min_length=1, max_length=255)
    role: SharingRole

    @field_validator('user_id')
    @classmethod
    def validate_user_id(cls, v):
        if not v.strip():
            raise ValueError('User id cannot be empty')
        return v.strip()


class AdminShareRequest(ShareRequest):
    """Схема для административной выдачи доступа"""
    document_id: uuid.UUID


class GrantResponse(BaseModel):
    """Схема для ответа с данными разрешения"""
    uuid: uuid.UUID
    document_id: uuid.UUID
    user_id: str
    role: SharingRole
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GrantListResponse(BaseModel):
    """Схема для списка разрешений"""
    permissions: List[GrantResponse]
    total: int


class RevocationResponse(BaseModel):
    """Схема для ответа на массовый отзыв разрешений"""
    user_id: str
    removed: int
