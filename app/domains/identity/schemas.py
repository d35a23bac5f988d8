from pydantic import BaseModel
from typing import Optional


class CurrentUserResponse(BaseModel):
    """Схема для профиля текущего пользователя"""
    id: str
    name: str
    email: Optional[str] = None
    avatar: str = ""
    organization_id: Optional[str] = None


class ShareableUserResponse(BaseModel):
    """Схема пользователя в списке для выдачи доступа"""
    id: str
    name: str
    avatar: str = ""
    # Цвет назначается клиентом
    color: str = ""
