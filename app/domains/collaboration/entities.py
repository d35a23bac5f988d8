from enum import Enum
from typing import Dict, List, Any

from app.domains.identity.entities import IdentityContext


class SessionScope(Enum):
    """Область действия токена сессии совместного редактирования"""
    FULL = "full"
    READ_ONLY = "read-only"

    @property
    def permissions(self) -> List[str]:
        """Права комнаты в терминах сервиса совместного редактирования"""
        if self == SessionScope.FULL:
            return ["room:write"]
        # Только чтение, но курсор и присутствие видны остальным
        return ["room:read", "room:presence:write"]


def presence_color(name: str) -> str:
    """Стабильный цвет курсора, вычисляемый из имени"""
    hue = sum(ord(char) for char in name) % 360
    return f"hsl({hue}, 70%, 50%)"


def presence_info(identity: IdentityContext) -> Dict[str, Any]:
    """Данные пользователя, которые видят другие участники комнаты"""
    name = identity.presence_name
    return {
        "name": name,
        "color": presence_color(name),
        "avatar": identity.avatar_url or "",
    }
