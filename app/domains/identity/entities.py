from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class IdentityContext:
    """Проверенная внешним провайдером личность вызывающего.

    Ядро не проверяет токены само, а лишь доверяет переданному объекту.
    Контекст всегда передается явным аргументом, глобального "текущего
    пользователя" нет.
    """

    subject: str
    organization_id: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> Optional["IdentityContext"]:
        """Построение контекста из claims токена провайдера"""
        subject = claims.get("sub")
        if not subject:
            return None

        return cls(
            subject=str(subject),
            # Пустая строка означает отсутствие организации
            organization_id=claims.get("org_id") or None,
            display_name=claims.get("name"),
            email=claims.get("email"),
            avatar_url=claims.get("picture"),
        )

    @property
    def presence_name(self) -> str:
        """Имя для отображения другим участникам"""
        return self.display_name or self.email or "Anonymous"

    def __repr__(self) -> str:
        return f"IdentityContext(subject={self.subject}, organization_id={self.organization_id})"


class DirectoryScope(str, Enum):
    """Круг пользователей, которым можно выдать доступ"""
    ORGANIZATION = "organization"
    ALL = "all"


@dataclass(frozen=True)
class DirectoryUser:
    """Пользователь из каталога провайдера идентификации"""

    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Anonymous"
