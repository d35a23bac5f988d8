import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class SharingRole(str, Enum):
    """Роль, выдаваемая явным разрешением"""
    VIEWER = "viewer"
    EDITOR = "editor"


class SharingGrant:
    """Явное право доступа не-владельца к документу"""

    def __init__(
        self,
        uuid: uuid.UUID,
        document_id: uuid.UUID,
        user_id: str,
        role: SharingRole,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.document_id = document_id
        self.user_id = user_id
        self.role = SharingRole(role)
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def applies_to(self, document_id: uuid.UUID, user_id: str) -> bool:
        """Относится ли разрешение к данной паре (документ, пользователь)"""
        return self.document_id == document_id and self.user_id == user_id

    def __eq__(self, other) -> bool:
        if not isinstance(other, SharingGrant):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"SharingGrant(document_id={self.document_id}, user_id={self.user_id}, role={self.role.value})"
