import uuid
from datetime import datetime, timezone
from typing import Optional

from app.domains.identity.entities import IdentityContext

DEFAULT_TITLE = "Untitled document"


class Document:
    """Метаданные документа, нужные для решений о доступе"""

    def __init__(
        self,
        uuid: uuid.UUID,
        title: str,
        owner_id: str,
        organization_id: Optional[str] = None,
        initial_content: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.uuid = uuid
        self.title = title
        self.owner_id = owner_id
        self.organization_id = organization_id
        self.initial_content = initial_content
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = updated_at or self.created_at

    def update_title(self, new_title: str) -> None:
        """Обновление заголовка документа"""
        self.title = new_title
        self.updated_at = datetime.now(timezone.utc)

    @classmethod
    def create_document(
        cls,
        creator: IdentityContext,
        title: Optional[str] = None,
        initial_content: Optional[str] = None
    ) -> "Document":
        """Создание нового документа от имени вызывающего"""
        return cls(
            uuid=uuid.uuid4(),
            title=title or DEFAULT_TITLE,
            owner_id=creator.subject,
            # Организация фиксируется при создании и больше не меняется
            organization_id=creator.organization_id,
            initial_content=initial_content
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, title={self.title}, owner_id={self.owner_id})"
