from sqlalchemy import Column, String, ForeignKey, UUID, Enum, UniqueConstraint, BigInteger, Identity
from sqlalchemy.orm import relationship

from app.db.base import BaseModel
from app.domains.sharing.entities import SharingRole


class DocumentPermission(BaseModel):
    __tablename__ = "document_permissions"
    __table_args__ = (
        # Не больше одного разрешения на пару (документ, пользователь)
        UniqueConstraint("document_id", "user_id", name="uq_document_permissions_document_user"),
    )

    document_id = Column(
        UUID(as_uuid=True),
        ForeignKey("documents.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(255), nullable=False, index=True)
    role = Column(
        Enum(SharingRole, name="sharing_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # Порядок вставки; в PostgreSQL заполняется identity, в SQLite явно репозиторием
    position = Column(BigInteger, Identity(), nullable=False, index=True)

    # Relationships
    document = relationship("Document", back_populates="permissions")
