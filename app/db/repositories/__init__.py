from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.sharing_repository import SharingRepository

__all__ = [
    "DocumentRepository",
    "SharingRepository"
]
