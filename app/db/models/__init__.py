from app.db.models.document import Document
from app.db.models.sharing import DocumentPermission

__all__ = [
    "Document",
    "DocumentPermission",
]
