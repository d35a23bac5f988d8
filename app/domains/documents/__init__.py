from app.domains.documents.entities import Document, DEFAULT_TITLE

__all__ = [
    "Document",
    "DEFAULT_TITLE"
]
