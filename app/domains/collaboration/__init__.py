from app.domains.collaboration.entities import SessionScope, presence_color, presence_info
from app.domains.collaboration.identifiers import (
    SANITIZER_VERSION, sanitize_user_id, restore_user_id
)

__all__ = [
    "SessionScope", "presence_color", "presence_info",
    "SANITIZER_VERSION", "sanitize_user_id", "restore_user_id"
]
