from app.domains.identity.entities import IdentityContext, DirectoryScope, DirectoryUser
from app.domains.identity.schemas import CurrentUserResponse, ShareableUserResponse

__all__ = [
    "IdentityContext", "DirectoryScope", "DirectoryUser",
    "CurrentUserResponse", "ShareableUserResponse"
]
