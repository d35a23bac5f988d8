from app.domains.sharing.entities import SharingGrant, SharingRole

__all__ = [
    "SharingGrant",
    "SharingRole"
]
