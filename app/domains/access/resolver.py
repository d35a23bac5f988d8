"""Разрешение уровня доступа к документу.

Чистые функции без обращения к хранилищам: на вход подаются уже
загруженные личность, документ и явное разрешение, на выходе вердикт и
производный набор возможностей. Вердикт вычисляется заново при каждом
запросе и нигде не кэшируется.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict

from app.domains.documents.entities import Document
from app.domains.identity.entities import IdentityContext
from app.domains.sharing.entities import SharingGrant, SharingRole


class AccessVerdict(str, Enum):
    """Уровень доступа пары (документ, личность)"""
    OWNER = "owner"
    ORGANIZATION_MEMBER = "organization-member"
    SHARED_EDITOR = "shared-editor"
    SHARED_VIEWER = "shared-viewer"
    DENIED = "denied"


class Capability(str, Enum):
    """Отдельное разрешение, выводимое из вердикта"""
    READ = "read"
    WRITE_TITLE = "write-title"
    DELETE = "delete"
    MANAGE_SHARING = "manage-sharing"
    REALTIME_EDIT = "realtime-edit"


@dataclass(frozen=True)
class Capabilities:
    """Набор возможностей вердикта"""
    read: bool = False
    write_title: bool = False
    delete: bool = False
    manage_sharing: bool = False
    realtime_edit: bool = False

    def allows(self, capability: Capability) -> bool:
        return getattr(self, capability.name.lower())


_FULL = Capabilities(read=True, write_title=True, delete=True, manage_sharing=True, realtime_edit=True)

CAPABILITY_TABLE: Dict[AccessVerdict, Capabilities] = {
    AccessVerdict.OWNER: _FULL,
    AccessVerdict.ORGANIZATION_MEMBER: _FULL,
    # Явное разрешение никогда не дает права удаления
    AccessVerdict.SHARED_EDITOR: Capabilities(
        read=True, write_title=True, delete=False, manage_sharing=True, realtime_edit=True
    ),
    AccessVerdict.SHARED_VIEWER: Capabilities(read=True),
    AccessVerdict.DENIED: Capabilities(),
}


@dataclass(frozen=True)
class AccessDecision:
    """Вердикт вместе с производными возможностями"""
    verdict: AccessVerdict
    capabilities: Capabilities

    @property
    def is_owner(self) -> bool:
        return self.verdict == AccessVerdict.OWNER

    def allows(self, capability: Capability) -> bool:
        return self.capabilities.allows(capability)


def resolve_verdict(
    identity: Optional[IdentityContext],
    document: Document,
    grant: Optional[SharingGrant] = None,
) -> AccessVerdict:
    """Вердикт для личности и документа.

    Правила проверяются по порядку, срабатывает первое подходящее:
    нет личности, владелец, член организации документа, разрешение
    редактора, разрешение читателя, отказ.

    Разрешение, относящееся к другому документу или другому пользователю,
    игнорируется.
    """
    if identity is None:
        return AccessVerdict.DENIED

    if document.owner_id == identity.subject:
        return AccessVerdict.OWNER

    if document.organization_id and document.organization_id == identity.organization_id:
        return AccessVerdict.ORGANIZATION_MEMBER

    if grant is not None and grant.applies_to(document.uuid, identity.subject):
        if grant.role == SharingRole.EDITOR:
            return AccessVerdict.SHARED_EDITOR
        if grant.role == SharingRole.VIEWER:
            return AccessVerdict.SHARED_VIEWER

    return AccessVerdict.DENIED


def capabilities_for(verdict: AccessVerdict) -> Capabilities:
    """Возможности, которые дает вердикт"""
    return CAPABILITY_TABLE[verdict]


def resolve_access(
    identity: Optional[IdentityContext],
    document: Document,
    grant: Optional[SharingGrant] = None,
) -> AccessDecision:
    """Полное решение о доступе. Никогда не бросает исключений при отказе."""
    verdict = resolve_verdict(identity, document, grant)
    return AccessDecision(verdict=verdict, capabilities=capabilities_for(verdict))


def anonymous_read_decision() -> AccessDecision:
    """Решение для анонимного чтения, когда политика его допускает.

    Вердикт остается отказом: открывается только чтение содержимого,
    все остальные операции по-прежнему требуют входа.
    """
    return AccessDecision(verdict=AccessVerdict.DENIED, capabilities=Capabilities(read=True))
