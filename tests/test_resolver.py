"""Access resolver: precedence rules and the capability table."""

import uuid

import pytest

from app.domains.access.resolver import (
    AccessVerdict, Capability, Capabilities, CAPABILITY_TABLE,
    anonymous_read_decision, capabilities_for, resolve_access, resolve_verdict
)
from app.domains.documents.entities import Document
from app.domains.identity.entities import IdentityContext
from app.domains.sharing.entities import SharingGrant, SharingRole

pytestmark = pytest.mark.unit

DOC1 = uuid.UUID("00000000-0000-0000-0000-000000000001")
DOC2 = uuid.UUID("00000000-0000-0000-0000-000000000002")


def make_document(owner_id="alice", organization_id="org1", document_id=DOC1) -> Document:
    return Document(uuid=document_id, title="doc1", owner_id=owner_id, organization_id=organization_id)


def make_grant(user_id, role, document_id=DOC1) -> SharingGrant:
    return SharingGrant(uuid=uuid.uuid4(), document_id=document_id, user_id=user_id, role=role)


class TestPrecedence:
    def test_anonymous_is_denied(self) -> None:
        assert resolve_verdict(None, make_document()) == AccessVerdict.DENIED

    @pytest.mark.parametrize("grant_role", [None, SharingRole.VIEWER, SharingRole.EDITOR])
    @pytest.mark.parametrize("organization_id", [None, "org1", "org2"])
    def test_owner_wins_regardless_of_grants_and_organization(self, grant_role, organization_id) -> None:
        identity = IdentityContext(subject="alice", organization_id=organization_id)
        grant = make_grant("alice", grant_role) if grant_role else None
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.OWNER

    def test_organization_member_beats_viewer_grant(self) -> None:
        identity = IdentityContext(subject="bob", organization_id="org1")
        grant = make_grant("bob", SharingRole.VIEWER)
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.ORGANIZATION_MEMBER

    def test_editor_grant(self) -> None:
        identity = IdentityContext(subject="carol", organization_id="org2")
        grant = make_grant("carol", SharingRole.EDITOR)
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.SHARED_EDITOR

    def test_viewer_grant(self) -> None:
        identity = IdentityContext(subject="carol")
        grant = make_grant("carol", SharingRole.VIEWER)
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.SHARED_VIEWER

    @pytest.mark.parametrize(
        "identity_org, document_org",
        [(None, None), ("org2", "org1"), (None, "org1"), ("org1", None)],
    )
    def test_no_grant_and_no_shared_organization_is_denied(self, identity_org, document_org) -> None:
        identity = IdentityContext(subject="eve", organization_id=identity_org)
        document = make_document(organization_id=document_org)
        assert resolve_verdict(identity, document) == AccessVerdict.DENIED

    def test_document_without_organization_never_matches_missing_organization(self) -> None:
        identity = IdentityContext(subject="eve", organization_id=None)
        assert resolve_verdict(identity, make_document(organization_id=None)) == AccessVerdict.DENIED

    def test_grant_for_another_user_is_ignored(self) -> None:
        identity = IdentityContext(subject="eve")
        grant = make_grant("carol", SharingRole.EDITOR)
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.DENIED

    def test_grant_for_another_document_is_ignored(self) -> None:
        identity = IdentityContext(subject="carol")
        grant = make_grant("carol", SharingRole.EDITOR, document_id=DOC2)
        assert resolve_verdict(identity, make_document(), grant) == AccessVerdict.DENIED


class TestCapabilityTable:
    def test_owner_and_organization_member_have_everything(self) -> None:
        for verdict in (AccessVerdict.OWNER, AccessVerdict.ORGANIZATION_MEMBER):
            capabilities = capabilities_for(verdict)
            assert all(capabilities.allows(capability) for capability in Capability)

    def test_shared_editor_cannot_delete(self) -> None:
        capabilities = capabilities_for(AccessVerdict.SHARED_EDITOR)
        assert capabilities.read
        assert capabilities.write_title
        assert capabilities.manage_sharing
        assert capabilities.realtime_edit
        assert not capabilities.delete

    def test_shared_viewer_can_only_read(self) -> None:
        assert capabilities_for(AccessVerdict.SHARED_VIEWER) == Capabilities(read=True)

    def test_denied_has_nothing(self) -> None:
        capabilities = capabilities_for(AccessVerdict.DENIED)
        assert not any(capabilities.allows(capability) for capability in Capability)

    def test_every_verdict_has_an_entry(self) -> None:
        assert set(CAPABILITY_TABLE) == set(AccessVerdict)

    def test_explicit_grants_never_allow_delete(self) -> None:
        for verdict in (AccessVerdict.SHARED_EDITOR, AccessVerdict.SHARED_VIEWER):
            assert not capabilities_for(verdict).allows(Capability.DELETE)


class TestScenarios:
    def test_colleague_in_same_organization(self) -> None:
        bob = IdentityContext(subject="bob", organization_id="org1")
        decision = resolve_access(bob, make_document())
        assert decision.verdict == AccessVerdict.ORGANIZATION_MEMBER
        assert decision.allows(Capability.WRITE_TITLE)
        assert not decision.is_owner

    def test_viewer_from_other_organization(self) -> None:
        carol = IdentityContext(subject="carol", organization_id="org2")
        decision = resolve_access(carol, make_document(), make_grant("carol", SharingRole.VIEWER))
        assert decision.verdict == AccessVerdict.SHARED_VIEWER
        assert not decision.allows(Capability.WRITE_TITLE)
        assert not decision.allows(Capability.MANAGE_SHARING)

    def test_owner_decision_is_owner(self) -> None:
        decision = resolve_access(IdentityContext(subject="alice"), make_document())
        assert decision.is_owner

    def test_denied_decision_does_not_raise(self) -> None:
        decision = resolve_access(None, make_document())
        assert decision.verdict == AccessVerdict.DENIED
        assert not decision.allows(Capability.READ)

    def test_anonymous_read_fallback_allows_only_read(self) -> None:
        decision = anonymous_read_decision()
        assert decision.verdict == AccessVerdict.DENIED
        assert decision.allows(Capability.READ)
        for capability in (Capability.WRITE_TITLE, Capability.DELETE,
                           Capability.MANAGE_SHARING, Capability.REALTIME_EDIT):
            assert not decision.allows(capability)
