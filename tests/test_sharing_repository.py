"""Sharing store against a real SQLite database."""

import asyncio
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.core.errors import ConfigurationError
from app.db.repositories.document_repository import DocumentRepository
from app.db.repositories.sharing_repository import SharingRepository, insert_for_dialect
from app.domains.documents.entities import Document
from app.domains.identity.entities import IdentityContext
from app.domains.sharing.entities import SharingRole

pytestmark = pytest.mark.integration


class TestUpsert:
    async def test_second_upsert_updates_existing_grant(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)

        first_id = await repository.upsert_grant(stored_document.uuid, "bob", SharingRole.VIEWER)
        second_id = await repository.upsert_grant(stored_document.uuid, "bob", SharingRole.EDITOR)

        grants = await repository.list_grants(stored_document.uuid)
        assert first_id == second_id
        assert len(grants) == 1
        assert grants[0].role == SharingRole.EDITOR

    async def test_concurrent_upserts_converge_to_one_row(self, session_factory, stored_document) -> None:
        async def upsert(role: SharingRole) -> uuid.UUID:
            async with session_factory() as session:
                return await SharingRepository(session).upsert_grant(stored_document.uuid, "bob", role)

        roles = [SharingRole.EDITOR if i % 2 else SharingRole.VIEWER for i in range(8)]
        grant_ids = await asyncio.gather(*(upsert(role) for role in roles))

        async with session_factory() as session:
            grants = await SharingRepository(session).list_grants(stored_document.uuid)

        assert len(set(grant_ids)) == 1
        assert len(grants) == 1
        assert grants[0].uuid == grant_ids[0]

    async def test_get_grant(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)
        await repository.upsert_grant(stored_document.uuid, "carol", SharingRole.VIEWER)

        grant = await repository.get_grant(stored_document.uuid, "carol")
        assert grant is not None
        assert grant.applies_to(stored_document.uuid, "carol")
        assert await repository.get_grant(stored_document.uuid, "dave") is None


class TestRemoval:
    async def test_remove_missing_grant_is_noop(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)
        assert await repository.remove_grant(stored_document.uuid, "nobody") is False

    async def test_remove_existing_grant(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)
        await repository.upsert_grant(stored_document.uuid, "bob", SharingRole.VIEWER)

        assert await repository.remove_grant(stored_document.uuid, "bob") is True
        assert await repository.get_grant(stored_document.uuid, "bob") is None

    async def test_remove_all_for_user(self, db_session, stored_document, alice) -> None:
        other = await DocumentRepository(db_session).create(Document.create_document(alice, title="Other"))
        repository = SharingRepository(db_session)
        await repository.upsert_grant(stored_document.uuid, "bob", SharingRole.VIEWER)
        await repository.upsert_grant(other.uuid, "bob", SharingRole.EDITOR)
        await repository.upsert_grant(other.uuid, "carol", SharingRole.EDITOR)

        assert len(await repository.list_grants_for_user("bob")) == 2
        assert await repository.remove_all_for_user("bob") == 2
        assert await repository.list_grants_for_user("bob") == []
        assert len(await repository.list_all()) == 1

    async def test_deleting_document_cascades_grants(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)
        await repository.upsert_grant(stored_document.uuid, "bob", SharingRole.VIEWER)

        assert await DocumentRepository(db_session).delete(stored_document.uuid) is True
        assert await repository.list_grants(stored_document.uuid) == []


class TestOrdering:
    async def test_grants_listed_in_insertion_order(self, db_session, stored_document) -> None:
        repository = SharingRepository(db_session)
        for user_id in ("carol", "bob", "dave"):
            await repository.upsert_grant(stored_document.uuid, user_id, SharingRole.VIEWER)

        # Изменение роли не меняет позицию
        await repository.upsert_grant(stored_document.uuid, "carol", SharingRole.EDITOR)

        grants = await repository.list_grants(stored_document.uuid)
        assert [grant.user_id for grant in grants] == ["carol", "bob", "dave"]

    async def test_same_timestamp_keeps_insertion_order(
        self, db_session, stored_document, alice, monkeypatch
    ) -> None:
        # Все записи с одинаковым created_at: порядок задает только position
        frozen = datetime(2024, 1, 1, tzinfo=timezone.utc)
        monkeypatch.setattr("app.db.repositories.sharing_repository.utcnow", lambda: frozen)

        repository = SharingRepository(db_session)
        user_ids = ["zoe", "mallory", "bob", "yuri", "carol", "adam"]
        for user_id in user_ids:
            await repository.upsert_grant(stored_document.uuid, user_id, SharingRole.VIEWER)

        second = await DocumentRepository(db_session).create(Document.create_document(alice, title="Second"))
        await repository.upsert_grant(second.uuid, "bob", SharingRole.EDITOR)

        assert [g.user_id for g in await repository.list_grants(stored_document.uuid)] == user_ids
        assert [g.document_id for g in await repository.list_grants_for_user("bob")] == [
            stored_document.uuid, second.uuid
        ]
        assert [g.user_id for g in await repository.list_all()] == user_ids + ["bob"]


class TestDialectSupport:
    @pytest.mark.unit
    def test_unsupported_dialect_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError, match="oracle"):
            insert_for_dialect("oracle")

    @pytest.mark.unit
    def test_repository_rejects_unsupported_dialect_on_construction(self) -> None:
        bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
        session = SimpleNamespace(get_bind=lambda: bind)
        with pytest.raises(ConfigurationError, match="supported: postgresql, sqlite"):
            SharingRepository(session)

    @pytest.mark.unit
    def test_supported_dialects(self) -> None:
        assert insert_for_dialect("sqlite") is not None
        assert insert_for_dialect("postgresql") is not None


class TestDocumentListing:
    async def test_organization_scope_and_title_search(self, db_session) -> None:
        repository = DocumentRepository(db_session)
        alice = IdentityContext(subject="alice", organization_id="org1")
        dave = IdentityContext(subject="dave")
        await repository.create(Document.create_document(alice, title="Quarterly plan"))
        await repository.create(Document.create_document(alice, title="Notes"))
        await repository.create(Document.create_document(dave, title="Travel plan"))

        org_documents = await repository.list_documents(organization_id="org1")
        assert {doc.title for doc in org_documents} == {"Quarterly plan", "Notes"}

        found = await repository.list_documents(organization_id="org1", title_query="PLAN")
        assert [doc.title for doc in found] == ["Quarterly plan"]

        assert await repository.count_documents(owner_id="dave", title_query="plan") == 1

    async def test_search_treats_wildcards_literally(self, db_session) -> None:
        repository = DocumentRepository(db_session)
        dave = IdentityContext(subject="dave")
        await repository.create(Document.create_document(dave, title="100% done"))
        await repository.create(Document.create_document(dave, title="1000 items"))

        found = await repository.list_documents(owner_id="dave", title_query="100%")
        assert [doc.title for doc in found] == ["100% done"]

    async def test_unscoped_listing_is_rejected(self, db_session) -> None:
        with pytest.raises(ValueError):
            await DocumentRepository(db_session).list_documents()
