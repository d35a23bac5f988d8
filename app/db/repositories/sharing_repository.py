from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, and_, func
from sqlalchemy.dialects import postgresql, sqlite
import uuid

from app.core.errors import ConfigurationError
from app.db.base import utcnow
from app.db.models.sharing import DocumentPermission as DocumentPermissionModel
from app.domains.sharing.entities import SharingGrant, SharingRole

# Диалекты с поддержкой INSERT ... ON CONFLICT
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_for_dialect(dialect_name: str):
    """Конструктор INSERT ... ON CONFLICT для диалекта или ConfigurationError"""
    try:
        return _UPSERT_INSERTS[dialect_name]
    except KeyError:
        raise ConfigurationError(
            f"Database dialect {dialect_name} has no atomic upsert; "
            f"supported: {', '.join(sorted(_UPSERT_INSERTS))}"
        ) from None


class SharingRepository:
    """Хранилище явных разрешений (документ, пользователь) -> роль.

    Уникальность пары обеспечивает ограничение в БД, а не проверка перед
    вставкой: upsert выполняется одним оператором INSERT ... ON CONFLICT.
    Порядок вставки хранится в монотонной колонке position.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._dialect_name = session.get_bind().dialect.name
        self._insert = insert_for_dialect(self._dialect_name)

    async def upsert_grant(self, document_id: uuid.UUID, user_id: str, role: SharingRole) -> uuid.UUID:
        """Создание или обновление единственного разрешения для пары; возвращает его id"""
        now = utcnow()
        values = dict(
            uuid=uuid.uuid4(),
            document_id=document_id,
            user_id=user_id,
            role=SharingRole(role),
            created_at=now,
            updated_at=now
        )
        if self._dialect_name == "sqlite":
            # В SQLite нет identity для не-ключевых колонок; запись сериализована блокировкой БД
            values["position"] = (
                select(func.coalesce(func.max(DocumentPermissionModel.position), 0) + 1)
                .scalar_subquery()
            )

        stmt = self._insert(DocumentPermissionModel).values(**values)
        # position при обновлении не меняется
        stmt = stmt.on_conflict_do_update(
            index_elements=["document_id", "user_id"],
            set_={"role": stmt.excluded.role, "updated_at": stmt.excluded.updated_at}
        ).returning(DocumentPermissionModel.uuid)

        result = await self.session.execute(stmt)
        grant_id = result.scalar_one()
        await self.session.commit()
        return grant_id

    async def remove_grant(self, document_id: uuid.UUID, user_id: str) -> bool:
        """Удаление разрешения; отсутствие разрешения не считается ошибкой"""
        stmt = delete(DocumentPermissionModel).where(
            and_(
                DocumentPermissionModel.document_id == document_id,
                DocumentPermissionModel.user_id == user_id
            )
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount > 0

    async def get_grant(self, document_id: uuid.UUID, user_id: str) -> Optional[SharingGrant]:
        """Разрешение пользователя на документ"""
        result = await self.session.execute(
            select(DocumentPermissionModel).where(
                and_(
                    DocumentPermissionModel.document_id == document_id,
                    DocumentPermissionModel.user_id == user_id
                )
            )
        )
        db_grant = result.scalar_one_or_none()
        return self._to_domain(db_grant) if db_grant else None

    async def list_grants(self, document_id: uuid.UUID) -> List[SharingGrant]:
        """Все разрешения документа в порядке создания"""
        result = await self.session.execute(
            select(DocumentPermissionModel)
            .where(DocumentPermissionModel.document_id == document_id)
            .order_by(DocumentPermissionModel.position.asc())
        )
        return [self._to_domain(grant) for grant in result.scalars().all()]

    async def list_grants_for_user(self, user_id: str) -> List[SharingGrant]:
        """Все разрешения пользователя"""
        result = await self.session.execute(
            select(DocumentPermissionModel)
            .where(DocumentPermissionModel.user_id == user_id)
            .order_by(DocumentPermissionModel.position.asc())
        )
        return [self._to_domain(grant) for grant in result.scalars().all()]

    async def list_all(self) -> List[SharingGrant]:
        """Все разрешения системы (только для административных операций)"""
        result = await self.session.execute(
            select(DocumentPermissionModel)
            .order_by(DocumentPermissionModel.position.asc())
        )
        return [self._to_domain(grant) for grant in result.scalars().all()]

    async def remove_all_for_user(self, user_id: str) -> int:
        """Отзыв всех разрешений пользователя"""
        stmt = delete(DocumentPermissionModel).where(DocumentPermissionModel.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    async def remove_all_for_document(self, document_id: uuid.UUID, commit: bool = True) -> int:
        """Удаление всех разрешений документа"""
        stmt = delete(DocumentPermissionModel).where(DocumentPermissionModel.document_id == document_id)
        result = await self.session.execute(stmt)
        if commit:
            await self.session.commit()
        return result.rowcount

    def _to_domain(self, db_grant: DocumentPermissionModel) -> SharingGrant:
        """Преобразование модели БД в доменную сущность"""
        return SharingGrant(
            uuid=db_grant.uuid,
            document_id=db_grant.document_id,
            user_id=db_grant.user_id,
            role=db_grant.role,
            created_at=db_grant.created_at,
            updated_at=db_grant.updated_at
        )
