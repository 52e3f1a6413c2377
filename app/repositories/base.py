"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic save/find/count/delete operations plus sorted and paged
listing. Transactions are owned by the caller (router or test); repositories
only add, flush and query within the given session.

Usage:
    class TeamRepository(BaseRepository[Team]):
        def __init__(self) -> None:
            super().__init__(Team)
"""

from typing import Any, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapper

from app.database import Base
from app.utils.pagination import Page, PageRequest, SortOrder, apply_sort, paginate

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    def is_new(self, entity: ModelType) -> bool:
        """엔티티가 아직 저장되지 않았는지 판단합니다.

        Decide whether ``entity`` has never been stored:
            1. 엔티티가 ``is_new()``를 정의하면 그 결과 (the entity's own answer)
            2. 버전 컬럼이 있으면 버전이 None인지 (a None version on versioned models)
            3. 그 외에는 PK가 None인지 (otherwise a None primary key)
        """
        own_check = getattr(entity, "is_new", None)
        if callable(own_check):
            return bool(own_check())

        mapper: Mapper = inspect(self.model)
        if mapper.version_id_col is not None:
            version_key: str = mapper.get_property_by_column(mapper.version_id_col).key
            return getattr(entity, version_key) is None
        return any(value is None for value in mapper.primary_key_from_instance(entity))

    async def save(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """엔티티를 저장합니다 — 신규는 persist, 기존은 merge.

        Store an entity. New entities are added to the session and flushed so
        generated keys are available; existing ones are merged, which SELECTs
        the current row first and copies the detached state onto it.

        Returns:
            ModelType: 세션이 관리하는 인스턴스 (The session-managed instance;
                       for a merge this is not the object passed in)
        """
        if self.is_new(entity):
            db.add(entity)
            await db.flush()
            return entity
        return await db.merge(entity)

    async def save_all(self, db: AsyncSession, entities: Iterable[ModelType]) -> list[ModelType]:
        return [await self.save(db, entity) for entity in entities]

    async def save_and_flush(self, db: AsyncSession, entity: ModelType) -> ModelType:
        saved: ModelType = await self.save(db, entity)
        await db.flush()
        return saved

    async def flush(self, db: AsyncSession) -> None:
        """세션의 변경 내용을 DB에 반영 — Write pending changes without committing."""
        await db.flush()

    async def find_by_id(self, db: AsyncSession, record_id: Any) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Identity-map aware lookup: an instance already in the session is
        returned as-is without a query.

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        return await db.get(self.model, record_id)

    async def find_all(
        self,
        db: AsyncSession,
        sort: list[SortOrder] | None = None,
    ) -> list[ModelType]:
        """모든 레코드를 조회합니다 — Retrieve all records, optionally sorted."""
        query: Select = apply_sort(select(self.model), self.model, sort or [])
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def find_all_by_id(self, db: AsyncSession, ids: Iterable[Any]) -> list[ModelType]:
        id_list: list[Any] = list(ids)
        if not id_list:
            return []
        result = await db.execute(select(self.model).where(self.model.id.in_(id_list)))
        return list(result.scalars().all())

    async def find_all_paged(self, db: AsyncSession, page_request: PageRequest) -> Page:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve one page of records plus the total count.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page_request: 페이지 번호/크기/정렬 (Page number, size and sort)

        Returns:
            Page: 엔티티 페이지 (Page of entities)
        """
        query: Select = apply_sort(select(self.model), self.model, page_request.sort)
        count_query: Select = select(func.count()).select_from(self.model)
        return await paginate(db, query, page_request, count_query=count_query)

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def exists_by_id(self, db: AsyncSession, record_id: Any) -> bool:
        """주어진 ID의 레코드가 존재하는지 확인합니다.

        Returns:
            bool: 레코드 존재 여부 (Whether a matching record exists)
        """
        query: Select = (
            select(func.count()).select_from(self.model).where(self.model.id == record_id)
        )
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def delete(self, db: AsyncSession, entity: ModelType) -> None:
        await db.delete(entity)
        await db.flush()

    async def delete_by_id(self, db: AsyncSession, record_id: Any) -> bool:
        """레코드를 삭제합니다.

        Returns:
            bool: 삭제 성공 여부 (False when no row has that id)
        """
        db_obj: ModelType | None = await self.find_by_id(db, record_id)
        if db_obj is None:
            return False
        await self.delete(db, db_obj)
        return True

    async def delete_all(self, db: AsyncSession) -> int:
        """모든 레코드를 하나씩 삭제합니다 — ORM cascade 규칙이 적용됨.

        Loads and deletes every record one by one so ORM cascades apply.

        Returns:
            int: 삭제된 레코드 수 (Number of deleted records)
        """
        entities: Sequence[ModelType] = await BaseRepository.find_all(self, db)
        for entity in entities:
            await db.delete(entity)
        await db.flush()
        return len(entities)
