"""회원 레포지토리 — 조회 메서드, 페이징, 벌크 연산, 페치 전략, 락, 프로젝션.

Member Repository — Query methods, paging, bulk update, fetch strategies,
locking, and projections for the member table.
Extends BaseRepository for generic CRUD and MemberRepositoryCustom for the
hand-written fragment.
"""

from typing import Iterable, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from app.models.member import Member, Team
from app.repositories.base import BaseRepository
from app.repositories.member_repository_custom import MemberRepositoryCustom
from app.schemas.member import MemberDto, UsernameOnly
from app.utils.pagination import (
    Page,
    PageRequest,
    Slice,
    SortOrder,
    apply_sort,
    paginate,
    paginate_slice,
)

ProjectionType = TypeVar("ProjectionType", bound=BaseModel)


class MemberRepository(MemberRepositoryCustom, BaseRepository[Member]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the member table.
    """

    def __init__(self) -> None:
        """MemberRepository를 초기화합니다.

        Initialize the MemberRepository with the Member model.
        """
        super().__init__(Member)

    # ------------------------------------------------------------------
    # 조건 조회 — Filtered lookups
    # ------------------------------------------------------------------

    async def find_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """이름이 일치하는 회원 목록 — Members with exactly this username."""
        result = await db.execute(select(Member).where(Member.username == username))
        return list(result.scalars().all())

    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        """이름이 같고 나이가 초과하는 회원 목록.

        Members with this username and an age strictly greater than ``age``.
        """
        query: Select = select(Member).where(Member.username == username, Member.age > age)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_top3_by_order_by_age_desc(self, db: AsyncSession) -> list[Member]:
        """나이 내림차순 상위 3명 — The three oldest members."""
        result = await db.execute(select(Member).order_by(Member.age.desc()).limit(3))
        return list(result.scalars().all())

    async def find_user(self, db: AsyncSession, username: str, age: int) -> list[Member]:
        """직접 작성한 SQL과 이름 기반 파라미터로 조회합니다.

        Explicit SQL with named parameters, mapped back onto Member entities.
        """
        statement = text(
            "SELECT * FROM member WHERE username = :username AND age = :age"
        ).bindparams(username=username, age=age)
        result = await db.execute(select(Member).from_statement(statement))
        return list(result.scalars().all())

    async def find_by_names(self, db: AsyncSession, names: Iterable[str]) -> list[Member]:
        """이름 컬렉션 IN 조회 — ``username IN (...)``; empty input matches nothing."""
        result = await db.execute(select(Member).where(Member.username.in_(list(names))))
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # 반환 타입 — Return types: collection, single, optional
    # ------------------------------------------------------------------

    async def find_list_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """컬렉션 반환 — never None, empty list when nothing matches."""
        return await self.find_by_username(db, username)

    async def find_member_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """단건 반환 — None when nothing matches.

        Raises:
            MultipleResultsFound: 두 건 이상 조회될 때 (More than one row matched)
        """
        result = await db.execute(select(Member).where(Member.username == username))
        return result.scalar_one_or_none()

    async def find_optional_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """있을 수도 없을 수도 있는 단건 — Zero-or-one result.

        Raises:
            MultipleResultsFound: 두 건 이상 조회될 때 (More than one row matched)
        """
        result = await db.execute(select(Member).where(Member.username == username))
        return result.scalars().one_or_none()

    # ------------------------------------------------------------------
    # 프로젝션 — Projections
    # ------------------------------------------------------------------

    async def find_username_list(self, db: AsyncSession) -> list[str]:
        """회원 이름 값만 조회 — Scalar projection of every username."""
        result = await db.execute(select(Member.username))
        return list(result.scalars().all())

    async def find_member_dto(self, db: AsyncSession) -> list[MemberDto]:
        """회원 + 팀 이름 DTO 조회 — DTO rows from member INNER JOIN team."""
        query: Select = select(Member.id, Member.username, Team.name).join(Member.team)
        result = await db.execute(query)
        return [
            MemberDto(id=member_id, username=username, team_name=team_name)
            for member_id, username, team_name in result.all()
        ]

    async def find_projections_by_username(
        self,
        db: AsyncSession,
        username: str,
        projection: type[ProjectionType] = UsernameOnly,
    ) -> list[ProjectionType]:
        """프로젝션 필드에 해당하는 컬럼만 조회합니다.

        Select only the columns named by ``projection``'s fields and build one
        projection instance per row.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            username: 조회할 회원 이름 (Username to match)
            projection: 닫힌 프로젝션 모델, 필드명 = Member 속성명
                        (Closed projection model; field names are Member attributes)
        """
        fields: list[str] = list(projection.model_fields)
        columns = [getattr(Member, name) for name in fields]
        result = await db.execute(select(*columns).where(Member.username == username))
        return [projection(**dict(zip(fields, row))) for row in result.all()]

    # ------------------------------------------------------------------
    # 페이징 — Paging
    # ------------------------------------------------------------------

    async def find_by_age(
        self,
        db: AsyncSession,
        age: int,
        page_request: PageRequest,
    ) -> Page:
        """나이로 회원 페이지를 조회합니다.

        Page of members with this age. The content query LEFT JOINs team;
        the count query counts member rows only, since the join cannot change
        the total.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            age: 나이 조건 (Age to match)
            page_request: 페이지 번호/크기/정렬 (Page number, size, sort)

        Returns:
            Page: 회원 페이지 (Page of Member entities)
        """
        query: Select = select(Member).outerjoin(Member.team).where(Member.age == age)
        query = apply_sort(query, Member, page_request.sort)
        count_query: Select = select(func.count(Member.id)).where(Member.age == age)
        return await paginate(db, query, page_request, count_query=count_query)

    async def find_slice_by_age(
        self,
        db: AsyncSession,
        age: int,
        page_request: PageRequest,
    ) -> Slice:
        """나이로 회원 슬라이스를 조회합니다 — 카운트 쿼리 없음.

        Slice of members with this age; no count query is issued.
        """
        query: Select = apply_sort(select(Member).where(Member.age == age), Member, page_request.sort)
        return await paginate_slice(db, query, page_request)

    # ------------------------------------------------------------------
    # 벌크 연산 — Bulk update
    # ------------------------------------------------------------------

    async def bulk_age_plus(self, db: AsyncSession, age: int) -> int:
        """나이가 ``age`` 이상인 회원의 나이를 1 증가시킵니다.

        Bulk ``UPDATE member SET age = age + 1 WHERE age >= :age``.
        The statement bypasses the persistence context, so pending changes are
        flushed first and the context is cleared afterwards; entities loaded
        later come fresh from the database.

        Returns:
            int: 변경된 행 수 (Number of rows updated)
        """
        await db.flush()
        statement = (
            update(Member)
            .where(Member.age >= age)
            .values(age=Member.age + 1)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)
        db.expunge_all()
        return result.rowcount

    # ------------------------------------------------------------------
    # 페치 전략 — Fetch strategies (N+1 avoidance)
    # ------------------------------------------------------------------

    async def find_member_fetch_join(self, db: AsyncSession) -> list[Member]:
        """페치 조인 — 회원과 팀을 한 번의 LEFT OUTER JOIN 쿼리로 로딩.

        Fetch join: the team is populated from the same LEFT OUTER JOIN row,
        so ``member.team.name`` needs no further query.
        """
        query: Select = (
            select(Member)
            .outerjoin(Member.team)
            .options(contains_eager(Member.team))
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def find_all(
        self,
        db: AsyncSession,
        sort: list[SortOrder] | None = None,
    ) -> list[Member]:
        """전체 조회 — 엔티티 그래프처럼 팀을 즉시 로딩합니다.

        Retrieve all members with the team eagerly joined.
        """
        query: Select = apply_sort(
            select(Member).options(joinedload(Member.team)), Member, sort or []
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    async def find_member_entity_graph(self, db: AsyncSession) -> list[Member]:
        """명시적 쿼리 + 팀 즉시 로딩 — Explicit query with the team graph attached."""
        result = await db.execute(select(Member).options(joinedload(Member.team)))
        return list(result.scalars().unique().all())

    async def find_entity_graph_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        query: Select = (
            select(Member)
            .options(joinedload(Member.team))
            .where(Member.username == username)
        )
        result = await db.execute(query)
        return list(result.scalars().unique().all())

    # ------------------------------------------------------------------
    # 읽기 전용 / 락 — Read-only and locking
    # ------------------------------------------------------------------

    async def find_read_only_by_username(self, db: AsyncSession, username: str) -> Member | None:
        """읽기 전용 조회 — 결과를 세션에서 분리하여 변경 감지 대상에서 제외.

        Read-only lookup: the result is detached from the session, so changes
        made to it are never flushed. Lazy relations cannot be loaded from
        the detached instance.
        """
        result = await db.execute(select(Member).where(Member.username == username))
        member: Member | None = result.scalar_one_or_none()
        if member is not None:
            db.expunge(member)
        return member

    async def find_lock_by_username(self, db: AsyncSession, username: str) -> list[Member]:
        """비관적 쓰기 락 — ``SELECT ... FOR UPDATE`` held until the transaction ends."""
        query: Select = select(Member).where(Member.username == username).with_for_update()
        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
