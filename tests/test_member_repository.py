"""회원 레포지토리 테스트.

Member repository tests — CRUD, query methods, return types, projections,
paging, bulk update, fetch strategies, read-only results, and locking.
"""

import pytest
import pytest_asyncio
from sqlalchemy import event, update
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import MissingGreenlet, MultipleResultsFound, StatementError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.models.member import Member, Team
from app.repositories.member_repository import member_repository
from app.repositories.team_repository import team_repository
from app.schemas.member import MemberDto, UsernameAgeOnly, UsernameOnly
from app.utils.exceptions import BadRequestError
from app.utils.pagination import Direction, PageRequest, sort_by


class TestMemberCrud:
    """저장/조회/삭제 테스트."""

    async def test_save_and_find(self, db: AsyncSession):
        """저장한 회원을 ID로 조회하면 같은 인스턴스."""
        member = Member("memberA")
        saved = await member_repository.save(db, member)

        found = await member_repository.find_by_id(db, saved.id)

        assert found is not None
        assert found.username == member.username
        assert found.id == member.id
        assert found is member  # 같은 영속성 컨텍스트 (identity map)

    async def test_basic_crud(self, db: AsyncSession):
        """단건/리스트/카운트/삭제 검증."""
        member1 = await member_repository.save(db, Member("member1"))
        member2 = await member_repository.save(db, Member("member2"))

        assert await member_repository.find_by_id(db, member1.id) is member1
        assert await member_repository.find_by_id(db, member2.id) is member2

        all_members = await member_repository.find_all(db)
        assert len(all_members) == 2
        assert await member_repository.count(db) == 2

        await member_repository.delete(db, member1)
        await member_repository.delete(db, member2)
        assert await member_repository.count(db) == 0

    async def test_delete_by_id(self, db: AsyncSession):
        """ID로 삭제, 없는 ID는 False."""
        member = await member_repository.save(db, Member("member1"))

        assert await member_repository.exists_by_id(db, member.id) is True
        assert await member_repository.delete_by_id(db, member.id) is True
        assert await member_repository.exists_by_id(db, member.id) is False
        assert await member_repository.delete_by_id(db, 9999) is False

    async def test_find_all_by_id_and_delete_all(self, db: AsyncSession):
        """여러 ID 조회 후 전체 삭제."""
        saved = await member_repository.save_all(db, [Member("a"), Member("b"), Member("c")])

        found = await member_repository.find_all_by_id(db, [saved[0].id, saved[2].id])
        assert {m.username for m in found} == {"a", "c"}
        assert await member_repository.find_all_by_id(db, []) == []

        assert await member_repository.delete_all(db) == 3
        assert await member_repository.count(db) == 0

    async def test_new_detection_uses_version(self, db: AsyncSession):
        """버전이 없으면 신규, 저장 후에는 기존 엔티티로 merge."""
        member = Member("memberA", 10)
        assert member_repository.is_new(member) is True

        await member_repository.save(db, member)
        assert member.version == 1
        assert member_repository.is_new(member) is False

        merged = await member_repository.save(db, member)
        assert merged is member
        assert await member_repository.count(db) == 1


class TestQueryMethods:
    """조건 조회 메서드 테스트."""

    async def test_find_by_username_and_age_greater_than(self, db: AsyncSession):
        """이름 일치 + 나이 초과."""
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("AAA", 20))

        result = await member_repository.find_by_username_and_age_greater_than(db, "AAA", 15)

        assert len(result) == 1
        assert result[0].username == "AAA"
        assert result[0].age == 20

    async def test_find_top3_by_age_desc(self, db: AsyncSession):
        """나이 내림차순 상위 3명."""
        for age in (5, 40, 10, 30, 20):
            await member_repository.save(db, Member(f"m{age}", age))

        result = await member_repository.find_top3_by_order_by_age_desc(db)

        assert [m.age for m in result] == [40, 30, 20]

    async def test_find_user_explicit_query(self, db: AsyncSession):
        """직접 작성한 쿼리 + 이름 기반 파라미터."""
        m1 = await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("AAA", 20))

        result = await member_repository.find_user(db, "AAA", 10)

        assert result == [m1]

    async def test_find_by_names(self, db: AsyncSession):
        """IN 절 컬렉션 파라미터 바인딩."""
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("BBB", 20))
        await member_repository.save(db, Member("CCC", 30))

        result = await member_repository.find_by_names(db, ["AAA", "BBB"])

        assert sorted(m.username for m in result) == ["AAA", "BBB"]
        assert await member_repository.find_by_names(db, []) == []

    async def test_find_member_custom(self, db: AsyncSession):
        """사용자 정의 조각 메서드."""
        await member_repository.save(db, Member("AAA", 10))

        result = await member_repository.find_member_custom(db)

        assert [m.username for m in result] == ["AAA"]


class TestReturnTypes:
    """컬렉션/단건/Optional 반환 타입 테스트."""

    async def test_collection_is_empty_not_none(self, db: AsyncSession):
        """결과가 없으면 빈 리스트."""
        assert await member_repository.find_list_by_username(db, "nobody") == []

    async def test_single_result(self, db: AsyncSession):
        """단건 조회 — 없으면 None."""
        m1 = await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("BBB", 20))

        assert await member_repository.find_member_by_username(db, "AAA") is m1
        assert await member_repository.find_member_by_username(db, "nobody") is None
        assert await member_repository.find_optional_by_username(db, "BBB") is not None
        assert await member_repository.find_optional_by_username(db, "nobody") is None

    async def test_single_result_with_duplicates_raises(self, db: AsyncSession):
        """단건 조회인데 두 건 이상이면 예외."""
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("AAA", 20))

        with pytest.raises(MultipleResultsFound):
            await member_repository.find_member_by_username(db, "AAA")
        with pytest.raises(MultipleResultsFound):
            await member_repository.find_optional_by_username(db, "AAA")


class TestProjections:
    """값/DTO/프로젝션 조회 테스트."""

    async def test_find_username_list(self, db: AsyncSession):
        """이름 값만 조회."""
        await member_repository.save(db, Member("AAA", 10))
        await member_repository.save(db, Member("BBB", 20))

        assert sorted(await member_repository.find_username_list(db)) == ["AAA", "BBB"]

    async def test_find_member_dto(self, db: AsyncSession):
        """팀과 조인한 DTO — 팀이 없는 회원은 제외 (INNER JOIN)."""
        team = await team_repository.save(db, Team("teamA"))
        m1 = await member_repository.save(db, Member("AAA", 10, team))
        await member_repository.save(db, Member("BBB", 20))

        result = await member_repository.find_member_dto(db)

        assert result == [MemberDto(id=m1.id, username="AAA", team_name="teamA")]

    async def test_find_projections_by_username(self, db: AsyncSession):
        """닫힌 프로젝션 — 지정한 필드만 조회."""
        await member_repository.save(db, Member("m1", 10))
        await member_repository.save(db, Member("m2", 20))

        usernames = await member_repository.find_projections_by_username(db, "m1")
        assert usernames == [UsernameOnly(username="m1")]

        with_age = await member_repository.find_projections_by_username(
            db, "m1", projection=UsernameAgeOnly
        )
        assert with_age == [UsernameAgeOnly(username="m1", age=10)]


class TestPaging:
    """Page / Slice 테스트."""

    async def test_page(self, db: AsyncSession, five_members_aged_10):
        """0페이지 3개, 이름 내림차순 — 전체 5개, 2페이지."""
        page_request = PageRequest.of(0, 3, sort_by(Direction.DESC, "username"))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert [m.username for m in page.content] == ["member5", "member4", "member3"]
        assert page.number_of_elements == 3
        assert page.total_elements == 5
        assert page.number == 0
        assert page.total_pages == 2
        assert page.first is True
        assert page.has_next is True

    async def test_last_page(self, db: AsyncSession, five_members_aged_10):
        """마지막 페이지는 남은 2개."""
        page_request = PageRequest.of(1, 3, sort_by(Direction.DESC, "username"))

        page = await member_repository.find_by_age(db, 10, page_request)

        assert [m.username for m in page.content] == ["member2", "member1"]
        assert page.last is True
        assert page.has_next is False
        assert page.has_previous is True

    async def test_page_counts_only_matching_age(self, db: AsyncSession, five_members_aged_10):
        """다른 나이의 회원은 개수에 포함되지 않음."""
        await member_repository.save(db, Member("other", 30))

        page = await member_repository.find_by_age(db, 10, PageRequest.of(0, 10))

        assert page.total_elements == 5

    async def test_page_map_to_dto(self, db: AsyncSession, five_members_aged_10):
        """엔티티 페이지를 DTO 페이지로 변환 — 메타데이터 유지."""
        page = await member_repository.find_by_age(
            db, 10, PageRequest.of(0, 3, sort_by(Direction.ASC, "username"))
        )

        dto_page = page.map(lambda m: MemberDto(id=m.id, username=m.username))

        assert [d.username for d in dto_page.content] == ["member1", "member2", "member3"]
        assert dto_page.total_elements == 5
        assert dto_page.total_pages == 2

    async def test_slice(self, db: AsyncSession, five_members_aged_10):
        """Slice — 전체 개수 없이 다음 존재 여부만."""
        page_request = PageRequest.of(0, 3, sort_by(Direction.DESC, "username"))

        result = await member_repository.find_slice_by_age(db, 10, page_request)

        assert [m.username for m in result.content] == ["member5", "member4", "member3"]
        assert result.has_next is True
        assert not hasattr(result, "total_elements")

    async def test_sort_by_unknown_property(self, db: AsyncSession):
        """존재하지 않는 속성으로 정렬하면 400."""
        with pytest.raises(BadRequestError):
            await member_repository.find_by_age(
                db, 10, PageRequest.of(0, 3, sort_by(Direction.ASC, "nickname"))
            )


class TestBulkUpdate:
    """벌크 연산 테스트."""

    async def test_bulk_age_plus(self, db: AsyncSession):
        """20세 이상 3명 증가, 영속성 컨텍스트 초기화 후 재조회하면 반영됨."""
        for name, age in [("member1", 10), ("member2", 19), ("member3", 20),
                          ("member4", 30), ("member5", 40)]:
            await member_repository.save(db, Member(name, age))

        result_count = await member_repository.bulk_age_plus(db, 20)

        assert result_count == 3
        member5 = (await member_repository.find_by_username(db, "member5"))[0]
        assert member5.age == 41
        member1 = (await member_repository.find_by_username(db, "member1"))[0]
        assert member1.age == 10


class TestFetchStrategies:
    """지연 로딩 / 페치 조인 / 엔티티 그래프 테스트."""

    @pytest_asyncio.fixture
    async def members_with_teams(self, db: AsyncSession, teams):
        db.add_all([
            Member("member1", 10, teams["teamA"]),
            Member("member2", 10, teams["teamB"]),
        ])
        await db.flush()
        # 영속성 컨텍스트를 비워 팀이 메모리에 없도록 (clear the context)
        db.expunge_all()

    async def test_lazy_team_needs_explicit_load(self, db: AsyncSession, members_with_teams):
        """지연 로딩 — 팀은 회원마다 별도 쿼리로 로딩 (N+1)."""
        members = await member_repository.find_member_custom(db)

        with pytest.raises((MissingGreenlet, StatementError), match="greenlet_spawn"):
            members[0].team.name

        names = sorted([(await m.awaitable_attrs.team).name for m in members])
        assert names == ["teamA", "teamB"]

    async def test_fetch_join(self, db: AsyncSession, members_with_teams):
        """페치 조인 — 팀이 함께 로딩됨."""
        members = await member_repository.find_member_fetch_join(db)

        assert sorted((m.username, m.team.name) for m in members) == [
            ("member1", "teamA"), ("member2", "teamB"),
        ]

    async def test_fetch_join_keeps_members_without_team(self, db: AsyncSession, members_with_teams):
        """LEFT OUTER JOIN — 팀이 없는 회원도 포함."""
        await member_repository.save(db, Member("solo", 30))

        members = await member_repository.find_member_fetch_join(db)

        solo = next(m for m in members if m.username == "solo")
        assert solo.team is None
        assert len(members) == 3

    async def test_entity_graph(self, db: AsyncSession, members_with_teams):
        """엔티티 그래프 — find_all / 명시적 쿼리 / 이름 조건 모두 팀 로딩."""
        all_members = await member_repository.find_all(db, sort_by(Direction.ASC, "username"))
        assert [m.team.name for m in all_members] == ["teamA", "teamB"]

        graph = await member_repository.find_member_entity_graph(db)
        assert {m.team.name for m in graph} == {"teamA", "teamB"}

        by_name = await member_repository.find_entity_graph_by_username(db, "member1")
        assert by_name[0].team.name == "teamA"

    async def test_team_members_collection(self, db: AsyncSession, members_with_teams):
        """팀 쪽 컬렉션 조회."""
        teams = await team_repository.find_all(db, sort_by(Direction.ASC, "name"))

        team = await team_repository.find_with_members(db, teams[0].id)

        assert [m.username for m in team.members] == ["member1"]


class TestReadOnlyAndLocks:
    """읽기 전용 조회, 비관적/낙관적 락 테스트."""

    async def test_read_only_changes_are_not_flushed(self, db: AsyncSession):
        """읽기 전용으로 조회한 회원은 변경해도 DB에 반영되지 않음."""
        await member_repository.save(db, Member("member1", 10))
        db.expunge_all()

        member = await member_repository.find_read_only_by_username(db, "member1")
        member.username = "member2"
        await db.flush()
        db.expunge_all()

        assert await member_repository.find_member_by_username(db, "member1") is not None
        assert await member_repository.find_member_by_username(db, "member2") is None

    async def test_dirty_checking_flushes_managed_changes(self, db: AsyncSession):
        """관리 중인 회원은 변경 감지로 UPDATE — 버전 증가."""
        member = await member_repository.save(db, Member("member1", 10))

        member.username = "member2"
        await db.flush()
        db.expunge_all()

        reloaded = await member_repository.find_member_by_username(db, "member2")
        assert reloaded is not None
        assert reloaded.version == 2

    async def test_lock_by_username(self, db: AsyncSession):
        """SELECT ... FOR UPDATE 조회 — SQLite는 락 절을 생략하므로 PostgreSQL로 컴파일해 확인."""
        await member_repository.save(db, Member("member1", 10))
        statements = []

        def _capture(orm_execute_state):
            statements.append(orm_execute_state.statement)

        event.listen(db.sync_session, "do_orm_execute", _capture)
        try:
            result = await member_repository.find_lock_by_username(db, "member1")
        finally:
            event.remove(db.sync_session, "do_orm_execute", _capture)

        assert [m.username for m in result] == ["member1"]
        assert len(statements) == 1
        compiled = str(statements[0].compile(dialect=postgresql.dialect()))
        assert compiled.rstrip().endswith("FOR UPDATE")

    async def test_plain_lookup_takes_no_lock(self, db: AsyncSession):
        """일반 조회는 FOR UPDATE 없음."""
        statements = []

        def _capture(orm_execute_state):
            statements.append(orm_execute_state.statement)

        event.listen(db.sync_session, "do_orm_execute", _capture)
        try:
            await member_repository.find_by_username(db, "member1")
        finally:
            event.remove(db.sync_session, "do_orm_execute", _capture)

        assert "FOR UPDATE" not in str(statements[0].compile(dialect=postgresql.dialect()))

    async def test_optimistic_lock_conflict(self, db: AsyncSession):
        """다른 트랜잭션이 버전을 올렸다면 UPDATE 시 StaleDataError."""
        member = await member_repository.save(db, Member("member1", 10))
        table = Member.__table__
        await db.execute(
            update(table).where(table.c.member_id == member.id).values(version=table.c.version + 1)
        )

        member.age = 11
        with pytest.raises(StaleDataError):
            await db.flush()
