"""순수 세션 기반 회원 레포지토리.

Plain session-based Member repository.
Every query is written directly against the AsyncSession, without the
generic BaseRepository. Kept next to MemberRepository to compare the two
styles; unlike MemberRepository.bulk_age_plus, the bulk update here leaves
the persistence context untouched.
"""

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member


class PlainMemberRepository:
    """세션을 직접 사용하는 회원 레포지토리 — Member queries on the raw session."""

    async def save(self, db: AsyncSession, member: Member) -> Member:
        # INSERT는 flush 시점까지 지연됨 (INSERT is deferred until flush)
        db.add(member)
        await db.flush()
        return member

    async def delete(self, db: AsyncSession, member: Member) -> None:
        await db.delete(member)
        await db.flush()

    async def find_all(self, db: AsyncSession) -> list[Member]:
        result = await db.execute(select(Member))
        return list(result.scalars().all())

    async def find_by_id(self, db: AsyncSession, member_id: int) -> Member | None:
        return await db.get(Member, member_id)

    async def find(self, db: AsyncSession, member_id: int) -> Member | None:
        """ID 조회 — Same lookup as find_by_id, kept for the identity-map demos."""
        return await db.get(Member, member_id)

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count(Member.id)))
        return result.scalar() or 0

    async def find_by_username_and_age_greater_than(
        self,
        db: AsyncSession,
        username: str,
        age: int,
    ) -> list[Member]:
        query: Select = select(Member).where(Member.username == username, Member.age > age)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def find_by_page(
        self,
        db: AsyncSession,
        age: int,
        offset: int,
        limit: int,
    ) -> list[Member]:
        """나이 조건 페이지 조회 — 이름 내림차순, OFFSET/LIMIT 직접 지정.

        Members with this age ordered by username descending, starting at
        ``offset`` and returning at most ``limit`` rows.
        """
        query: Select = (
            select(Member)
            .where(Member.age == age)
            .order_by(Member.username.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def total_count(self, db: AsyncSession, age: int) -> int:
        """나이 조건 전체 개수 — 정렬 불필요 (No ORDER BY needed for counting)."""
        result = await db.execute(select(func.count(Member.id)).where(Member.age == age))
        return result.scalar() or 0

    async def bulk_age_plus(self, db: AsyncSession, age: int) -> int:
        """나이가 ``age`` 이상인 회원의 나이를 1 증가 — 영속성 컨텍스트는 그대로.

        Bulk increment; already-loaded Member instances keep their old age
        until the session is cleared or the rows are refreshed.
        """
        statement = (
            update(Member)
            .where(Member.age >= age)
            .values(age=Member.age + 1)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)
        return result.rowcount


# 싱글턴 인스턴스 — Singleton instance
plain_member_repository: PlainMemberRepository = PlainMemberRepository()
