"""회원 레포지토리 사용자 정의 조각 — 직접 작성한 쿼리 모음.

Member repository custom fragment — Hand-written queries mixed into
MemberRepository alongside the generic CRUD methods.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member


class MemberRepositoryCustom:
    """MemberRepository에 섞이는 사용자 정의 쿼리 — Custom query fragment."""

    async def find_member_custom(self, db: AsyncSession) -> list[Member]:
        """모든 회원을 직접 작성한 쿼리로 조회 — All members via a plain SELECT."""
        result = await db.execute(select(Member))
        return list(result.scalars().all())
