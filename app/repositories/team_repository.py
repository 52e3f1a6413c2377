"""팀 레포지토리 — 팀 CRUD.

Team Repository — CRUD for the team table via BaseRepository.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.member import Team
from app.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the team table.
    """

    def __init__(self) -> None:
        super().__init__(Team)

    async def find_with_members(self, db: AsyncSession, team_id: int) -> Team | None:
        """팀과 소속 회원을 함께 조회합니다.

        Retrieve a team with its member collection loaded by a second SELECT.
        """
        query = select(Team).options(selectinload(Team.members)).where(Team.id == team_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
