"""회원 서비스 — 회원 조회 비즈니스 로직.

Member Service — Read-side business logic for members.
Converts entities into response schemas so no ORM instance leaves the
service layer.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.repositories.member_repository import member_repository
from app.schemas.member import MemberDto, MemberResponse
from app.utils.exceptions import NotFoundError
from app.utils.pagination import Page, PageRequest


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스.

    Service handling member business logic.
    """

    def _to_response(self, member: Member) -> MemberResponse:
        """회원 모델을 응답 스키마로 변환합니다.

        Convert a Member model instance to a MemberResponse schema.
        """
        return MemberResponse.model_validate(member)

    def _to_dto(self, member: Member) -> MemberDto:
        # 팀은 로딩하지 않음 — team name intentionally left empty
        return MemberDto(id=member.id, username=member.username, team_name=None)

    async def get_member(self, db: AsyncSession, member_id: int) -> Member:
        """회원 엔티티를 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member_id: 회원 ID (Member identifier)

        Returns:
            Member: 조회된 회원 (Found member)

        Raises:
            NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
        """
        member: Member | None = await member_repository.find_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return member

    async def get_username(self, db: AsyncSession, member_id: int) -> str:
        """회원 이름을 조회합니다 — Username of the member with this id."""
        member: Member = await self.get_member(db, member_id)
        return member.username or ""

    async def list_members(
        self,
        db: AsyncSession,
        page_request: PageRequest,
    ) -> Page[MemberResponse]:
        """회원 페이지를 응답 스키마로 조회합니다.

        List one page of members as response schemas.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page_request: 페이지 번호/크기/정렬 (Page number, size, sort)

        Returns:
            Page[MemberResponse]: 회원 응답 페이지 (Page of member responses)
        """
        page: Page = await member_repository.find_all_paged(db, page_request)
        return page.map(self._to_response)

    async def list_member_dtos(
        self,
        db: AsyncSession,
        page_request: PageRequest,
    ) -> Page[MemberDto]:
        """회원 페이지를 DTO로 변환합니다 — Page of members mapped to DTOs."""
        page: Page = await member_repository.find_all_paged(db, page_request)
        return page.map(self._to_dto)


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
