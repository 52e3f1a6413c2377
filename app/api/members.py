"""회원 라우터 — 회원 조회 엔드포인트.

Member Router — Read endpoints for members.

Endpoints:
    - GET /members/{member_id}: 회원 이름 (Username as plain text)
    - GET /members2/{member_id}: 도메인 클래스 컨버터 버전 (Path id converted to the entity)
    - GET /members: 회원 페이지, 기본 size=5, sort=username
    - GET /members-dto: DTO 페이지, 기본 size=5
      (served at the kebab-case path; the camel-case /membersDto path is not kept)
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_member_from_path, pageable
from app.database import get_db
from app.models.member import Member
from app.schemas.member import MemberDto, MemberResponse
from app.services.member_service import member_service
from app.utils.pagination import Page, PageRequest

router: APIRouter = APIRouter()


@router.get("/members/{member_id}", response_class=PlainTextResponse)
async def find_member(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> str:
    """회원 ID로 회원 이름을 조회합니다.

    Return the username of the member with this id.
    """
    return await member_service.get_username(db, member_id)


@router.get("/members2/{member_id}", response_class=PlainTextResponse)
async def find_member_converted(
    member: Annotated[Member, Depends(get_member_from_path)],
) -> str:
    """경로 ID가 엔티티로 변환되어 주입됩니다 — 단순 조회용으로만 사용.

    The path id arrives already converted to the Member entity.
    """
    return member.username or ""


@router.get("/members", response_model=Page[MemberResponse])
async def list_members(
    db: Annotated[AsyncSession, Depends(get_db)],
    page_request: Annotated[PageRequest, Depends(pageable(default_size=5, default_sort=("username",)))],
) -> Page[MemberResponse]:
    """회원 목록을 페이지로 조회합니다.

    List members page by page: ?page=1&size=3&sort=id,desc&sort=username,desc
    """
    return await member_service.list_members(db, page_request)


@router.get("/members-dto", response_model=Page[MemberDto])
async def list_member_dtos(
    db: Annotated[AsyncSession, Depends(get_db)],
    page_request: Annotated[PageRequest, Depends(pageable(default_size=5))],
) -> Page[MemberDto]:
    """회원 목록을 DTO 페이지로 조회합니다 — 엔티티를 API로 직접 노출하지 않음.

    List members mapped to DTOs instead of exposing entities.
    """
    return await member_service.list_member_dtos(db, page_request)
