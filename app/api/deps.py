"""FastAPI 의존성 주입 모듈 — 페이지 요청 바인딩 및 도메인 변환.

FastAPI dependency injection module — Pageable binding and path-id to
entity conversion.

Pageable Binding:
    1. 클라이언트가 ?page=1&size=3&sort=id,desc&sort=username 형태로 요청
       (Client sends page, size and repeated sort parameters)
    2. page는 0부터 시작, 음수는 0으로 보정 (0-based page, negatives become 0)
    3. size가 1 미만이면 기본값, 최대값 초과 시 최대값으로 제한
       (size < 1 falls back to the default; larger than MAX_PAGE_SIZE is clamped)
    4. sort는 "속성[,속성...][,asc|desc]" 형식, 방향 생략 시 asc
       (sort is "property[,property...][,asc|desc]", ascending by default)
    5. sort가 없으면 엔드포인트의 기본 정렬 사용 (Endpoint default sort otherwise)
"""

from typing import Annotated, Callable

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.member import Member
from app.services.member_service import member_service
from app.utils.pagination import Direction, PageRequest, SortOrder, sort_by

_DIRECTIONS: dict[str, Direction] = {"asc": Direction.ASC, "desc": Direction.DESC}


def parse_sort(values: list[str]) -> list[SortOrder]:
    """sort 쿼리 파라미터를 정렬 조건 목록으로 변환합니다.

    Parse repeated ``sort`` query values into sort orders. A trailing
    ``asc``/``desc`` applies to every property listed before it.

    Args:
        values: sort 파라미터 값 목록 (Raw sort parameter values)

    Returns:
        list[SortOrder]: 정렬 조건 목록 (Sort orders in request order)
    """
    orders: list[SortOrder] = []
    for value in values:
        parts: list[str] = [part.strip() for part in value.split(",") if part.strip()]
        direction: Direction = Direction.ASC
        if parts and parts[-1].lower() in _DIRECTIONS:
            direction = _DIRECTIONS[parts.pop().lower()]
        orders.extend(sort_by(direction, *parts))
    return orders


def pageable(
    default_size: int | None = None,
    default_sort: tuple[str, ...] = (),
) -> Callable[..., PageRequest]:
    """엔드포인트별 기본값을 가진 PageRequest 의존성을 생성합니다.

    Build a dependency that binds query parameters into a PageRequest,
    using per-endpoint defaults for size and sort.

    Args:
        default_size: 기본 페이지 크기, None이면 설정값 (Default size; settings value if None)
        default_sort: 기본 정렬 속성, 오름차순 (Default ascending sort properties)

    Returns:
        Callable[..., PageRequest]: FastAPI 의존성 함수 (FastAPI dependency)
    """
    fallback_size: int = default_size or settings.DEFAULT_PAGE_SIZE

    def _page_request(
        page: Annotated[int, Query()] = 0,
        size: Annotated[int | None, Query()] = None,
        sort: Annotated[list[str] | None, Query()] = None,
    ) -> PageRequest:
        resolved_size: int = fallback_size if size is None or size < 1 else size
        orders: list[SortOrder] = parse_sort(sort or [])
        if not orders:
            orders = sort_by(Direction.ASC, *default_sort)
        return PageRequest(
            page=max(page, 0),
            size=min(resolved_size, settings.MAX_PAGE_SIZE),
            sort=orders,
        )

    return _page_request


async def get_member_from_path(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Member:
    """경로의 회원 ID를 회원 엔티티로 변환합니다 (도메인 클래스 컨버터).

    Convert the ``member_id`` path parameter into the Member entity.
    The entity should only be read: the request runs no transaction that
    would persist changes made to it.

    Raises:
        NotFoundError: 회원을 찾을 수 없을 때 (Member not found)
    """
    return await member_service.get_member(db, member_id)
