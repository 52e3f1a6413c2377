"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
Provides the pageable request model (page number, size, sort orders),
Page/Slice result models, and helpers that execute paginated queries.

Page numbers are 0-based. A Page runs a separate COUNT query for the total;
a Slice fetches one extra row to know whether a next slice exists and
never counts.
"""

import math
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from pydantic import BaseModel, Field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty, InstrumentedAttribute

from app.utils.exceptions import BadRequestError

T = TypeVar("T")
R = TypeVar("R")


class Direction(str, Enum):
    """정렬 방향 — Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SortOrder(BaseModel):
    """단일 정렬 조건 — One ``property, direction`` sort order.

    Attributes:
        property: 정렬 대상 엔티티 속성명 (Entity attribute name)
        direction: 정렬 방향 (Sort direction, default ascending)
    """

    property: str
    direction: Direction = Direction.ASC


def sort_by(direction: Direction, *properties: str) -> list[SortOrder]:
    """같은 방향의 정렬 조건 목록 생성 — Build orders sharing one direction."""
    return [SortOrder(property=p, direction=direction) for p in properties]


class PageRequest(BaseModel):
    """페이지 요청 모델.

    Pageable request: which page, how many rows, in which order.

    Attributes:
        page: 페이지 번호, 0부터 시작 (Page number, 0-based)
        size: 페이지 크기 (Rows per page)
        sort: 정렬 조건 목록 (Sort orders, applied in sequence)
    """

    page: int = Field(0, ge=0)
    size: int = Field(20, ge=1)
    sort: list[SortOrder] = []

    @classmethod
    def of(cls, page: int, size: int, sort: list[SortOrder] | None = None) -> "PageRequest":
        return cls(page=page, size=size, sort=sort or [])

    @property
    def offset(self) -> int:
        """건너뛸 행 수 — Rows skipped before this page."""
        return self.page * self.size


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델 (전체 개수 포함).

    Pagination result with total count metadata.

    Attributes:
        content: 현재 페이지 항목 목록 (Items for the current page)
        number: 현재 페이지 번호, 0부터 (Current page number, 0-based)
        size: 요청 페이지 크기 (Requested page size)
        total_elements: 전체 항목 수 (Total count across all pages)
        total_pages: 전체 페이지 수 (ceil(total_elements / size))
        number_of_elements: 현재 페이지 항목 수 (Items on this page)
        first / last: 첫/마지막 페이지 여부 (First/last page flags)
        has_next / has_previous: 다음/이전 페이지 존재 여부
        empty: 내용이 비었는지 (No content on this page)
        sort: 적용된 정렬 (Sort orders applied)
    """

    content: list[T]
    number: int
    size: int
    total_elements: int
    total_pages: int
    number_of_elements: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool
    empty: bool
    sort: list[SortOrder] = []

    @classmethod
    def of(cls, content: Sequence[Any], page_request: PageRequest, total: int) -> "Page":
        total_pages: int = math.ceil(total / page_request.size) if total else 0
        return cls(
            content=list(content),
            number=page_request.page,
            size=page_request.size,
            total_elements=total,
            total_pages=total_pages,
            number_of_elements=len(content),
            first=page_request.page == 0,
            last=page_request.page + 1 >= total_pages,
            has_next=page_request.page + 1 < total_pages,
            has_previous=page_request.page > 0,
            empty=len(content) == 0,
            sort=page_request.sort,
        )

    def map(self, converter: Callable[[T], R]) -> "Page[R]":
        """내용 변환 — Same metadata, each item converted (e.g. entity → DTO)."""
        return self.model_copy(update={"content": [converter(item) for item in self.content]})


class Slice(BaseModel, Generic[T]):
    """슬라이스 결과 모델 — 전체 개수 없이 다음 존재 여부만.

    Slice result: like Page but without total count metadata.
    """

    content: list[T]
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
    has_next: bool
    has_previous: bool
    empty: bool
    sort: list[SortOrder] = []

    @classmethod
    def of(cls, rows: Sequence[Any], page_request: PageRequest) -> "Slice":
        # rows는 size + 1개까지 조회된 결과 (rows fetched with one look-ahead row)
        has_next: bool = len(rows) > page_request.size
        content: list[Any] = list(rows[: page_request.size])
        return cls(
            content=content,
            number=page_request.page,
            size=page_request.size,
            number_of_elements=len(content),
            first=page_request.page == 0,
            last=not has_next,
            has_next=has_next,
            has_previous=page_request.page > 0,
            empty=len(content) == 0,
            sort=page_request.sort,
        )

    def map(self, converter: Callable[[T], R]) -> "Slice[R]":
        return self.model_copy(update={"content": [converter(item) for item in self.content]})


def apply_sort(query: Select[Any], model: type, sort: list[SortOrder]) -> Select[Any]:
    """정렬 조건을 ORDER BY로 변환합니다.

    Translate sort orders into ORDER BY clauses on ``model``'s columns.

    Raises:
        BadRequestError: 모델에 없는 속성으로 정렬할 때 (Unknown sort property)
    """
    for order in sort:
        column = getattr(model, order.property, None)
        if not isinstance(column, InstrumentedAttribute) or not isinstance(column.property, ColumnProperty):
            raise BadRequestError(
                f"No property '{order.property}' found for type '{model.__name__}'"
            )
        query = query.order_by(column.desc() if order.direction is Direction.DESC else column.asc())
    return query


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
    count_query: Select[Any] | None = None,
) -> Page:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning a Page.
    Runs two queries: one for the total count and one for the actual page of
    results with OFFSET/LIMIT. ``query`` must already carry its ORDER BY.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page_request: 페이지 요청 (Page number, size, sort)
        count_query: 별도 카운트 쿼리, 없으면 서브쿼리로 감싸서 COUNT
            (Separate COUNT query; defaults to counting a subquery of ``query``)

    Returns:
        Page: 현재 페이지 항목과 메타데이터 (Page content and metadata)
    """
    # 전체 개수 조회 — 조인/정렬이 필요 없는 별도 카운트 쿼리 우선
    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(query.offset(page_request.offset).limit(page_request.size))
    items: Sequence[Any] = result.scalars().unique().all()

    return Page.of(items, page_request, total)


async def paginate_slice(
    db: AsyncSession,
    query: Select[Any],
    page_request: PageRequest,
) -> Slice:
    """카운트 쿼리 없이 size + 1개를 조회해 Slice를 만듭니다.

    Fetch ``size + 1`` rows and build a Slice; no COUNT query is issued.
    """
    result = await db.execute(
        query.offset(page_request.offset).limit(page_request.size + 1)
    )
    rows: Sequence[Any] = result.scalars().unique().all()
    return Slice.of(rows, page_request)
