"""회원/팀 Pydantic 응답 스키마 및 프로젝션 정의.

Member and Team Pydantic response schemas and projections.
Entities are never serialized directly; endpoints and projection queries
return these types instead.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class MemberDto(BaseModel):
    """회원 DTO — 생성자 표현식 프로젝션.

    Member DTO built from selected columns (member id, username, team name).

    Attributes:
        id: 회원 ID (Member identifier)
        username: 회원 이름 (Username)
        team_name: 팀 이름, 없으면 None (Team name, nullable)
    """

    id: int | None  # 회원 ID (Member identifier)
    username: str | None  # 회원 이름 (Username)
    team_name: str | None = None  # 팀 이름 (Team name, nullable)


class MemberResponse(BaseModel):
    """회원 응답 스키마.

    Member response schema read from ORM attributes.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int  # 회원 ID
    username: str | None  # 회원 이름
    age: int  # 나이
    team_id: int | None = None  # 소속 팀 ID (Team FK, nullable)
    created_date: datetime | None = None  # 등록 일시 (Insert timestamp)
    updated_date: datetime | None = None  # 수정 일시 (Last update timestamp)


class UsernameOnly(BaseModel):
    """닫힌 프로젝션 — Closed projection selecting only the username column.

    Field names must match Member attributes; the repository selects exactly
    these columns.
    """

    username: str | None


class UsernameAgeOnly(BaseModel):
    """이름 + 나이 프로젝션 — Closed projection of username and age."""

    username: str | None
    age: int
