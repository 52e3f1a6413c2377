"""회원/팀 SQLAlchemy ORM 모델 정의.

Member and Team SQLAlchemy ORM model definitions.
Member owns the many-to-one association (``member.team_id``); Team exposes
the read side as a back-populated collection.

Tables:
    - member: 회원 (Members, optimistic-locked via ``version``)
    - team: 팀 (Teams)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.base_entity import BaseTimeEntity, JpaBaseEntity


class Team(BaseTimeEntity, Base):
    """팀 모델 — 회원 컬렉션을 가진 역방향 엔티티.

    Team model — Inverse side of the Member↔Team association.

    Attributes:
        id: 팀 식별자, 컬럼명 team_id (Generated integer key)
        name: 팀 이름 (Team name)

    Relationships:
        members: 소속 회원 목록 (Members whose ``team`` is this team)
    """

    __tablename__ = "team"

    # 팀 식별자 — Team identifier (auto-increment, column "team_id")
    id: Mapped[int] = mapped_column("team_id", Integer, primary_key=True)
    # 팀 이름 — Team display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # 연관관계 주인은 Member.team — Member.team owns the association
    members: Mapped[list["Member"]] = relationship(back_populates="team")

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name!r})"


class Member(JpaBaseEntity, Base):
    """회원 모델 — 팀에 대한 다대일 연관관계의 주인.

    Member model — Owning side of the many-to-one association to Team.
    ``team`` is lazy: under asyncio it is loaded either eagerly by the
    repository (fetch join / entity graph) or explicitly with
    ``await member.awaitable_attrs.team``.

    Attributes:
        id: 회원 식별자, 컬럼명 member_id (Generated integer key)
        username: 회원 이름 (Username)
        age: 나이 (Age)
        team_id: 소속 팀 FK (Foreign key to team.team_id, nullable)
        version: 낙관적 락 버전 (Optimistic lock version, managed by the ORM)

    Relationships:
        team: 소속 팀 (Owning team, lazy)
    """

    __tablename__ = "member"

    # 회원 식별자 — Member identifier (auto-increment, column "member_id")
    id: Mapped[int] = mapped_column("member_id", Integer, primary_key=True)
    username: Mapped[str | None] = mapped_column(String(255), index=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    team_id: Mapped[int | None] = mapped_column(ForeignKey("team.team_id"), index=True)
    # 낙관적 락 — UPDATE ... WHERE version = :old, 불일치 시 StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    team: Mapped[Team | None] = relationship(back_populates="members")

    __mapper_args__ = {"version_id_col": version}

    def __init__(self, username: str, age: int = 0, team: Team | None = None) -> None:
        self.username = username
        self.age = age
        if team is not None:
            self.change_team(team)

    def change_team(self, team: Team) -> None:
        """소속 팀 변경 — 양방향 모두 반영.

        Set the owning side; back_populates appends this member to
        ``team.members`` without loading the collection.
        """
        self.team = team

    def __repr__(self) -> str:
        # team은 출력하지 않음 — never touches the lazy relation
        return f"Member(id={self.id}, username={self.username!r}, age={self.age})"
