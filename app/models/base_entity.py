"""감사(Auditing) 베이스 타입 — 등록일/수정일 자동 기록.

Auditing base types — Automatic created/modified timestamps.

Two styles are provided:
    - Auditable / BaseTimeEntity: 리스너가 컬럼을 채움
      (mapper listeners stamp ``created_date`` / ``last_modified_date``)
    - JpaBaseEntity: 엔티티 자신의 라이프사이클 훅
      (the entity's own ``pre_persist`` / ``pre_update`` hooks)

``created_date`` is written once on insert and never touched by updates.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, event, inspect
from sqlalchemy.orm import Mapped, mapped_column


def utc_now() -> datetime:
    """현재 UTC 시각 — Current UTC timestamp."""
    return datetime.now(timezone.utc)


class Auditable:
    """감사 리스너 마커 — Marker for listener-based auditing.

    Any mapped subclass gets ``created_date`` stamped on insert and
    ``last_modified_date`` stamped on insert and update, for whichever of the
    two columns it declares.
    """


@event.listens_for(Auditable, "before_insert", propagate=True)
def _stamp_created(mapper, connection, target: Auditable) -> None:
    now: datetime = utc_now()
    if hasattr(target, "created_date") and target.created_date is None:
        target.created_date = now
    if hasattr(target, "last_modified_date"):
        target.last_modified_date = now


def _keep_created_date(target: object) -> None:
    """등록일 수정 불가 — Restore the committed ``created_date`` before UPDATE.

    An assignment to ``created_date`` on a persistent entity is undone, so
    the column keeps its insert timestamp.
    """
    if not hasattr(target, "created_date"):
        return
    history = inspect(target).attrs.created_date.history
    if history.deleted and history.deleted[0] is not None:
        target.created_date = history.deleted[0]


@event.listens_for(Auditable, "before_update", propagate=True)
def _stamp_modified(mapper, connection, target: Auditable) -> None:
    _keep_created_date(target)
    if hasattr(target, "last_modified_date"):
        target.last_modified_date = utc_now()


class BaseTimeEntity(Auditable):
    """등록일/수정일 매핑 슈퍼클래스 — Listener-audited timestamp columns.

    Attributes:
        created_date: 등록 일시 UTC, 수정 불가 (Insert timestamp, never updated)
        last_modified_date: 최종 수정 일시 UTC (Last modification timestamp)
    """

    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    last_modified_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class JpaBaseEntity:
    """라이프사이클 훅 기반 등록일/수정일 — Hook-driven timestamp columns.

    The ORM calls ``pre_persist`` right before INSERT and ``pre_update``
    right before UPDATE. One mixin covers every entity that inherits it.

    Attributes:
        created_date: 등록 일시 UTC (Insert timestamp)
        updated_date: 수정 일시 UTC (Last update timestamp)
    """

    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def pre_persist(self) -> None:
        now: datetime = utc_now()
        self.created_date = now
        self.updated_date = now

    def pre_update(self) -> None:
        self.updated_date = utc_now()


@event.listens_for(JpaBaseEntity, "before_insert", propagate=True)
def _call_pre_persist(mapper, connection, target: JpaBaseEntity) -> None:
    target.pre_persist()


@event.listens_for(JpaBaseEntity, "before_update", propagate=True)
def _call_pre_update(mapper, connection, target: JpaBaseEntity) -> None:
    _keep_created_date(target)
    target.pre_update()
