"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    base_entity: 감사 베이스 타입 (Auditing base types)
    member: 회원 및 팀 (Member and Team)
    item: 상품 (Item with caller-assigned id)
"""

from app.models.base_entity import Auditable, BaseTimeEntity, JpaBaseEntity
from app.models.member import Member, Team
from app.models.item import Item

__all__ = [
    "Auditable", "BaseTimeEntity", "JpaBaseEntity",
    "Member", "Team",
    "Item",
]
