"""상품 모델 — 직접 할당하는 문자열 PK와 신규 여부 판단.

Item model — Caller-assigned string primary key.
Because the id is set before saving, "id is None" cannot tell new items from
existing ones; ``is_new`` uses the insert timestamp instead.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.base_entity import Auditable


class Item(Auditable, Base):
    """상품 엔티티.

    Attributes:
        id: 직접 할당 식별자 (Caller-assigned identifier)
        created_date: 등록 일시, INSERT 직전에 기록 (Stamped right before INSERT)
    """

    __tablename__ = "item"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __init__(self, id: str) -> None:
        self.id = id

    def is_new(self) -> bool:
        """아직 저장되지 않았는지 — True until the first INSERT stamps created_date."""
        return self.created_date is None

    def __repr__(self) -> str:
        return f"Item(id={self.id!r})"
