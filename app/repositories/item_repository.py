"""상품 레포지토리 — 직접 할당 ID 엔티티 저장.

Item Repository — Items carry caller-assigned ids, so BaseRepository.save
relies on ``Item.is_new()`` to persist new items instead of merging them.
"""

from app.models.item import Item
from app.repositories.base import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """상품 테이블 레포지토리 — Repository for the item table."""

    def __init__(self) -> None:
        super().__init__(Item)


# 싱글턴 인스턴스 — Singleton instance
item_repository: ItemRepository = ItemRepository()
