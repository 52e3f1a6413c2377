"""초기 데이터 시드 스크립트 — 페이징 확인용 회원 생성.

Seed script — Creates members to browse through the paged endpoints.

Usage:
    python -m app.seed

Creates:
    - SEED_MEMBER_COUNT명의 회원: user0 (0세) ~ user99 (99세)
      (``SEED_MEMBER_COUNT`` members named user{i}, aged i)
"""

import asyncio

from sqlalchemy import select

from app.config import settings
from app.database import Base, async_session, engine
from app.models import Member
from app.repositories.member_repository import member_repository


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with members.
    Creates tables if they don't exist, then inserts the members.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        # 회원이 하나라도 있으면 건너뜀 (Skip when any member already exists)
        result = await db.execute(select(Member).limit(1))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        for i in range(settings.SEED_MEMBER_COUNT):
            await member_repository.save(db, Member(f"user{i}", i))

        await db.commit()
        print(f"Seeded: {settings.SEED_MEMBER_COUNT} members")


if __name__ == "__main__":
    asyncio.run(seed())
