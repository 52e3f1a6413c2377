"""create_team_member_item

Revision ID: a1f3c9d2e7b4
Revises:
Create Date: 2026-10-19 10:00:00.000000

팀, 회원, 상품 테이블 생성.
Create team, member and item tables.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f3c9d2e7b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # team — 팀 (auditing listener columns)
    op.create_table(
        'team',
        sa.Column('team_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_modified_date', sa.DateTime(timezone=True), nullable=True),
    )

    # member — 회원 (owning side of member → team, optimistic lock version)
    op.create_table(
        'member',
        sa.Column('member_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('age', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('team.team_id'), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_date', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_member_username', 'member', ['username'])
    op.create_index('ix_member_team_id', 'member', ['team_id'])

    # item — 상품 (caller-assigned string id)
    op.create_table(
        'item',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('created_date', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('item')
    op.drop_index('ix_member_team_id', table_name='member')
    op.drop_index('ix_member_username', table_name='member')
    op.drop_table('member')
    op.drop_table('team')
