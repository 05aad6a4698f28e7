"""Initial schema: items and matches

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy's Enum stores member names
ITEM_TYPES = ('LOST', 'FOUND')
ITEM_STATUSES = ('ACTIVE', 'CLAIMED', 'MATCHED', 'RETURNED', 'CLOSED', 'REMOVED')
CONFIDENCE_TIERS = ('LOW', 'MEDIUM', 'HIGH')
MATCH_STATUSES = ('PENDING', 'CONFIRMED', 'REJECTED', 'EXPIRED')
MATCH_TYPES = ('AI_GENERATED', 'USER_SUGGESTED', 'MANUAL')


def upgrade() -> None:
    item_type_enum = postgresql.ENUM(*ITEM_TYPES, name='itemtype', create_type=False)
    item_status_enum = postgresql.ENUM(*ITEM_STATUSES, name='itemstatus', create_type=False)
    confidence_enum = postgresql.ENUM(*CONFIDENCE_TIERS, name='confidencetier', create_type=False)
    match_status_enum = postgresql.ENUM(*MATCH_STATUSES, name='matchstatus', create_type=False)
    match_type_enum = postgresql.ENUM(*MATCH_TYPES, name='matchtype', create_type=False)

    for enum_type in (item_type_enum, item_status_enum, confidence_enum, match_status_enum, match_type_enum):
        enum_type.create(op.get_bind(), checkfirst=True)

    # Create items table
    op.create_table(
        'items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('type', item_type_enum, nullable=False),
        sa.Column('status', item_status_enum, server_default='ACTIVE'),
        sa.Column('reported_by', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index('ix_items_category', 'items', ['category'])
    op.create_index('ix_items_type', 'items', ['type'])
    op.create_index('ix_items_status', 'items', ['status'])

    # Create matches table
    op.create_table(
        'matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('lost_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('found_item_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('items.id'), nullable=False),
        sa.Column('similarity', sa.Float(), nullable=False),
        sa.Column('confidence', confidence_enum, nullable=False),
        sa.Column('status', match_status_enum, server_default='PENDING'),
        sa.Column('match_type', match_type_enum, nullable=False, server_default='AI_GENERATED'),
        sa.Column('match_details', postgresql.JSONB(), nullable=True),
        sa.Column('confirmed_by', sa.String(100), nullable=True),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('lost_item_id', 'found_item_id', name='uq_matches_lost_found'),
    )
    op.create_index('ix_matches_lost_item_id', 'matches', ['lost_item_id'])
    op.create_index('ix_matches_found_item_id', 'matches', ['found_item_id'])
    op.create_index('ix_matches_status', 'matches', ['status'])
    op.create_index('ix_matches_similarity', 'matches', ['similarity'])


def downgrade() -> None:
    op.drop_table('matches')
    op.drop_table('items')

    # Drop enums
    for name in ('matchtype', 'matchstatus', 'confidencetier', 'itemstatus', 'itemtype'):
        op.execute(f'DROP TYPE IF EXISTS {name}')
