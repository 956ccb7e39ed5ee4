"""create memories table

Revision ID: 3f1c2a9d8b71
Revises:
Create Date: 2026-10-19 09:12:04.318227
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3f1c2a9d8b71'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'memories',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('coverUrl', sa.String(), nullable=False),
        sa.Column('isPublic', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('userId', sa.String(length=36), nullable=False),
        sa.Column('createdAt', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_memories_userId', 'memories', ['userId'])
    op.create_index('ix_memories_createdAt', 'memories', ['createdAt'])

def downgrade():
    op.drop_index('ix_memories_createdAt', table_name='memories')
    op.drop_index('ix_memories_userId', table_name='memories')
    op.drop_table('memories')
