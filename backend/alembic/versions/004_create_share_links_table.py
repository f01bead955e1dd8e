"""create_share_links_table

Revision ID: 004_create_share_links
Revises: 003_create_settings
Create Date: 2026-10-05

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '004_create_share_links'
down_revision: Union[str, None] = '003_create_settings'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Cria a tabela share_links com as constraints de unicidade."""
    op.create_table(
        'share_links',
        sa.Column(
            'id',
            postgresql.UUID(as_uuid=True),
            nullable=False,
            server_default=sa.text('gen_random_uuid()'),
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column('share_id', sa.String(length=32), nullable=False),
        sa.Column('resource_type', sa.String(length=20), nullable=False),
        sa.Column('resource_id', sa.String(length=100), nullable=False),
        sa.Column(
            'custom_design',
            postgresql.JSON(),
            nullable=False,
            server_default='{}',
        ),
        sa.Column(
            'is_active',
            sa.Boolean(),
            nullable=False,
            server_default=sa.text('true'),
        ),
        sa.Column(
            'view_count',
            sa.Integer(),
            nullable=False,
            server_default='0',
        ),
        sa.Column('last_viewed', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'created_by',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint('id'),
        # No maximo um link por recurso
        sa.UniqueConstraint(
            'resource_type',
            'resource_id',
            name='uq_share_links_resource',
        ),
    )

    op.create_index('ix_share_links_share_id', 'share_links', ['share_id'], unique=True)
    op.create_index('ix_share_links_created_by', 'share_links', ['created_by'])


def downgrade() -> None:
    """Remove a tabela share_links."""
    op.drop_index('ix_share_links_created_by', table_name='share_links')
    op.drop_index('ix_share_links_share_id', table_name='share_links')
    op.drop_table('share_links')
