"""create_settings_table

Revision ID: 003_create_settings
Revises: 002_create_campaigns
Create Date: 2026-10-05

"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '003_create_settings'
down_revision: Union[str, None] = '002_create_campaigns'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Cria a tabela settings (uma linha por categoria, valores criptografados)."""
    op.create_table(
        'settings',
        # --- Campos herdados de BaseModel ---
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
        # --- Campos da categoria ---
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('encrypted_values', sa.Text(), nullable=False),
        sa.Column(
            'updated_by',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('users.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column(
            'last_modified',
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            'is_active',
            sa.Boolean(),
            nullable=False,
            server_default=sa.text('true'),
        ),
        sa.PrimaryKeyConstraint('id'),
    )

    # Unicidade de categoria garantida pelo banco (upserts concorrentes)
    op.create_index('ix_settings_category', 'settings', ['category'], unique=True)
    op.create_index('ix_settings_updated_by', 'settings', ['updated_by'])


def downgrade() -> None:
    """Remove a tabela settings e seus indices."""
    op.drop_index('ix_settings_updated_by', table_name='settings')
    op.drop_index('ix_settings_category', table_name='settings')
    op.drop_table('settings')
