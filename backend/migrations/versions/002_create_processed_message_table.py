"""Create processed_message table (idempotency ledger)

Revision ID: 002
Revises: 001
Create Date: 2026-09-01 00:00:01.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'processed_message',
        sa.Column('message_id', sa.String(255), nullable=False),
        sa.Column('processed_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('document_id', sa.String(36), nullable=False, server_default=''),
        sa.Column('processed_by', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('message_id'),
    )

    # Purge scans by expiry
    op.create_index('ix_processed_message_expires_at', 'processed_message', ['expires_at'])


def downgrade():
    op.drop_index('ix_processed_message_expires_at', table_name='processed_message')
    op.drop_table('processed_message')
