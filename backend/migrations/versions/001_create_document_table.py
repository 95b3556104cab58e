"""Create document table

Revision ID: 001
Revises:
Create Date: 2026-09-01 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create document table with content-hash deduplication per owner."""

    op.execute("""
        CREATE TYPE authenticationstatus AS ENUM (
            'unauthenticated',
            'authenticating',
            'authenticated'
        )
    """)

    op.create_table(
        'document',
        sa.Column('id', sa.String(36), nullable=False),

        # File metadata
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.Text(), nullable=False),
        sa.Column('size_bytes', sa.BigInteger(), nullable=False),
        sa.Column('hash_sha256', sa.String(64), nullable=False),

        # Storage location
        sa.Column('bucket', sa.Text(), nullable=False),
        sa.Column('object_key', sa.Text(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False, server_default=''),

        sa.Column('owner_id', sa.BigInteger(), nullable=False),

        sa.Column('authentication_status', postgresql.ENUM('unauthenticated', 'authenticating', 'authenticated',
                                                           name='authenticationstatus', create_type=False),
                  nullable=False, server_default='unauthenticated'),

        # Timestamps
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('ix_document_owner_id', 'document', ['owner_id'])

    # Same bytes for the same owner are stored once
    op.create_index('ux_document_hash_owner', 'document', ['hash_sha256', 'owner_id'], unique=True)


def downgrade():
    """Drop document table and enum."""

    op.drop_index('ux_document_hash_owner', table_name='document')
    op.drop_index('ix_document_owner_id', table_name='document')

    op.drop_table('document')

    op.execute('DROP TYPE authenticationstatus')
