"""Create sessions table

Revision ID: 001_create_sessions_table
Revises:
Create Date: 2025-01-15 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_create_sessions_table'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the sessions table and its lookup indexes."""
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('session_id', sa.String(length=255), nullable=False, unique=True),
        sa.Column('token', sa.String(length=255), nullable=False, unique=True),
        sa.Column('session_data', sa.JSON(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('ip_address', sa.String(length=255), nullable=True),
        sa.Column('user_agent', sa.String(), nullable=True),
        sa.Column('csrf_token', sa.String(length=255), nullable=True),
        sa.Column(
            'status',
            sa.Enum('ACTIVE', 'EXPIRED', 'REVOKED', name='sessionstatus'),
            nullable=False,
        ),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('last_accessed_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )

    # Expiry sweeps, per-user sign-out and audit by address
    op.create_index('ix_sessions_expires_at', 'sessions', ['expires_at'], unique=False)
    op.create_index('ix_sessions_user_id', 'sessions', ['user_id'], unique=False)
    op.create_index('ix_sessions_status', 'sessions', ['status'], unique=False)
    op.create_index('ix_sessions_ip_address', 'sessions', ['ip_address'], unique=False)


def downgrade() -> None:
    """Drop the sessions table."""
    op.drop_index('ix_sessions_ip_address', table_name='sessions')
    op.drop_index('ix_sessions_status', table_name='sessions')
    op.drop_index('ix_sessions_user_id', table_name='sessions')
    op.drop_index('ix_sessions_expires_at', table_name='sessions')
    op.drop_table('sessions')
    sa.Enum(name='sessionstatus').drop(op.get_bind(), checkfirst=True)
