"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create initial database schema:
    - users table: Accounts owning short URLs
    - urls table: Short code to original URL mappings (cascade on user delete)
    - analytics table: One row per redirect (cascade on url delete)
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    if 'users' not in existing_tables:
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('username', sa.String(length=20), nullable=False),
            sa.Column('email', sa.String(length=255), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_users_username', 'users', ['username'], unique=True)
        op.create_index('ix_users_email', 'users', ['email'], unique=True)

    if 'urls' not in existing_tables:
        op.create_table(
            'urls',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('short_code', sa.String(length=20), nullable=False),
            sa.Column('original_url', sa.Text(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=True),
            sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE')
        )
        op.create_index('ix_urls_short_code', 'urls', ['short_code'], unique=True)
        op.create_index('ix_urls_user_id', 'urls', ['user_id'])

    if 'analytics' not in existing_tables:
        op.create_table(
            'analytics',
            sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
            sa.Column('url_id', sa.Integer(), nullable=False),
            sa.Column('user_agent', sa.Text(), nullable=True),
            sa.Column('referer', sa.Text(), nullable=True),
            sa.Column('ip_address', sa.String(length=45), nullable=False),
            sa.Column('clicked_at', sa.DateTime(timezone=True), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.ForeignKeyConstraint(['url_id'], ['urls.id'], ondelete='CASCADE')
        )
        op.create_index('ix_analytics_url_id', 'analytics', ['url_id'])
        op.create_index('ix_analytics_clicked_at', 'analytics', ['clicked_at'])


def downgrade() -> None:
    """Drop all tables, children first."""
    op.drop_index('ix_analytics_clicked_at', table_name='analytics')
    op.drop_index('ix_analytics_url_id', table_name='analytics')
    op.drop_table('analytics')

    op.drop_index('ix_urls_user_id', table_name='urls')
    op.drop_index('ix_urls_short_code', table_name='urls')
    op.drop_table('urls')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
