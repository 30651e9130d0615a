"""baseline_migration

Revision ID: 5c1e7a2b9d40
Revises: 
Create Date: 2026-10-19 10:12:41.118204

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c1e7a2b9d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('google_id', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=True),
            sa.Column('profile_picture', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    if not table_exists('images'):
        op.create_table('images',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('filename', sa.String(), nullable=False),
            sa.Column('original_name', sa.String(), nullable=False),
            sa.Column('path', sa.String(), nullable=False),
            sa.Column('size', sa.Integer(), nullable=False),
            sa.Column('mimetype', sa.String(), nullable=False),
            sa.Column('uploaded_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_images_user_uploaded', 'images', ['user_id', 'uploaded_at'], unique=False)
        op.create_index(op.f('ix_images_id'), 'images', ['id'], unique=False)
        op.create_index(op.f('ix_images_user_id'), 'images', ['user_id'], unique=False)
        op.create_index(op.f('ix_images_uploaded_at'), 'images', ['uploaded_at'], unique=False)

    if not table_exists('analyses'):
        op.create_table('analyses',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('image_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('positive_traits', sa.JSON(), nullable=False),
            sa.Column('negative_traits', sa.JSON(), nullable=False),
            sa.Column('personality_analysis', sa.JSON(), nullable=False),
            sa.Column('age_health_analysis', sa.JSON(), nullable=False),
            sa.Column('beauty_analysis', sa.JSON(), nullable=False),
            sa.Column('confidence', sa.Float(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('image_id', 'user_id', name='uq_analysis_image_user')
        )
        op.create_index(op.f('ix_analyses_id'), 'analyses', ['id'], unique=False)
        op.create_index(op.f('ix_analyses_image_id'), 'analyses', ['image_id'], unique=False)
        op.create_index(op.f('ix_analyses_user_id'), 'analyses', ['user_id'], unique=False)

    if not table_exists('analysis_usage'):
        op.create_table('analysis_usage',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('count', sa.Integer(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'date', name='uq_usage_user_date')
        )
        op.create_index(op.f('ix_analysis_usage_id'), 'analysis_usage', ['id'], unique=False)
        op.create_index(op.f('ix_analysis_usage_user_id'), 'analysis_usage', ['user_id'], unique=False)
        op.create_index(op.f('ix_analysis_usage_date'), 'analysis_usage', ['date'], unique=False)


def downgrade() -> None:
    op.drop_table('analysis_usage')
    op.drop_table('analyses')
    op.drop_table('images')
    op.drop_table('users')
