"""Initial schema with all tables

Revision ID: 001
Revises:
Create Date: 2026-10-01

Creates all GetStreetCred database tables:
- users: Accounts (username = normalized email, bcrypt password, role)
- projects: Rated infrastructure projects with derived rating aggregates
- ratings: Individual 1-5 scores with optional review
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(255), unique=True, nullable=False),
        sa.Column('password', sa.String(128), nullable=False),
        sa.Column('role', sa.String(10), nullable=False, server_default='user'),
        sa.Column('profile_picture_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'])

    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('location', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('completion_year', sa.Integer(), nullable=False),
        # Aggregates
        sa.Column('rating', sa.String(10), nullable=False, server_default='0'),
        sa.Column('rating_count', sa.Integer(), nullable=False, server_default='0'),
        # Ownership / featuring
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_projects_category', 'projects', ['category'])
    op.create_index('ix_projects_user_id', 'projects', ['user_id'])
    op.create_index(
        'uq_projects_single_featured',
        'projects',
        ['is_featured'],
        unique=True,
        sqlite_where=sa.text('is_featured = 1'),
        postgresql_where=sa.text('is_featured'),
    )

    # Create ratings table
    op.create_table(
        'ratings',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('review', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_ratings_rating_range'),
    )
    op.create_index('ix_ratings_project_id', 'ratings', ['project_id'])
    op.create_index('ix_ratings_user_id', 'ratings', ['user_id'])


def downgrade() -> None:
    op.drop_table('ratings')
    op.drop_table('projects')
    op.drop_table('users')
