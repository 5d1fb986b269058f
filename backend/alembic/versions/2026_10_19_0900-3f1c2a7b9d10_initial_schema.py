"""Initial schema: users, likes, matches and admins

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3f1c2a7b9d10'
down_revision = None
branch_labels = None
depends_on = None

GENDERS = ('male', 'female', 'other')
STATUSES = ('active', 'inactive', 'suspended')


def upgrade():
    gender = sa.Enum(*GENDERS, name='gender')
    account_status = sa.Enum(*STATUSES, name='account_status')

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=False),
        sa.Column('gender', gender, nullable=False),
        sa.Column('religion', sa.String(length=100), nullable=True),
        sa.Column('occupation', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('about', sa.Text(), nullable=True),
        sa.Column('profile_picture', sa.String(length=1024), nullable=False, server_default=''),
        sa.Column('additional_pictures', sa.JSON(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('status', account_status, nullable=False, server_default='active'),
        sa.Column('likes_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('pref_age_min', sa.Integer(), nullable=False, server_default='18'),
        sa.Column('pref_age_max', sa.Integer(), nullable=False, server_default='65'),
        sa.Column('pref_religion', sa.String(length=100), nullable=True),
        sa.Column('pref_location', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('last_active', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_created_at', 'users', ['created_at'])
    op.create_index('ix_users_date_of_birth', 'users', ['date_of_birth'])
    op.create_index('ix_users_religion', 'users', ['religion'])

    op.create_table(
        'user_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('liker_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('liked_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('liker_id', 'liked_id', name='uq_user_like'),
        sa.CheckConstraint('liker_id <> liked_id', name='ck_user_like_not_self'),
    )
    op.create_index('ix_user_likes_id', 'user_likes', ['id'])
    op.create_index('ix_user_likes_liker_id', 'user_likes', ['liker_id'])
    op.create_index('ix_user_likes_liked_id', 'user_likes', ['liked_id'])

    op.create_table(
        'user_matches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('matched_user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('matched_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'matched_user_id', name='uq_user_match'),
    )
    op.create_index('ix_user_matches_id', 'user_matches', ['id'])
    op.create_index('ix_user_matches_user_id', 'user_matches', ['user_id'])
    op.create_index('ix_user_matches_matched_user_id', 'user_matches', ['matched_user_id'])

    # account_status was created with the users table
    existing_status = sa.Enum(*STATUSES, name='account_status').with_variant(
        postgresql.ENUM(*STATUSES, name='account_status', create_type=False), 'postgresql'
    )
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='admin'),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('status', existing_status, nullable=False, server_default='active'),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admins_id', 'admins', ['id'])
    op.create_index('ix_admins_email', 'admins', ['email'], unique=True)


def downgrade():
    op.drop_table('admins')
    op.drop_table('user_matches')
    op.drop_table('user_likes')
    op.drop_table('users')
    sa.Enum(name='account_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='gender').drop(op.get_bind(), checkfirst=True)
