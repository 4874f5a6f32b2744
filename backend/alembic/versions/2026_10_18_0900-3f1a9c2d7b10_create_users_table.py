"""create users table

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('login', sa.String(length=50), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('mobile', sa.String(length=20), nullable=True),
        sa.Column('first_name', sa.String(length=50), nullable=True),
        sa.Column('last_name', sa.String(length=50), nullable=True),
        sa.Column('lang_key', sa.String(length=10), nullable=True),
        sa.Column('activated', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('activation_key', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    # Unique indexes back the login/email uniqueness checks under concurrent writes
    op.create_index('ix_users_login', 'users', ['login'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_mobile', 'users', ['mobile'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_users_mobile', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_login', table_name='users')
    op.drop_table('users')
