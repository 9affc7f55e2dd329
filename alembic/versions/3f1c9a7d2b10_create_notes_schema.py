"""create_notes_schema

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

plan_enum = postgresql.ENUM('FREE', 'PRO', name='plan', create_type=False)
role_enum = postgresql.ENUM('ADMIN', 'MEMBER', name='role', create_type=False)
invitation_status_enum = postgresql.ENUM(
    'PENDING', 'ACCEPTED', 'EXPIRED', 'CANCELLED', name='invitation_status', create_type=False
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create tenant, user, note and invitation tables with their enums."""
    bind = op.get_bind()
    plan_enum.create(bind, checkfirst=True)
    role_enum.create(bind, checkfirst=True)
    invitation_status_enum.create(bind, checkfirst=True)

    op.create_table(
        'tenant',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('plan', plan_enum, nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_tenant_id', 'tenant', ['id'])
    op.create_index('ix_tenant_slug', 'tenant', ['slug'], unique=True)

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenant.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('email', 'tenant_id', name='user_email_tenant_id_key'),
    )
    op.create_index('ix_user_id', 'user', ['id'])
    op.create_index('ix_user_email', 'user', ['email'])
    op.create_index('ix_user_tenant_id', 'user', ['tenant_id'])

    op.create_table(
        'note',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenant.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_note_id', 'note', ['id'])
    op.create_index('ix_note_tenant_id', 'note', ['tenant_id'])

    op.create_table(
        'invitation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('status', invitation_status_enum, nullable=False),
        sa.Column('tenant_id', sa.Integer(), sa.ForeignKey('tenant.id', ondelete='CASCADE'), nullable=False),
        sa.Column('invited_by', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_invitation_id', 'invitation', ['id'])
    op.create_index('ix_invitation_email', 'invitation', ['email'])
    op.create_index('ix_invitation_token', 'invitation', ['token'], unique=True)
    op.create_index('ix_invitation_tenant_id', 'invitation', ['tenant_id'])


def downgrade() -> None:
    """Drop all tables and enums."""
    op.drop_table('invitation')
    op.drop_table('note')
    op.drop_table('user')
    op.drop_table('tenant')

    bind = op.get_bind()
    invitation_status_enum.drop(bind, checkfirst=True)
    role_enum.drop(bind, checkfirst=True)
    plan_enum.drop(bind, checkfirst=True)
