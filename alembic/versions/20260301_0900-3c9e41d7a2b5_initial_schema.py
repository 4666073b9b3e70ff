"""initial_schema

Revision ID: 3c9e41d7a2b5
Revises:
Create Date: 2026-03-01 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3c9e41d7a2b5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create users, profiles, relationships, groups, memberships and messages.

    Enum columns are stored as VARCHAR (non-native enums).
    """
    op.create_table('users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('external_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_external_id', 'users', ['external_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    op.create_table('user_profiles',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('nickname', sa.String(length=100), nullable=True),
        sa.Column('profile_photo_key', sa.String(length=500), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )
    op.create_index('idx_user_profiles_nickname', 'user_profiles', ['nickname'], unique=False)

    op.create_table('user_relationships',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('target_user_id', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['target_user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_user_relationships_user', 'user_relationships', ['user_id'], unique=False)
    op.create_index('idx_user_relationships_target', 'user_relationships', ['target_user_id'], unique=False)
    op.create_index('idx_user_relationships_user_target', 'user_relationships', ['user_id', 'target_user_id'], unique=False)

    op.create_table('groups',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_groups_created_by', 'groups', ['created_by'], unique=False)

    op.create_table('group_members',
        sa.Column('group_id', sa.String(length=255), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('group_id', 'user_id')
    )
    op.create_index('idx_group_members_user', 'group_members', ['user_id'], unique=False)

    op.create_table('messages',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('author_id', sa.String(length=255), nullable=False),
        sa.Column('group_id', sa.String(length=255), nullable=True),
        sa.Column('recipient_id', sa.String(length=255), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('file_key', sa.String(length=500), nullable=True),
        sa.Column('file_name', sa.String(length=255), nullable=True),
        sa.Column('file_type', sa.String(length=100), nullable=True),
        sa.Column('reply_to_id', sa.String(length=255), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=False),
        sa.Column('edited_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sequence_number', sa.BigInteger(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            '(group_id IS NOT NULL AND recipient_id IS NULL) OR '
            '(group_id IS NULL AND recipient_id IS NOT NULL)',
            name='ck_messages_single_channel'
        ),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reply_to_id'], ['messages.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('sequence_number')
    )
    op.create_index('ix_messages_author_id', 'messages', ['author_id'], unique=False)
    op.create_index('ix_messages_group_id', 'messages', ['group_id'], unique=False)
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'], unique=False)
    op.create_index('ix_messages_reply_to_id', 'messages', ['reply_to_id'], unique=False)
    op.create_index('idx_messages_group_seq', 'messages', ['group_id', sa.text('sequence_number DESC')], unique=False)
    op.create_index(
        'idx_messages_direct_pair',
        'messages',
        ['author_id', 'recipient_id', sa.text('sequence_number DESC')],
        unique=False
    )


def downgrade() -> None:
    """Drop the whole schema."""
    op.drop_index('idx_messages_direct_pair', table_name='messages')
    op.drop_index('idx_messages_group_seq', table_name='messages')
    op.drop_index('ix_messages_reply_to_id', table_name='messages')
    op.drop_index('ix_messages_recipient_id', table_name='messages')
    op.drop_index('ix_messages_group_id', table_name='messages')
    op.drop_index('ix_messages_author_id', table_name='messages')
    op.drop_table('messages')
    op.drop_index('idx_group_members_user', table_name='group_members')
    op.drop_table('group_members')
    op.drop_index('idx_groups_created_by', table_name='groups')
    op.drop_table('groups')
    op.drop_index('idx_user_relationships_user_target', table_name='user_relationships')
    op.drop_index('idx_user_relationships_target', table_name='user_relationships')
    op.drop_index('idx_user_relationships_user', table_name='user_relationships')
    op.drop_table('user_relationships')
    op.drop_index('idx_user_profiles_nickname', table_name='user_profiles')
    op.drop_table('user_profiles')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_external_id', table_name='users')
    op.drop_table('users')
