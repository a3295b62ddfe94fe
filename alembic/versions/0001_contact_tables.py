"""create contact tables

Revision ID: 0001_contact_tables
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_contact_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Contact subsystem tables.

    Enum columns are plain VARCHARs (non-native enums) so no PostgreSQL
    enum types are created.
    """

    # ============================================
    # CONTACT SETTINGS
    # ============================================
    op.create_table(
        'contact_settings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=True),
        sa.Column('user_email', sa.String(100), nullable=True),
        sa.Column('user_role', sa.String(30), nullable=True),
        sa.Column('allow_contact_requests', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('allow_direct_messages', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('allow_meeting_requests', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('role_permissions', sa.JSON(), nullable=False),
        sa.Column('privacy_level', sa.String(30), nullable=False, server_default='private'),
        sa.Column('blocked_users', sa.JSON(), nullable=False),
        sa.Column('whitelisted_users', sa.JSON(), nullable=False),
        sa.Column('contact_preferences', sa.JSON(), nullable=False),
        sa.Column('notification_settings', sa.JSON(), nullable=False),
        sa.Column('business_hours', sa.JSON(), nullable=True),
        sa.Column('auto_response', sa.Text(), nullable=True),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='UTC'),
        *_timestamps(),
    )
    op.create_index('ix_contact_settings_user_id', 'contact_settings', ['user_id'], unique=True)

    # ============================================
    # CONTACT REQUESTS
    # ============================================
    op.create_table(
        'contact_requests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('requester_id', sa.String(64), nullable=False),
        sa.Column('requester_name', sa.String(100), nullable=False),
        sa.Column('requester_email', sa.String(100), nullable=False),
        sa.Column('requester_role', sa.String(30), nullable=False),
        sa.Column('target_id', sa.String(64), nullable=False),
        sa.Column('target_name', sa.String(100), nullable=False),
        sa.Column('target_email', sa.String(100), nullable=False),
        sa.Column('target_role', sa.String(30), nullable=False),
        sa.Column('request_type', sa.String(30), nullable=False),
        sa.Column('subject', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, server_default='pending'),
        sa.Column('priority', sa.String(30), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(30), nullable=False, server_default='other'),
        sa.Column('attachments', sa.JSON(), nullable=True),
        sa.Column('response_message', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('responded_by', sa.String(64), nullable=True),
        sa.Column('scheduled_meeting', sa.JSON(), nullable=True),
        sa.Column('follow_up_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('requester_id != target_id', name='no_self_request'),
    )
    op.create_index('ix_contact_requests_requester_id', 'contact_requests', ['requester_id'])
    op.create_index('ix_contact_requests_target_id', 'contact_requests', ['target_id'])

    # ============================================
    # CONVERSATIONS
    # ============================================
    op.create_table(
        'contact_conversations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('participant1_id', sa.String(64), nullable=False),
        sa.Column('participant1_name', sa.String(100), nullable=False),
        sa.Column('participant1_email', sa.String(100), nullable=False),
        sa.Column('participant1_role', sa.String(30), nullable=False),
        sa.Column('participant2_id', sa.String(64), nullable=False),
        sa.Column('participant2_name', sa.String(100), nullable=False),
        sa.Column('participant2_email', sa.String(100), nullable=False),
        sa.Column('participant2_role', sa.String(30), nullable=False),
        sa.Column('conversation_type', sa.String(30), nullable=False, server_default='direct_message'),
        sa.Column('subject', sa.String(200), nullable=False),
        sa.Column('status', sa.String(30), nullable=False, server_default='active'),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_message_id', sa.Uuid(), nullable=True),
        sa.Column('last_message_content', sa.Text(), nullable=True),
        sa.Column('last_message_sender', sa.String(100), nullable=True),
        sa.Column('unread_count1', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('unread_count2', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_archived1', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_archived2', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_blocked1', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_blocked2', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_contact_conversations_participant1_id', 'contact_conversations', ['participant1_id'])
    op.create_index('ix_contact_conversations_participant2_id', 'contact_conversations', ['participant2_id'])

    # ============================================
    # MESSAGES
    # ============================================
    op.create_table(
        'contact_messages',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'conversation_id',
            sa.Uuid(),
            sa.ForeignKey('contact_conversations.id', ondelete='CASCADE'),
            nullable=False
        ),
        sa.Column('sender_id', sa.String(64), nullable=False),
        sa.Column('sender_name', sa.String(100), nullable=False),
        sa.Column('sender_email', sa.String(100), nullable=False),
        sa.Column('sender_role', sa.String(30), nullable=False),
        sa.Column('recipient_id', sa.String(64), nullable=False),
        sa.Column('recipient_name', sa.String(100), nullable=False),
        sa.Column('recipient_email', sa.String(100), nullable=False),
        sa.Column('recipient_role', sa.String(30), nullable=False),
        sa.Column('message_type', sa.String(30), nullable=False, server_default='text'),
        sa.Column('subject', sa.String(200), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('attachments', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_encrypted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('priority', sa.String(30), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(30), nullable=False, server_default='other'),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_contact_messages_conversation_id', 'contact_messages', ['conversation_id'])
    op.create_index('ix_contact_messages_sender_id', 'contact_messages', ['sender_id'])
    op.create_index('ix_contact_messages_recipient_id', 'contact_messages', ['recipient_id'])

    # ============================================
    # NOTIFICATIONS
    # ============================================
    op.create_table(
        'contact_notifications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('user_name', sa.String(100), nullable=True),
        sa.Column('user_email', sa.String(100), nullable=True),
        sa.Column('notification_type', sa.String(30), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('related_id', sa.String(64), nullable=True),
        sa.Column('related_type', sa.String(50), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('priority', sa.String(30), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(30), nullable=False, server_default='other'),
        sa.Column('action_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('action_url', sa.String(500), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_contact_notifications_user_id', 'contact_notifications', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_contact_notifications_user_id', table_name='contact_notifications')
    op.drop_table('contact_notifications')

    op.drop_index('ix_contact_messages_recipient_id', table_name='contact_messages')
    op.drop_index('ix_contact_messages_sender_id', table_name='contact_messages')
    op.drop_index('ix_contact_messages_conversation_id', table_name='contact_messages')
    op.drop_table('contact_messages')

    op.drop_index('ix_contact_conversations_participant2_id', table_name='contact_conversations')
    op.drop_index('ix_contact_conversations_participant1_id', table_name='contact_conversations')
    op.drop_table('contact_conversations')

    op.drop_index('ix_contact_requests_target_id', table_name='contact_requests')
    op.drop_index('ix_contact_requests_requester_id', table_name='contact_requests')
    op.drop_table('contact_requests')

    op.drop_index('ix_contact_settings_user_id', table_name='contact_settings')
    op.drop_table('contact_settings')
