"""initial schema: users, messaging, calls, voice rooms and desktop apps

Revision ID: 7c1e2f9a0b3d
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c1e2f9a0b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('username', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('plan', sa.JSON(), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('sip', sa.String(255), nullable=True),
        sa.Column('billing', sa.JSON(), nullable=True),
        sa.Column('chat_enabled', sa.Boolean(), nullable=False),
        sa.Column('ai_enabled', sa.Boolean(), nullable=False),
        sa.Column('localmail_enabled', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('sender_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('recipient_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_recipient_id', 'messages', ['recipient_id'])
    op.create_index('ix_messages_timestamp', 'messages', ['timestamp'])
    op.create_index('idx_messages_recipient_unread', 'messages', ['recipient_id', 'is_read'])

    op.create_table(
        'calls',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('caller_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('callee_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('answered_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_calls_caller_id', 'calls', ['caller_id'])
    op.create_index('ix_calls_callee_id', 'calls', ['callee_id'])
    op.create_index('ix_calls_status', 'calls', ['status'])
    op.create_index('ix_calls_created_at', 'calls', ['created_at'])
    op.create_index('idx_calls_caller_status', 'calls', ['caller_id', 'status'])
    op.create_index('idx_calls_callee_status', 'calls', ['callee_id', 'status'])

    op.create_table(
        'voice_servers',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
    )
    op.bulk_insert(
        sa.table('voice_servers', sa.column('id', sa.String), sa.column('name', sa.String)),
        [
            {'id': 'general', 'name': 'General'},
            {'id': 'tech', 'name': 'Tech'},
            {'id': 'support', 'name': 'Support'},
        ],
    )

    op.create_table(
        'voice_server_participants',
        sa.Column('room_id', sa.String(255), sa.ForeignKey('voice_servers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'voice_messages',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('room_id', sa.String(255), sa.ForeignKey('voice_servers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('audio_data', sa.LargeBinary(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_voice_messages_room_created', 'voice_messages', ['room_id', 'created_at'])

    op.create_table(
        'notes',
        sa.Column('user_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_contacts_user_id', 'contacts', ['user_id'])
    op.create_index('idx_contacts_user_name', 'contacts', ['user_id', 'name'])

    op.create_table(
        'localmails',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('sender_id', sa.String(255), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('recipient_username', sa.String(255), nullable=False),
        sa.Column('subject', sa.Text(), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_localmails_sender_id', 'localmails', ['sender_id'])
    op.create_index('ix_localmails_recipient_username', 'localmails', ['recipient_username'])


def downgrade() -> None:
    op.drop_table('localmails')
    op.drop_table('contacts')
    op.drop_table('notes')
    op.drop_table('voice_messages')
    op.drop_table('voice_server_participants')
    op.drop_table('voice_servers')
    op.drop_table('calls')
    op.drop_table('messages')
    op.drop_table('users')
